"""Field binding for composite structures.

For every field of a model this module derives the child binding context
the same way for resolution and usage collection:

    context.with_var_name(override or '')
           .push_prefix(FIELD_NAME)
           .with_default_value(default)

Fields are enumerated in declaration order, which fixes the order of
environment reads and therefore which error is reported first.
"""

from functools import cache
from typing import TYPE_CHECKING, Any, NamedTuple
from warnings import warn

from envbind.attributes import Var
from envbind.errors import DefinitionError, EnvBindWarning

from .types import describe_type, is_composite, unwrap_optional

if TYPE_CHECKING:
    from pydantic import BaseModel
    from pydantic.fields import FieldInfo

if TYPE_CHECKING:
    from envbind.context import Context


class FieldBinding(NamedTuple):
    """Binding of a single model field."""

    #: Field name as declared on the model.
    name: str
    #: Field type with `Annotated` metadata stripped.
    annotation: Any
    #: Binding attribute, empty when the field declares none.
    var: Var

    @property
    def segment(self) -> str:
        """Path segment contributed by the field."""
        return self.name.upper()

    def bind(self, context: 'Context') -> 'Context':
        """Derive the field context from its parent context.

        Args:
            context: Context of the enclosing structure.

        Returns:
            Context of the field.
        """
        return (
            context
            .with_var_name(self.var.env or '')
            .push_prefix(self.segment)
            .with_default_value(self.var.default)
            .with_var_type(describe_type(self.annotation))
        )


def _get_attribute(model: type['BaseModel'], name: str, info: 'FieldInfo') -> Var:
    """Extract the binding attribute of a field.

    Raises:
        DefinitionError: If more than one attribute is declared.
    """
    attributes = [item for item in info.metadata if isinstance(item, Var)]
    if len(attributes) > 1:
        raise DefinitionError(f'Field `{name}` of `{model.__name__}` declares more than one Var')

    if attributes:
        return attributes[0]

    return Var()


def _check_field(model: type['BaseModel'], binding: FieldBinding, info: 'FieldInfo') -> None:
    """Emit warnings for declarations that never take effect."""
    inner = unwrap_optional(binding.annotation)
    location = f'`{binding.name}` of `{model.__name__}`'

    if binding.var.default is not None:
        if is_composite(inner or binding.annotation):
            warn(f'Default value of composite field {location} is never used',
                 category=EnvBindWarning, stacklevel=4)
        elif inner is not None:
            warn(f'Default value of optional field {location} is never used',
                 category=EnvBindWarning, stacklevel=4)

    if not info.is_required() and not (inner is not None and info.default is None):
        warn(f'Model default of field {location} is ignored, declare `Var(default=...)` instead',
             category=EnvBindWarning, stacklevel=4)


@cache
def iter_fields(model: type['BaseModel']) -> tuple[FieldBinding, ...]:
    """Collect the field bindings of a model.

    Results are cached per model, so declaration warnings are emitted
    once per model.

    Args:
        model: Pydantic model class.

    Returns:
        Field bindings in declaration order.

    Raises:
        DefinitionError: If a field declaration is malformed.
    """
    bindings = []
    for name, info in model.model_fields.items():
        binding = FieldBinding(name, info.annotation, _get_attribute(model, name, info))
        _check_field(model, binding, info)
        bindings.append(binding)

    return tuple(bindings)
