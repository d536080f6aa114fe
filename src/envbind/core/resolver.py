"""Resolution engine.

The resolver turns a binding context and a target type into a value.
Three shapes are handled:

- leaf types read a single variable and parse its raw string;
- composite types (Pydantic models) resolve each field with a child
  context, in declaration order, stopping at the first error;
- optional types resolve to `None` when nothing is set for them and
  delegate to the inner type otherwise.
"""

import logging
from typing import TYPE_CHECKING, Any, overload

from envbind.context import Context
from envbind.environ import Environment
from envbind.errors import (
    EmptyVarError,
    IllegalValueError,
    IllegalVarError,
    ParseDefaultError,
    ParseEnvError,
    ParseNotImplementedError,
)
from envbind.parsers import Parsers
from envbind.settings import BindingSettings

from .fields import iter_fields
from .types import describe_type, is_composite, strip_annotated, unwrap_optional
from .usage import format_usage

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from pydantic import BaseModel

if TYPE_CHECKING:
    from envbind.environ import RawValue
    from envbind.parsers import Parser

logger = logging.getLogger(__name__)

#: Exceptions treated as a parse failure of a raw value.
PARSE_ERRORS = (ValueError, TypeError, ArithmeticError)


class Resolver:
    """Resolves typed values from environment variables.

    Args:
        environ: Environment mapping or view. Defaults to the live
            `os.environ`.
        settings: Collection parsing settings. Read from `ENVBIND_*`
            variables when omitted.
        parsers: Leaf parser registry. A fresh registry is created when
            omitted.
    """

    def __init__(self, environ: 'Mapping[str, RawValue] | Environment | None' = None, *,
                 settings: BindingSettings | None = None,
                 parsers: Parsers | None = None) -> None:
        """Initialize the resolver."""
        if isinstance(environ, Environment):
            self.environment = environ
        else:
            self.environment = Environment(environ)

        if settings is None:
            settings = parsers.settings if parsers is not None else BindingSettings()

        self.settings = settings
        self.parsers = parsers or Parsers(settings)

    @overload
    def init[M: BaseModel](self, target: type[M]) -> M:
        ...  # pragma: no cover

    @overload
    def init(self, target: Any) -> Any:  # noqa: ANN401
        ...  # pragma: no cover

    def init(self, target: Any) -> Any:
        """Resolve a target without prefix."""
        return self.with_prefix(target, '')

    @overload
    def with_prefix[M: BaseModel](self, target: type[M], prefix: str) -> M:
        ...  # pragma: no cover

    @overload
    def with_prefix(self, target: Any, prefix: str) -> Any:  # noqa: ANN401
        ...  # pragma: no cover

    def with_prefix(self, target: Any, prefix: str) -> Any:
        """Resolve a target under a root prefix."""
        return self.with_context(target, Context.new(prefix))

    @overload
    def with_context[M: BaseModel](self, target: type[M], context: Context) -> M:
        ...  # pragma: no cover

    @overload
    def with_context(self, target: Any, context: Context) -> Any:  # noqa: ANN401
        ...  # pragma: no cover

    def with_context(self, target: Any, context: Context) -> Any:
        """Resolve a target from a binding context.

        Args:
            target: Leaf, composite or optional type.
            context: Binding context of the target.

        Returns:
            The resolved value.

        Raises:
            EmptyVarError: If a required variable is absent.
            IllegalVarError: If a variable is not valid text or has
                illegal syntax.
            ParseEnvError: If a variable value can not be parsed.
            ParseDefaultError: If a declared default can not be parsed.
            DefinitionError: If the target type is not supported.
        """
        target = strip_annotated(target)

        if (inner := unwrap_optional(target)) is not None:
            return self._resolve_optional(inner, context)

        if is_composite(target):
            return self._resolve_composite(target, context)

        return self._resolve_leaf(target, context)

    def parse(self, target: Any, raw: str) -> Any:  # noqa: ANN401
        """Parse a raw string into a leaf value.

        Args:
            target: Leaf or optional leaf type.
            raw: Raw string.

        Returns:
            Parsed value.

        Raises:
            ParseNotImplementedError: If the target is a composite type.
            DefinitionError: If the target type is not supported.
            ValueError: If the raw string is not valid for the type.
        """
        target = strip_annotated(target)

        if (inner := unwrap_optional(target)) is not None:
            return self.parse(inner, raw)

        if is_composite(target):
            raise ParseNotImplementedError(
                f'Method parse is not implemented for composite type `{target.__name__}`',
            )

        return self.parsers.parse(target, raw)

    def usage_with_context(self, target: Any, context: Context) -> list[Context]:  # noqa: ANN401
        """Collect one context per leaf variable of a target.

        Args:
            target: Leaf, composite or optional type.
            context: Binding context of the target.

        Returns:
            Leaf contexts in declaration order.

        Raises:
            DefinitionError: If a leaf type is not supported.
        """
        target = strip_annotated(target)

        if (inner := unwrap_optional(target)) is not None:
            return self.usage_with_context(inner, context.with_default_value(None))

        if is_composite(target):
            return [
                leaf
                for binding in iter_fields(target)
                for leaf in self.usage_with_context(binding.annotation, binding.bind(context))
            ]

        self.parsers.get(target)
        if context.var_type is None:
            context = context.with_var_type(describe_type(target))

        return [context]

    def usage(self, target: Any, prefix: str = '') -> str:  # noqa: ANN401
        """Render the usage table of a target.

        Args:
            target: Leaf, composite or optional type.
            prefix: Optional root prefix.

        Returns:
            A `NAME`, `TYPE`, `DEFAULT` table.
        """
        return format_usage(self.usage_with_context(target, Context.new(prefix)))

    def _resolve_optional(self, target: Any, context: Context) -> Any:  # noqa: ANN401
        """Resolve `T | None`.

        Presence is checked under the field prefix, never the override name.
        A composite is considered set when any variable lives under the
        prefix, a leaf when the variable named exactly as the prefix exists.
        """
        name = context.prefix()
        if is_composite(target):
            found = self.environment.has_prefix(name)
        else:
            found = self.environment.lookup(name).present

        if not found:
            logger.debug('Nothing set for optional %s under %r', describe_type(target), name)
            return None

        return self.with_context(target, context)

    def _resolve_composite(self, target: type['BaseModel'], context: Context) -> 'BaseModel':
        """Resolve a model field by field, failing on the first error."""
        logger.debug('Resolving %s under prefix %r', target.__name__, context.prefix())

        values = {
            binding.name: self.with_context(binding.annotation, binding.bind(context))
            for binding in iter_fields(target)
        }

        return target.model_validate(values, by_name=True)

    def _resolve_leaf(self, target: Any, context: Context) -> Any:  # noqa: ANN401
        """Resolve a leaf value from a single variable."""
        parser = self.parsers.get(target)
        name = context.infer_var_name()
        variable = self.environment.lookup(name)

        if variable.value is not None:
            logger.debug('Reading %r as %s', name, describe_type(target))
            return self._parse(parser, name, variable.value, ParseEnvError)

        if (default := context.get_default_value()) is not None:
            logger.debug('Variable %r is not set, using default value', name)
            return self._parse(parser, name, default, ParseDefaultError)

        if variable.present:
            raise IllegalVarError(name)

        raise EmptyVarError(name)

    @staticmethod
    def _parse(parser: 'Parser[Any]', name: str, raw: str,
               error_type: type[ParseEnvError | ParseDefaultError]) -> Any:  # noqa: ANN401
        """Run a parser and classify its failure."""
        try:
            return parser(raw)
        except IllegalValueError as error:
            raise IllegalVarError(name, value=raw, cause=error) from error
        except PARSE_ERRORS as error:
            raise error_type(name, raw, error) from error
