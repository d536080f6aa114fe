"""Field attributes for configuration structures.

Attributes are attached to model fields with `typing.Annotated`:

    class Config(EnvModel):
        host: Annotated[str, Var('DB_HOST')]
        port: Annotated[int, Var(default='5432')]
        debug: bool

A field without an attribute is bound to the upper-cased field name
prefixed by the names of enclosing structures.
"""

from dataclasses import dataclass

from envbind.errors import DefinitionError


@dataclass(frozen=True, slots=True)
class Var:
    """Environment binding attribute of a single field.

    Stored by Pydantic as-is in `FieldInfo.metadata`, so it must not
    expose any Pydantic schema hooks.
    """

    #: Explicit variable name, used verbatim instead of the inferred name.
    env: str | None = None
    #: Raw fallback string parsed when the variable is absent.
    default: str | None = None

    def __post_init__(self) -> None:
        """Validate attribute values.

        Raises:
            DefinitionError: If a value is not a string.
        """
        if self.env is not None and not isinstance(self.env, str):
            raise DefinitionError(f'Variable name must be a string, got {self.env!r}')

        if self.default is not None and not isinstance(self.default, str):
            raise DefinitionError(
                f'Default value must be a raw string, got {self.default!r}; '
                f'use {str(self.default)!r} instead',
            )
