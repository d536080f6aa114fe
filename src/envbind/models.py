"""Base Pydantic models.

This module defines the foundational model classes used across the
library: the immutable schema model behind binding contexts, the
settings model used for the library's own configuration, and the
`EnvModel` base for user configuration structures.
"""

from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from envbind.context import Context
    from envbind.environ import Environment


class SchemaModel(BaseModel):
    """Base immutable model for library value objects.

    Design principles enforced by this model:
        - Immutability: instances cannot be modified after creation, so
          every derived value is a new object.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for settings resolved from the environment.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so the surrounding environment may contain unrelated variables.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )


class EnvModel(SchemaModel):
    """Base model for configuration structures bound to the environment.

    Each field is resolved from an environment variable named after the
    upper-cased field name, prefixed by the names of enclosing structures.
    Field attributes are attached with `Annotated[T, Var(...)]`.

    Example:
        >>> class Config(EnvModel):
        ...     host: Annotated[str, Var('DB_HOST')]
        ...     port: Annotated[int, Var(default='5432')]
        >>> config = Config.init()
    """

    @classmethod
    def init(cls, environ: 'Mapping[str, str | bytes] | Environment | None' = None) -> Self:
        """Resolve the structure from the environment without prefix.

        Args:
            environ: Optional environment mapping, `os.environ` by default.

        Returns:
            A populated model instance.

        Raises:
            EnvError: If any field can not be resolved.
        """
        return cls.with_prefix('', environ)

    @classmethod
    def with_prefix(cls, prefix: str,
                    environ: 'Mapping[str, str | bytes] | Environment | None' = None) -> Self:
        """Resolve the structure under a name prefix.

        Args:
            prefix: Root prefix segment, used verbatim.
            environ: Optional environment mapping, `os.environ` by default.

        Returns:
            A populated model instance.
        """
        from envbind.core import Resolver  # noqa: PLC0415

        return Resolver(environ).with_prefix(cls, prefix)

    @classmethod
    def with_context(cls, context: 'Context',
                     environ: 'Mapping[str, str | bytes] | Environment | None' = None) -> Self:
        """Resolve the structure from an explicit binding context.

        Args:
            context: Binding context of the structure.
            environ: Optional environment mapping, `os.environ` by default.

        Returns:
            A populated model instance.
        """
        from envbind.core import Resolver  # noqa: PLC0415

        return Resolver(environ).with_context(cls, context)

    @classmethod
    def usage(cls, prefix: str = '') -> str:
        """Render the usage table of the structure.

        Args:
            prefix: Optional root prefix segment.

        Returns:
            A table with one row per leaf variable.
        """
        from envbind.core import Resolver  # noqa: PLC0415

        return Resolver({}).usage(cls, prefix)

    @classmethod
    def usage_with_context(cls, context: 'Context') -> list['Context']:
        """Collect one binding context per leaf variable."""
        from envbind.core import Resolver  # noqa: PLC0415

        return Resolver({}).usage_with_context(cls, context)
