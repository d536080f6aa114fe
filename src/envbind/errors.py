"""Core exception hierarchy.

This module defines the error and warning types raised while binding
configuration structures to environment variables. Every resolution
failure aborts the enclosing resolution and is reported with the name
of the offending variable, the raw value (when there is one), and the
underlying parse failure.
"""

from os import linesep

MESSAGE_PREFIX = 'Configuration from environment variables failed.'
FORMAT_INDENT = 4


class EnvBindWarning(UserWarning):
    """Warning emitted for non-fatal declaration issues.

    Used when a field declaration is accepted but part of it can never
    take effect (for example, a default on an optional field).
    """


class EnvError(Exception):
    """Base exception for all envbind errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 var_name: str | None = None,
                 cause: BaseException | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            var_name: Name of the environment variable involved, if any.
            cause: Underlying exception that triggered the error.
        """
        self.message = message
        self.var_name = var_name
        self.cause = cause

        super().__init__(message)

    def __str__(self) -> str:
        """String representation with the underlying cause."""
        if self.cause is None:
            return self.message

        return f'{self.message}{linesep}{' ' * FORMAT_INDENT}{self.cause}'


class EmptyVarError(EnvError):
    """Variable is absent and no default value is declared."""

    def __init__(self, var_name: str) -> None:
        """Initialize the error.

        Args:
            var_name: Name of the missing environment variable.
        """
        super().__init__(
            f'{MESSAGE_PREFIX} Environment variable `{var_name}` not present',
            var_name=var_name,
        )


class IllegalVarError(EnvError):
    """Variable is present but holds an illegal value.

    Raised when the value is not valid text or when a mapping value
    contains a malformed `KEY=VALUE` pair.
    """

    def __init__(self, var_name: str, *,
                 value: str | None = None,
                 cause: BaseException | None = None) -> None:
        """Initialize the error.

        Args:
            var_name: Name of the environment variable.
            value: Offending raw value, when it is representable.
            cause: Underlying exception, if any.
        """
        self.var_value = value

        message = f'{MESSAGE_PREFIX} Environment variable `{var_name}` contains illegal value'
        if value is not None:
            message += f' `{value}`'

        super().__init__(message, var_name=var_name, cause=cause)


class ParseEnvError(EnvError):
    """Variable value failed the target type parse routine."""

    def __init__(self, var_name: str, var_value: str, cause: BaseException) -> None:
        """Initialize the error.

        Args:
            var_name: Name of the environment variable.
            var_value: Raw value read from the environment.
            cause: Exception raised by the parser.
        """
        self.var_value = var_value

        super().__init__(
            f'{MESSAGE_PREFIX} Variable: `{var_name}` with value `{var_value}`',
            var_name=var_name,
            cause=cause,
        )


class ParseDefaultError(EnvError):
    """Declared default value failed the target type parse routine.

    Distinguished from `ParseEnvError` so callers can tell a bad
    deployment value from a bad declaration-time default.
    """

    def __init__(self, var_name: str, var_value: str, cause: BaseException) -> None:
        """Initialize the error.

        Args:
            var_name: Name of the environment variable.
            var_value: Declared default value.
            cause: Exception raised by the parser.
        """
        self.var_value = var_value

        super().__init__(
            f'{MESSAGE_PREFIX} Variable: `{var_name}` with default value `{var_value}`',
            var_name=var_name,
            cause=cause,
        )


class DefinitionError(EnvError):
    """Error raised when a configuration declaration can not be bound.

    This exception indicates an unsupported field type or a malformed
    field attribute. It is a programming error, not a deployment one.
    """


class ParseNotImplementedError(EnvError, NotImplementedError):
    """Error raised when parsing is requested for a composite type.

    Composite structures are resolved field by field and never parsed
    from a single raw string.
    """


class IllegalValueError(ValueError):
    """Parse-level error for a value with illegal syntax.

    Raised by collection parsers (for example, a mapping item without
    the pair separator) and reported by the resolver as `IllegalVarError`.
    """

    def __init__(self, value: str, expected: str) -> None:
        """Initialize the error.

        Args:
            value: Offending fragment of the raw value.
            expected: Short description of the expected syntax.
        """
        self.value = value
        self.expected = expected

        super().__init__(f'Illegal value `{value}` (expected {expected})')
