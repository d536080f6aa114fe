"""Type introspection helpers.

Classifies target annotations into the three resolution shapes (optional,
composite and leaf) and renders them for usage tables.
"""

from re import compile as regexp
from types import NoneType, UnionType
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel

from envbind.errors import DefinitionError

#: Strips dotted module paths from rendered types.
MODULE_PATH_PATTERN = regexp(r'(\w+\.)+(\w+)')


def strip_annotated(target: Any) -> Any:  # noqa: ANN401
    """Return the underlying type of an `Annotated[...]` annotation."""
    while get_origin(target) is Annotated:
        target = get_args(target)[0]

    return target


def unwrap_optional(target: Any) -> Any | None:  # noqa: ANN401
    """Return the inner type of an optional annotation.

    Args:
        target: Any annotation.

    Returns:
        `T` for `T | None` or `Optional[T]`, `None` for non-union types.

    Raises:
        DefinitionError: For unions other than a single type with `None`.
    """
    if get_origin(target) not in (Union, UnionType):
        return None

    args = [arg for arg in get_args(target) if arg is not NoneType]
    if len(args) != 1 or len(args) == len(get_args(target)):
        raise DefinitionError(f'Union type {describe_type(target)!r} is not supported, only `T | None` is')

    return strip_annotated(args[0])


def is_composite(target: Any) -> bool:  # noqa: ANN401
    """Check whether a type is resolved field by field."""
    return isinstance(target, type) and issubclass(target, BaseModel)


def describe_type(target: Any) -> str:  # noqa: ANN401
    """Render a type annotation without module paths.

    Examples:
        >>> describe_type(int | None)
        'int | None'
        >>> describe_type(dict[str, pathlib.Path])
        'dict[str, Path]'
    """
    target = strip_annotated(target)
    origin = get_origin(target)
    args = get_args(target)

    if target is None or target is NoneType:
        return 'None'
    if target is Ellipsis:
        return '...'

    if origin in (Union, UnionType):
        return ' | '.join(describe_type(arg) for arg in args)
    if origin is Literal:
        return f'Literal[{', '.join(repr(arg) for arg in args)}]'
    if origin is not None and args:
        return f'{describe_type(origin)}[{', '.join(describe_type(arg) for arg in args)}]'

    if isinstance(target, type):
        return target.__name__

    return MODULE_PATH_PATTERN.sub(r'\2', repr(target))
