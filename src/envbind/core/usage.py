"""Usage table rendering."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from envbind.context import Context

NAME_WIDTH = 24
TYPE_WIDTH = 32
DELIMITER = '-' * 90

#: Placeholder for an unset default or an unknown type.
EMPTY_CELL = '-'


def format_usage_type(context: 'Context') -> str:
    """Render the type column of a row."""
    return context.var_type or EMPTY_CELL


def format_usage_default(context: 'Context') -> str:
    """Render the default column of a row."""
    if (default := context.get_default_value()) is None:
        return EMPTY_CELL

    return default


def format_field_usage(context: 'Context') -> str:
    """Render a single usage row."""
    return (
        f'{context.infer_var_name():<{NAME_WIDTH}}\t'
        f'{format_usage_type(context):<{TYPE_WIDTH}}\t'
        f'{format_usage_default(context)}'
    )


def format_usage(contexts: 'Iterable[Context]') -> str:
    """Render a usage table.

    Args:
        contexts: One leaf context per row.

    Returns:
        Header, delimiter and rows joined with newlines.
    """
    header = f'{'NAME':<{NAME_WIDTH}}\t{'TYPE':<{TYPE_WIDTH}}\tDEFAULT'

    return '\n'.join([
        header,
        DELIMITER,
        *(format_field_usage(context) for context in contexts),
    ])
