"""Leaf parsers.

This module maps leaf target types onto functions converting a single
raw string into a value. Scalars are looked up in a registry; sequences
and mappings are split into items that are parsed by the scalar parser
of their item type.

Parsers raise `ValueError` (or `TypeError`, `ArithmeticError`) on bad
input. They never see the variable name: the resolver attaches it.
"""

from collections.abc import Callable
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from functools import partial
from pathlib import Path
from types import NoneType
from typing import TYPE_CHECKING, Any, Literal, get_args, get_origin

from pydantic import ByteSize, SecretStr, TypeAdapter

from envbind.errors import DefinitionError, IllegalValueError
from envbind.settings import BindingSettings
from envbind.values import MAPPINGS, SEQUENCES, parse_bool, parse_duration

if TYPE_CHECKING:
    from collections.abc import Mapping

type Parser[T] = Callable[[str], T]

#: Hook name for user types that parse themselves.
PARSE_HOOK = 'parse_env'

_BYTE_SIZE = TypeAdapter(ByteSize)


def parse_str(raw: str) -> str:
    """Return the raw string unchanged."""
    return raw


def parse_byte_size(raw: str) -> ByteSize:
    """Parse a byte size literal such as `"15MB"` or `"1.5GiB"`.

    Decimal units (`KB`, `MB`, ...) are powers of 1000, binary units
    (`KiB`, `MiB`, ...) are powers of 1024.
    """
    return _BYTE_SIZE.validate_python(raw)


def parse_enum[E: Enum](target: type[E], raw: str) -> E:
    """Parse an enum member by value, then by member name.

    Raises:
        ValueError: If neither a value nor a name matches.
    """
    for member in target:
        if str(member.value) == raw:
            return member

    if raw in target.__members__:
        return target.__members__[raw]

    choices = ', '.join(str(member.value) for member in target)
    raise ValueError(f'{raw!r} is not a valid {target.__name__}, expected one of: {choices}')


def parse_literal(choices: tuple[Any, ...], raw: str) -> Any:  # noqa: ANN401
    """Parse one of the `Literal[...]` choices by its string form."""
    for choice in choices:
        if str(choice) == raw:
            return choice

    raise ValueError(f'{raw!r} is not one of: {', '.join(map(str, choices))}')


#: Default scalar parsers. `bool` is listed before `int` on purpose.
SCALAR_PARSERS: dict[type, Parser[Any]] = {
    str: parse_str,
    bool: parse_bool,
    int: int,
    float: float,
    Decimal: Decimal,
    timedelta: parse_duration,
    datetime: datetime.fromisoformat,
    date: date.fromisoformat,
    Path: Path,
    ByteSize: parse_byte_size,
    SecretStr: SecretStr,
}


class Parsers:
    """Registry of leaf parsers.

    Each resolver owns a registry, so registering a parser for a custom
    type never affects other resolvers.

    Args:
        settings: Collection splitting settings.
        scalars: Optional initial scalar parsers, `SCALAR_PARSERS` by default.
    """

    def __init__(self, settings: BindingSettings | None = None,
                 scalars: 'Mapping[type, Parser[Any]] | None' = None) -> None:
        """Initialize the registry."""
        self.settings = settings or BindingSettings()
        self.scalars: dict[type, Parser[Any]] = dict(SCALAR_PARSERS if scalars is None else scalars)

    def register(self, target: type, parser: Parser[Any]) -> None:
        """Register (or replace) the parser of a scalar type.

        Args:
            target: Target type.
            parser: Callable converting a raw string into a `target` value.
        """
        self.scalars[target] = parser

    def parse(self, target: Any, raw: str) -> Any:  # noqa: ANN401
        """Parse a raw string into a target type value."""
        return self.get(target)(raw)

    def get(self, target: Any) -> Parser[Any]:  # noqa: ANN401
        """Resolve the parser of a leaf type.

        Args:
            target: Leaf type, scalar or collection.

        Returns:
            A parser callable.

        Raises:
            DefinitionError: If the type is not a supported leaf.
        """
        origin = get_origin(target)

        if target in SEQUENCES:
            return self.get(target[str, ...] if target is tuple else target[str])
        if target in MAPPINGS:
            return self.get(dict[str, str])

        if origin in SEQUENCES:
            return self._sequence_parser(origin, get_args(target))
        if origin in MAPPINGS:
            return self._mapping_parser(get_args(target))

        return self.get_scalar(target)

    def get_scalar(self, target: Any) -> Parser[Any]:  # noqa: ANN401
        """Resolve the parser of a scalar type.

        Lookup order: `Literal[...]` choices, the registry (exact type),
        enum types, types defining a `parse_env` classmethod, and finally
        the registry entry of the nearest registered base class.

        Raises:
            DefinitionError: If the type is not a supported scalar.
        """
        if get_origin(target) is Literal:
            return partial(parse_literal, get_args(target))

        if not isinstance(target, type) or target is NoneType:
            raise DefinitionError(f'Type {target!r} is not supported as a leaf value')

        if target in self.scalars:
            return self.scalars[target]

        if issubclass(target, Enum):
            return partial(parse_enum, target)

        if callable(hook := getattr(target, PARSE_HOOK, None)):
            return hook

        for base in target.__mro__[1:]:
            if base in self.scalars and base is not object:
                return self._subclass_parser(target, self.scalars[base])

        raise DefinitionError(f'Type {target.__name__!r} is not supported as a leaf value')

    @staticmethod
    def _subclass_parser(target: type, parser: Parser[Any]) -> Parser[Any]:
        """Wrap a base class parser to build a subclass instance."""
        def parse(raw: str) -> Any:  # noqa: ANN401
            return target(parser(raw))

        return parse

    def _split(self, raw: str, separator: str) -> list[str]:
        """Split a raw value into items."""
        if not raw.strip():
            return []

        items = raw.split(separator)
        if self.settings.strip_items:
            items = [item.strip() for item in items]

        return items

    def _sequence_parser(self, origin: type, args: tuple[Any, ...]) -> Parser[Any]:
        """Build a parser for `list[T]`, `tuple[T, ...]`, `set[T]`, `frozenset[T]`."""
        if origin is tuple and (len(args) != 2 or args[1] is not Ellipsis):  # noqa: PLR2004
            raise DefinitionError('Only homogeneous tuples `tuple[T, ...]` are supported')

        item_parser = self.get_scalar(args[0] if args else str)
        separator = self.settings.item_separator

        def parse(raw: str) -> Any:  # noqa: ANN401
            return origin(item_parser(item) for item in self._split(raw, separator))

        return parse

    def _mapping_parser(self, args: tuple[Any, ...]) -> Parser[Any]:
        """Build a parser for `dict[K, V]` given as `K=V` pairs."""
        key_type, value_type = args or (str, str)

        key_parser = self.get_scalar(key_type)
        value_parser = self.get_scalar(value_type)
        separator = self.settings.item_separator
        pair_separator = self.settings.pair_separator

        def parse(raw: str) -> dict[Any, Any]:
            mapping = {}
            for item in self._split(raw, separator):
                key, found, value = item.partition(pair_separator)
                if not found:
                    raise IllegalValueError(item, f'`KEY{pair_separator}VALUE`')
                if self.settings.strip_items:
                    key, value = key.strip(), value.strip()
                mapping[key_parser(key)] = value_parser(value)
            return mapping

        return parse
