"""Leaf value types and literal grammars.

This module defines the collection origins split into items and the
literal grammars of booleans and human-readable durations (for
example, `"123s"` or `"1h 30m"`).
"""

from datetime import timedelta
from re import ASCII
from re import compile as regexp

#: Collection origins split into items before parsing.
SEQUENCES = (list, tuple, set, frozenset)
MAPPINGS = (dict,)

_SECOND = 1.0
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

#: Duration units in seconds. Months and years use average lengths.
DURATION_UNITS: dict[str, float] = {
    'nsec': 1e-9, 'ns': 1e-9,
    'usec': 1e-6, 'us': 1e-6,
    'msec': 1e-3, 'ms': 1e-3,
    'seconds': _SECOND, 'second': _SECOND, 'sec': _SECOND, 's': _SECOND,
    'minutes': _MINUTE, 'minute': _MINUTE, 'min': _MINUTE, 'm': _MINUTE,
    'hours': _HOUR, 'hour': _HOUR, 'hr': _HOUR, 'h': _HOUR,
    'days': _DAY, 'day': _DAY, 'd': _DAY,
    'weeks': 7 * _DAY, 'week': 7 * _DAY, 'w': 7 * _DAY,
    'months': 30.44 * _DAY, 'month': 30.44 * _DAY, 'M': 30.44 * _DAY,
    'years': 365.25 * _DAY, 'year': 365.25 * _DAY, 'y': 365.25 * _DAY,
}

DURATION_PATTERN = regexp(r'\s*(?P<amount>\d+)\s*(?P<unit>[a-zA-Z]+)', flags=ASCII)


def parse_duration(raw: str) -> timedelta:
    """Parse a human-readable duration literal.

    The literal is a sequence of `<integer><unit>` groups, optionally
    separated by whitespace, for example `"15min"`, `"2h 30m"`, `"1d12h"`.

    Args:
        raw: Duration literal.

    Returns:
        The total duration.

    Raises:
        ValueError: If the literal is empty, has an unknown unit,
            or contains characters outside of the grammar.
    """
    text = raw.strip()
    if not text:
        raise ValueError('value was empty')

    seconds = 0.0
    position = 0
    while position < len(text):
        if not (group := DURATION_PATTERN.match(text, position)):
            raise ValueError(f'invalid duration literal {raw!r}')

        unit = group.group('unit')
        if unit not in DURATION_UNITS:
            raise ValueError(f'unknown time unit {unit!r}, supported units: ns, us, ms, s, m, h, d, w, M, y')

        seconds += int(group.group('amount')) * DURATION_UNITS[unit]
        position = group.end()

    return timedelta(seconds=seconds)


def parse_bool(raw: str) -> bool:
    """Parse a strict boolean literal.

    Only `"true"` and `"false"` are accepted.

    Raises:
        ValueError: For any other literal.
    """
    match raw:
        case 'true':
            return True
        case 'false':
            return False

    raise ValueError('provided string was not `true` or `false`')
