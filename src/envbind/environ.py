"""Environment variable lookup capability.

The resolution engine never reads `os.environ` directly. Instead it is
handed an `Environment`, a thin read-only view over any mapping. The
default view reads the live process environment on every lookup: values
are not snapshotted.
"""

import os
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

#: Values are strings, or raw bytes for byte-level sources.
type RawValue = str | bytes


class Variable(NamedTuple):
    """Result of an environment lookup."""

    #: Name that was looked up.
    name: str
    #: Decoded value, `None` when absent or not valid text.
    value: str | None
    #: Whether the name exists in the environment at all.
    present: bool

    @property
    def is_text(self) -> bool:
        """Whether the variable is present and holds valid text."""
        return self.value is not None


def _decode(raw: RawValue) -> str | None:
    """Decode a raw environment value into text.

    `os.environ` exposes undecodable bytes as lone surrogates, so a
    string value is only valid text if it encodes back to UTF-8.

    Args:
        raw: Raw value from the source mapping.

    Returns:
        Decoded text, or `None` if the value is not valid text.
    """
    if isinstance(raw, bytes):
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError:
            return None

    try:
        raw.encode('utf-8')
    except UnicodeEncodeError:
        return None

    return raw


class Environment:
    """Read-only view over an environment variable table.

    Args:
        source: Mapping of names to values. Defaults to `os.environ`.
    """

    def __init__(self, source: 'Mapping[str, RawValue] | None' = None) -> None:
        """Initialize the view."""
        self.source: 'Mapping[str, RawValue]' = os.environ if source is None else source

    def __repr__(self) -> str:
        """String representation."""
        if self.source is os.environ:
            return 'Environment(os.environ)'
        return f'Environment({len(self.source)} variables)'

    def lookup(self, name: str) -> Variable:
        """Look up a variable by name.

        Args:
            name: Variable name. An empty name is always absent.

        Returns:
            The lookup result.
        """
        if not name or name not in self.source:
            return Variable(name, None, present=False)

        return Variable(name, _decode(self.source[name]), present=True)

    def names(self) -> 'Iterator[str]':
        """Iterate over the names of all variables."""
        yield from self.source

    def has_prefix(self, prefix: str) -> bool:
        """Check whether any variable lives under a name prefix.

        A variable matches when its name equals the prefix or continues
        it with an underscore segment boundary. An empty prefix matches
        any variable.

        Args:
            prefix: Rendered name prefix.

        Returns:
            True if at least one variable matches.
        """
        if not prefix:
            return any(True for _ in self.names())

        scoped = f'{prefix}_'

        return any(
            name == prefix or name.startswith(scoped)
            for name in self.names()
        )
