"""Binding context for environment variable name resolution.

A context describes where in the configuration tree the resolution
currently is and how the corresponding environment variable is named.
Contexts are values: every operation returns a new context and never
mutates the receiver, so callers thread the returned value forward.
"""

from typing import Self

from pydantic import Field

from envbind.models import SchemaModel

#: Separator used to join path segments into a variable name.
SEGMENT_SEPARATOR = '_'


class Context(SchemaModel):
    """Immutable binding context.

    The effective variable name is the explicit override when one is
    set, otherwise the path segments joined with an underscore.
    """

    path: tuple[str, ...] = Field(
        default=(),
        title='Name path',
        description='Ordered name segments, outer to inner.',
    )

    var_name: str = Field(
        default='',
        title='Override name',
        description='Explicit variable name, used verbatim when not empty.',
    )

    default_value: str | None = Field(
        default=None,
        title='Default value',
        description='Raw fallback string parsed when the variable is absent.',
    )

    var_type: str | None = Field(
        default=None,
        title='Variable type',
        description='Rendered field type, used by usage tables only.',
    )

    @classmethod
    def new(cls, prefix: str = '') -> Self:
        """Create a root context.

        Args:
            prefix: Root segment. An empty prefix yields an empty path.

        Returns:
            A root context.
        """
        if not prefix:
            return cls()

        return cls(path=(prefix,))

    def prefix(self) -> str:
        """Render the path as an underscore-joined name."""
        return SEGMENT_SEPARATOR.join(self.path)

    def with_var_name(self, var_name: str) -> Self:
        """Set an explicit override name.

        Any previously attached default is cleared: defaults never leak
        across a rename.
        """
        return self.model_copy(update={
            'var_name': var_name,
            'default_value': None,
        })

    def push_prefix(self, segment: str) -> Self:
        """Append a path segment.

        Clears the default value and the type, keeps the override name.

        Args:
            segment: Segment appended verbatim.

        Returns:
            A new context one level deeper.
        """
        return self.model_copy(update={
            'path': (*self.path, segment),
            'default_value': None,
            'var_type': None,
        })

    def infer_var_name(self) -> str:
        """Return the effective environment variable name."""
        if self.var_name:
            return self.var_name

        return self.prefix()

    def with_default_value(self, value: str | None) -> Self:
        """Attach (or clear, with `None`) the raw default value."""
        return self.model_copy(update={'default_value': value})

    def get_default_value(self) -> str | None:
        """Return the raw default value, if any."""
        return self.default_value

    def with_var_type(self, var_type: str | None) -> Self:
        """Attach the rendered type name for usage output."""
        return self.model_copy(update={'var_type': var_type})
