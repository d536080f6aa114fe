"""Resolution engine, field binding and usage rendering."""

from .fields import FieldBinding, iter_fields
from .resolver import Resolver
from .types import describe_type, is_composite, unwrap_optional
from .usage import format_field_usage, format_usage

__all__ = (
    'FieldBinding',
    'Resolver',
    'describe_type',
    'format_field_usage',
    'format_usage',
    'is_composite',
    'iter_fields',
    'unwrap_optional',
)
