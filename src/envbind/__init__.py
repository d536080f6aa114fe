"""Typed configuration structures populated from environment variables.

The `envbind` package binds nested Pydantic models onto the flat namespace
of process environment variables.

Key features:
- variable names inferred from upper-cased field names, prefixed by the
  names of enclosing structures (`DB_HOST` for `db.host`);
- explicit per-field names and raw default values via `Var`;
- optional fields and optional nested structures;
- scalar, duration, byte size, list and mapping leaf parsers;
- usage tables listing every variable, its type and default.

Example:
    >>> class Database(EnvModel):
    ...     host: str
    ...     port: Annotated[int, Var(default='5432')]
    >>> class Config(EnvModel):
    ...     db: Database
    ...     token: Annotated[SecretStr, Var('API_TOKEN')]
    >>> config = Config.init()  # reads DB_HOST, DB_PORT and API_TOKEN
"""

from envbind.attributes import Var
from envbind.context import Context
from envbind.core import Resolver
from envbind.environ import Environment
from envbind.errors import (
    DefinitionError,
    EmptyVarError,
    EnvBindWarning,
    EnvError,
    IllegalValueError,
    IllegalVarError,
    ParseDefaultError,
    ParseEnvError,
    ParseNotImplementedError,
)
from envbind.models import EnvModel
from envbind.parsers import Parsers
from envbind.settings import BindingSettings

__all__ = (
    'BindingSettings',
    'Context',
    'DefinitionError',
    'EmptyVarError',
    'EnvBindWarning',
    'EnvError',
    'EnvModel',
    'Environment',
    'IllegalValueError',
    'IllegalVarError',
    'ParseDefaultError',
    'ParseEnvError',
    'ParseNotImplementedError',
    'Parsers',
    'Resolver',
    'Var',
)
