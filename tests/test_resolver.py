"""Tests for leaf and composite resolution."""

from datetime import timedelta
from typing import TYPE_CHECKING, Annotated

import pytest
from pydantic import AliasChoices, Field

from envbind import (
    Context,
    DefinitionError,
    EmptyVarError,
    EnvModel,
    IllegalValueError,
    IllegalVarError,
    ParseEnvError,
    ParseNotImplementedError,
    Var,
)
from tests.examples.configs import APP_ENVIRON, AppConfig, Point

if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_mock import MockerFixture

    from envbind import Resolver

    type MakeResolver = Callable[..., Resolver]


class Server(EnvModel):
    """Flat structure with inferred names."""

    host: str
    port: int
    debug: bool


def test_resolve_leaf_with_prefix(make_resolver: 'MakeResolver') -> None:
    """Resolve a bare leaf type from the prefix name."""
    resolver = make_resolver({'PORT': '5432'})

    assert resolver.with_prefix(int, 'PORT') == 5432


def test_resolve_leaf_from_context(make_resolver: 'MakeResolver') -> None:
    """Resolve a bare leaf type from the effective context name."""
    resolver = make_resolver({'DB_PORT': '5432'})
    context = Context.new('APP').with_var_name('DB_PORT').push_prefix('PORT')

    assert resolver.with_context(int, context) == 5432


def test_init_bare_leaf_reports_empty_name(make_resolver: 'MakeResolver') -> None:
    """Report an empty name for a bare leaf without prefix."""
    with pytest.raises(EmptyVarError) as info:
        make_resolver({'PORT': '1'}).init(int)

    assert info.value.var_name == ''


def test_resolve_flat_structure(make_resolver: 'MakeResolver') -> None:
    """Bind every field to its upper-cased name."""
    resolver = make_resolver({'HOST': 'localhost', 'PORT': '8080', 'DEBUG': 'false'})

    server = resolver.init(Server)

    assert server == Server(host='localhost', port=8080, debug=False)


def test_resolve_every_leaf_family(make_resolver: 'MakeResolver') -> None:
    """Resolve explicit names, defaults, optionals and collections together."""
    config = make_resolver(APP_ENVIRON).init(AppConfig)

    assert config.port == 1234
    assert config.host == 'localhost'
    assert config.label is None
    assert config.default_ttl == timedelta(seconds=123)
    assert config.point == Point(1, 2)
    assert config.maybe_db is None
    assert config.body_max_size == 15_000_000
    assert config.enabled is True
    assert config.string_list == ['a', 'b', 'c']
    assert config.int_list == [1, 2, 3]
    assert config.strstrmap == {'a': 'b', 'c': 'd'}


def test_resolve_is_idempotent(make_resolver: 'MakeResolver') -> None:
    """Produce equal results for an unchanged environment."""
    resolver = make_resolver({**APP_ENVIRON, 'LABEL': 'blue', 'MAYBE_DB_DSN': 'dsn', 'MAYBE_DB_SECRET': 'x'})

    assert resolver.init(AppConfig) == resolver.init(AppConfig)


def test_missing_variable(make_resolver: 'MakeResolver') -> None:
    """Fail with the name of the missing variable."""
    with pytest.raises(EmptyVarError, match=r'Environment variable `PORT` not present$') as info:
        make_resolver({'HOST': 'localhost', 'DEBUG': 'true'}).init(Server)

    assert info.value.var_name == 'PORT'


def test_fail_fast_in_declaration_order(make_resolver: 'MakeResolver',
                                        mocker: 'MockerFixture') -> None:
    """Stop at the first missing field and never read later fields."""
    resolver = make_resolver({'PORT': '8080', 'DEBUG': 'true'})
    lookup = mocker.spy(resolver.environment, 'lookup')

    with pytest.raises(EmptyVarError) as info:
        resolver.init(Server)

    assert info.value.var_name == 'HOST'
    assert [call.args[0] for call in lookup.call_args_list] == ['HOST']


def test_first_error_wins(make_resolver: 'MakeResolver') -> None:
    """Report the earliest failing field when several are broken."""
    with pytest.raises(ParseEnvError) as info:
        make_resolver({'HOST': 'h', 'PORT': 'eighty', 'DEBUG': 'maybe'}).init(Server)

    assert info.value.var_name == 'PORT'


def test_invalid_value(make_resolver: 'MakeResolver') -> None:
    """Fail with the name, raw value and parse cause."""
    resolver = make_resolver({'HOST': 'h', 'PORT': 'xyz', 'DEBUG': 'true'})

    with pytest.raises(ParseEnvError) as info:
        resolver.init(Server)

    error = info.value
    assert error.var_name == 'PORT'
    assert error.var_value == 'xyz'
    assert isinstance(error.cause, ValueError)
    assert isinstance(error.__cause__, ValueError)
    assert 'Variable: `PORT` with value `xyz`' in str(error)
    assert "invalid literal for int() with base 10: 'xyz'" in str(error)


def test_undecodable_value(make_resolver: 'MakeResolver') -> None:
    """Fail with an illegal variable on a value that is not text."""
    resolver = make_resolver({'HOST': b'\xff', 'PORT': '1', 'DEBUG': 'true'})

    with pytest.raises(IllegalVarError, match=r'Environment variable `HOST` contains illegal value$'):
        resolver.init(Server)


def test_undecodable_value_uses_default(make_resolver: 'MakeResolver') -> None:
    """Fall back to the default when the value is not text."""
    class Limits(EnvModel):
        size: Annotated[int, Var(default='10')]

    assert make_resolver({'SIZE': b'\xff'}).init(Limits).size == 10


def test_malformed_mapping_value(make_resolver: 'MakeResolver') -> None:
    """Fail with an illegal variable on a malformed pair."""
    class Labels(EnvModel):
        labels: dict[str, str]

    with pytest.raises(IllegalVarError) as info:
        make_resolver({'LABELS': 'a=b,c'}).init(Labels)

    assert info.value.var_name == 'LABELS'
    assert info.value.var_value == 'a=b,c'
    assert isinstance(info.value.cause, IllegalValueError)


def test_parse_leaf(make_resolver: 'MakeResolver') -> None:
    """Parse leaves, optional leaves included, without environment access."""
    resolver = make_resolver()

    assert resolver.parse(int, '5432') == 5432
    assert resolver.parse(int | None, '5432') == 5432
    assert resolver.parse(Annotated[list[str], Var()], 'a,b') == ['a', 'b']


def test_parse_composite_is_not_implemented(make_resolver: 'MakeResolver') -> None:
    """Refuse to parse a composite from a single string."""
    with pytest.raises(ParseNotImplementedError, match=r'not implemented') as info:
        make_resolver().parse(Server, 'localhost:8080')

    assert isinstance(info.value, NotImplementedError)


def test_unsupported_field_type(make_resolver: 'MakeResolver', mocker: 'MockerFixture') -> None:
    """Reject an unsupported type before reading the environment."""
    class Broken(EnvModel):
        payload: bytes

    resolver = make_resolver({'PAYLOAD': 'abc'})
    lookup = mocker.spy(resolver.environment, 'lookup')

    with pytest.raises(DefinitionError, match=r"^Type 'bytes' is not supported as a leaf value$"):
        resolver.init(Broken)

    lookup.assert_not_called()


def test_unsupported_union(make_resolver: 'MakeResolver') -> None:
    """Reject unions other than optional types."""
    class Broken(EnvModel):
        value: int | str

    with pytest.raises(DefinitionError, match=r"'int \| str' is not supported"):
        make_resolver({'VALUE': '1'}).init(Broken)


def test_model_validators_run(make_resolver: 'MakeResolver') -> None:
    """Build the structure through model validation."""
    import pydantic  # noqa: PLC0415

    class Window(EnvModel):
        low: int
        high: int

        @pydantic.model_validator(mode='after')
        def check_order(self) -> 'Window':
            if self.low > self.high:
                raise ValueError('low is above high')
            return self

    with pytest.raises(pydantic.ValidationError, match=r'low is above high'):
        make_resolver({'LOW': '5', 'HIGH': '1'}).init(Window)


def test_aliased_fields(make_resolver: 'MakeResolver') -> None:
    """Bind aliased fields by field name."""
    class Aliased(EnvModel):
        host: str = Field(alias='hostname')
        port: int = Field(validation_alias=AliasChoices('p', 'server_port'))

    aliased = make_resolver({'HOST': 'db', 'PORT': '5432'}).init(Aliased)

    assert aliased.host == 'db'
    assert aliased.port == 5432
