"""Tests for environment lookups."""

import os
from typing import TYPE_CHECKING

import pytest

from envbind import Environment

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def test_lookup_present_variable() -> None:
    """Return the text of a present variable."""
    variable = Environment({'HOST': 'localhost'}).lookup('HOST')

    assert variable.present
    assert variable.is_text
    assert variable.value == 'localhost'


@pytest.mark.parametrize('name', (
    pytest.param('MISSING', id='absent name'),
    pytest.param('', id='empty name'),
))
def test_lookup_absent_variable(name: str) -> None:
    """Report absent variables as not present."""
    variable = Environment({'HOST': 'localhost'}).lookup(name)

    assert not variable.present
    assert variable.value is None


@pytest.mark.parametrize('raw', (
    pytest.param(b'\xff\xfe', id='invalid utf-8 bytes'),
    pytest.param('\udcff', id='surrogate escaped string'),
))
def test_lookup_undecodable_variable(raw: str | bytes) -> None:
    """Report values that are not valid text."""
    variable = Environment({'BLOB': raw}).lookup('BLOB')

    assert variable.present
    assert not variable.is_text


def test_lookup_bytes_variable() -> None:
    """Decode UTF-8 byte values."""
    variable = Environment({'NAME': 'žluťoučký'.encode()}).lookup('NAME')

    assert variable.value == 'žluťoučký'


def test_default_environment_reads_live_process_state(mocker: 'MockerFixture') -> None:
    """Read `os.environ` on every lookup without snapshotting."""
    mocker.patch.dict(os.environ, {'ENVBIND_TEST_VAR': 'first'})
    environment = Environment()

    assert environment.lookup('ENVBIND_TEST_VAR').value == 'first'

    os.environ['ENVBIND_TEST_VAR'] = 'second'

    assert environment.lookup('ENVBIND_TEST_VAR').value == 'second'


@pytest.mark.parametrize('prefix, expected', (
    pytest.param('DB', True, id='segment boundary'),
    pytest.param('DB_DSN', True, id='exact name'),
    pytest.param('D', False, id='partial segment'),
    pytest.param('CACHE', False, id='unrelated prefix'),
    pytest.param('', True, id='empty prefix'),
))
def test_has_prefix(prefix: str, expected: bool) -> None:
    """Match names under a prefix on segment boundaries."""
    environment = Environment({'DB_DSN': 'dsn', 'DBX': 'other'})

    assert environment.has_prefix(prefix) is expected


def test_has_prefix_on_empty_environment() -> None:
    """Match nothing in an empty environment."""
    assert not Environment({}).has_prefix('')
