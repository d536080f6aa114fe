"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from envbind import BindingSettings, Resolver

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@pytest.fixture
def settings() -> BindingSettings:
    """Provide default collection settings independent of `ENVBIND_*` variables."""
    return BindingSettings.model_construct(
        item_separator=',',
        pair_separator='=',
        strip_items=True,
    )


@pytest.fixture
def make_resolver(settings: BindingSettings) -> 'Callable[[Mapping[str, str | bytes]], Resolver]':
    """Provide a factory of resolvers bound to an isolated environment.

    The returned factory builds a `Resolver` over the given mapping, so
    tests never depend on (or mutate) the process environment.
    """
    def make(environ: 'Mapping[str, str | bytes] | None' = None) -> Resolver:
        """Build a resolver over an in-memory environment.

        Args:
            environ: Variables visible to the resolver. Empty by default.

        Returns:
            A resolver with default settings.
        """
        return Resolver({} if environ is None else environ, settings=settings)

    return make
