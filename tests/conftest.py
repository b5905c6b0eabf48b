"""Shared pytest fixtures for facade tests."""

from collections.abc import Iterator

import pytest

from facade import Container, LockMode, RegistryScope, global_scope_context


@pytest.fixture(autouse=True)
def global_scope() -> Iterator[RegistryScope]:
    """Fresh process-wide scope for every test."""
    with global_scope_context.isolated() as scope:
        yield scope


@pytest.fixture()
def container() -> Container:
    """Default container with thread-locked local stores."""
    return Container()


@pytest.fixture()
def unlocked_container() -> Container:
    """Container with LockMode.NONE local stores."""
    return Container(lock_mode=LockMode.NONE)
