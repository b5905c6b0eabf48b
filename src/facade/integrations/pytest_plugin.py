"""Pytest fixtures isolating the process-wide global scope.

Enable in a test module or the root ``conftest.py``:

.. code-block:: python

    pytest_plugins = ["facade.integrations.pytest_plugin"]

"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from facade._internal.container import Container
from facade._internal.global_scope import global_scope_context
from facade._internal.stores import RegistryScope


@pytest.fixture()
def facade_global_scope() -> Iterator[RegistryScope]:
    """Provide a fresh global scope for the duration of one test.

    Global registrations made by the test land in this scope and are dropped
    afterwards; the previously installed global scope is restored.

    """
    with global_scope_context.isolated() as scope:
        yield scope


@pytest.fixture()
def facade_container(facade_global_scope: RegistryScope) -> Container:
    """Provide a container whose fallback is the test's isolated global scope."""
    return Container(global_scope=facade_global_scope)
