from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager

from facade._internal.lock_mode import LockMode
from facade._internal.stores import RegistryScope

logger = logging.getLogger(__name__)

GLOBAL_SCOPE_LABEL = "global"


def new_global_scope() -> RegistryScope:
    """Create an empty global scope; global stores are always thread-locked."""
    return RegistryScope(GLOBAL_SCOPE_LABEL, LockMode.THREAD)


class GlobalScopeContext:
    """Own the process-wide global scope shared by every container.

    The binding is process-global for this instance (not task-local or
    thread-local). Containers look the current scope up on every call unless
    they were constructed with an explicit ``global_scope``, so swapping the
    scope here is visible to all of them at once. Tests use ``reset`` or
    ``isolated`` instead of removing mappings one by one.
    """

    def __init__(self) -> None:
        self._scope = new_global_scope()
        self._lock = threading.Lock()

    def get_current(self) -> RegistryScope:
        """Return the current global scope."""
        with self._lock:
            return self._scope

    def set_current(self, scope: RegistryScope) -> RegistryScope:
        """Install ``scope`` as the global scope and return the previous one.

        Args:
            scope: Scope to bind as the process-wide global scope.

        """
        with self._lock:
            previous, self._scope = self._scope, scope
        logger.debug("Global scope replaced: %r -> %r", previous, scope)
        return previous

    def reset(self) -> RegistryScope:
        """Install a fresh empty global scope and return the previous one."""
        return self.set_current(new_global_scope())

    @contextmanager
    def isolated(self) -> Generator[RegistryScope, None, None]:
        """Run a block against a fresh global scope, restoring the previous one after.

        Examples:
            .. code-block:: python

                with global_scope_context.isolated() as scope:
                    Container.register_global_instance(Settings, Settings())
                    assert len(scope.instances) == 1

        """
        scope = new_global_scope()
        previous = self.set_current(scope)
        try:
            yield scope
        finally:
            self.set_current(previous)


global_scope_context = GlobalScopeContext()
"""Process-wide holder of the global scope."""
