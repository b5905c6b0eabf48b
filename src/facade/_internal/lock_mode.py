from __future__ import annotations

import threading
from contextlib import AbstractContextManager, nullcontext
from enum import Enum


class LockMode(Enum):
    """Select locking behavior for registration stores.

    The global scope always uses ``THREAD`` because it is shared by the whole
    process. Containers accept either value for their local stores; prefer
    ``NONE`` only for containers that never leave the thread that created them.
    """

    THREAD = "thread"
    """Guard store reads and writes with ``threading.Lock``."""

    NONE = "none"
    """Disable locking around store reads and writes."""

    def new_lock(self) -> AbstractContextManager[object]:
        """Return a fresh lock object usable in a ``with`` statement."""
        if self is LockMode.THREAD:
            return threading.Lock()
        return nullcontext()
