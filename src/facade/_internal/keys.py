from __future__ import annotations

import uuid
from typing import Any, NamedTuple


class CapabilityKey(NamedTuple):
    """Identify an instance or type registration slot.

    The same capability may carry several simultaneous registrations that differ
    only by ``name``. Unnamed registrations use the default name of the scope
    that stores them, see ``RegistryScope.key_for``.

    Examples:
        .. code-block:: python

            CapabilityKey(Database, "replica")
            CapabilityKey(Database, "primary")

    """

    capability: Any
    name: str

    def describe(self) -> str:
        """Return a human readable form used in error messages."""
        capability_name = getattr(self.capability, "__qualname__", repr(self.capability))
        return f"{capability_name}[{self.name!r}]"


MethodKey = str
"""Name under which a callable is registered."""


def new_default_name() -> str:
    """Return a default mapping name that cannot collide with user names."""
    return f"<default:{uuid.uuid4()}>"
