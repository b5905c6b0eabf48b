from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Any, Generic, TypeVar

from facade._internal.construction import ConstructionRecipe
from facade._internal.invocation import MethodRegistration
from facade._internal.keys import CapabilityKey, MethodKey, new_default_name
from facade._internal.lock_mode import LockMode
from facade.exceptions import FacadeMappingTakenError

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING: Any = object()


class RegistrationStore(Generic[K, V]):
    """Store registrations of one kind indexed by key.

    Keys are unique: adding a value under an existing key fails and leaves the
    stored value untouched. Removing an absent key is a no-op. Every read and
    write happens under the store's own lock; callers never run user code while
    holding it.
    """

    def __init__(self, kind: str, lock_mode: LockMode = LockMode.THREAD) -> None:
        self.kind = kind
        self._registrations: dict[K, V] = {}
        self._lock = lock_mode.new_lock()

    def add(self, key: K, value: V, *, describe: Callable[[K], str] = repr) -> None:
        """Add a registration under a key that must not be taken yet.

        Args:
            key: Registration key.
            value: Registered value.
            describe: Formats the key for the error message.

        Raises:
            FacadeMappingTakenError: If ``key`` is already registered.

        """
        with self._lock:
            if key in self._registrations:
                msg = f"The {self.kind} key {describe(key)} has already been registered."
                raise FacadeMappingTakenError(msg)
            self._registrations[key] = value

    def get(self, key: K) -> V:
        """Get a registration by key.

        Raises:
            KeyError: If ``key`` is not registered.

        """
        with self._lock:
            return self._registrations[key]

    def remove(self, key: K) -> bool:
        """Remove a registration; return whether something was removed."""
        with self._lock:
            return self._registrations.pop(key, _MISSING) is not _MISSING

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._registrations

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)


class RegistryScope:
    """Hold the instance, type and method stores of one scope.

    A scope is either the process-wide global scope or the local scope of one
    ``Container``. Each scope owns a default name used for registrations made
    without an explicit ``name``; it is unique per scope and stable for the
    scope's lifetime.
    """

    def __init__(self, label: str, lock_mode: LockMode = LockMode.THREAD) -> None:
        self.label = label
        self.default_name = new_default_name()
        self.instances: RegistrationStore[CapabilityKey, Any] = RegistrationStore(
            "instance",
            lock_mode,
        )
        self.recipes: RegistrationStore[CapabilityKey, ConstructionRecipe] = RegistrationStore(
            "type mapping",
            lock_mode,
        )
        self.methods: RegistrationStore[MethodKey, MethodRegistration] = RegistrationStore(
            "method",
            lock_mode,
        )

    def key_for(self, capability: Any, name: str | None = None) -> CapabilityKey:
        """Build the capability key for this scope, substituting the default name."""
        return CapabilityKey(capability, self.default_name if name is None else name)

    def is_empty(self) -> bool:
        return not (len(self.instances) or len(self.recipes) or len(self.methods))

    def __repr__(self) -> str:
        return (
            f"RegistryScope({self.label!r}, instances={len(self.instances)}, "
            f"recipes={len(self.recipes)}, methods={len(self.methods)})"
        )
