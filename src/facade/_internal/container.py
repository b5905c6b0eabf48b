from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Mapping
from typing import Any, TypeVar, cast

from facade._internal.construction import ConstructionRecipe
from facade._internal.global_scope import global_scope_context
from facade._internal.invocation import MethodRegistration
from facade._internal.keys import CapabilityKey, MethodKey
from facade._internal.lock_mode import LockMode
from facade._internal.stores import RegistrationStore, RegistryScope
from facade._internal.validators import RegistrationValidator
from facade.exceptions import FacadeNoMappingError

T = TypeVar("T")

logger = logging.getLogger(__name__)

_REGISTRATION_VALIDATOR = RegistrationValidator()


def _instances(scope: RegistryScope) -> RegistrationStore[CapabilityKey, Any]:
    return scope.instances


def _recipes(scope: RegistryScope) -> RegistrationStore[CapabilityKey, ConstructionRecipe]:
    return scope.recipes


def _methods(scope: RegistryScope) -> RegistrationStore[MethodKey, MethodRegistration]:
    return scope.methods


class Container:
    """Register capability implementations and resolve them back.

    A capability is any runtime class, conventionally an ABC or a
    ``runtime_checkable`` protocol. Implementations are registered in one of
    three forms: a live instance shared by every resolution, a construction
    recipe (concrete type or factory plus arguments) that builds a new object
    on every resolution, or a callable invoked by method key.

    Two surfaces coexist. Classmethods named ``*_global_*`` operate only on the
    process-wide global scope. Instance methods operate on the container's own
    local scope and fall back to the global scope when the local scope has no
    entry for the requested key, so a local registration shadows the global
    one for this container only.
    """

    def __init__(
        self,
        *,
        lock_mode: LockMode = LockMode.THREAD,
        global_scope: RegistryScope | None = None,
    ) -> None:
        """Initialize a container with an empty local scope.

        Args:
            lock_mode: Locking strategy for the local stores. Use
                ``LockMode.NONE`` only for containers confined to one thread.
            global_scope: Scope used for fallback lookups. ``None`` follows
                ``global_scope_context`` at call time.

        Examples:
            .. code-block:: python

                container = Container()

                single_threaded = Container(lock_mode=LockMode.NONE)

        """
        self._lock_mode = lock_mode
        self._pinned_global_scope = global_scope
        self._local_scope = RegistryScope("local", lock_mode)

    @property
    def local_scope(self) -> RegistryScope:
        """The scope owned by this container."""
        return self._local_scope

    @property
    def global_scope(self) -> RegistryScope:
        """The scope consulted when the local scope has no entry."""
        if self._pinned_global_scope is not None:
            return self._pinned_global_scope
        return global_scope_context.get_current()

    # region Global Registration Methods
    @classmethod
    def register_global_instance(
        cls,
        capability: type[T],
        instance: T,
        *,
        name: str | None = None,
    ) -> None:
        """Register a pre-built instance in the global scope.

        Raises:
            FacadeInvalidTypeMappingError: If ``instance`` does not implement
                ``capability``.
            FacadeMappingTakenError: If the key is already registered.

        """
        _register_instance(global_scope_context.get_current(), capability, instance, name)

    @classmethod
    def register_global_type(
        cls,
        capability: type[T],
        concrete_type: type[T],
        *args: Any,
        name: str | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> None:
        """Register a construction recipe in the global scope.

        See ``register_type`` for argument semantics.
        """
        _register_type(
            global_scope_context.get_current(),
            capability,
            concrete_type,
            args,
            kwargs,
            name,
        )

    @classmethod
    def register_global_factory(
        cls,
        capability: type[T],
        factory: Callable[..., T],
        *args: Any,
        name: str | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> None:
        """Register a factory recipe in the global scope.

        See ``register_factory`` for argument semantics.
        """
        _register_factory(
            global_scope_context.get_current(),
            capability,
            factory,
            args,
            kwargs,
            name,
        )

    @classmethod
    def register_global_method(
        cls,
        method_key: MethodKey,
        method: Callable[..., Any],
        receiver: object = None,
    ) -> None:
        """Register a callable in the global scope.

        See ``register_method`` for argument semantics.
        """
        _register_method(global_scope_context.get_current(), method_key, method, receiver)

    # endregion Global Registration Methods

    # region Global Removal Methods
    @classmethod
    def remove_global_instance_mapping(cls, capability: Any, *, name: str | None = None) -> None:
        """Remove a global instance mapping; absent mappings are ignored."""
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = global_scope_context.get_current()
        _remove(_instances(scope), scope, scope.key_for(capability, name))

    @classmethod
    def remove_global_type_mapping(cls, capability: Any, *, name: str | None = None) -> None:
        """Remove a global type or factory mapping; absent mappings are ignored."""
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = global_scope_context.get_current()
        _remove(_recipes(scope), scope, scope.key_for(capability, name))

    @classmethod
    def remove_global_method_mapping(cls, method_key: MethodKey) -> None:
        """Remove a global method mapping; absent mappings are ignored."""
        scope = global_scope_context.get_current()
        _remove(_methods(scope), scope, method_key)

    # endregion Global Removal Methods

    # region Global Resolution Methods
    @classmethod
    def resolve_global_instance(cls, capability: type[T], *, name: str | None = None) -> T:
        """Resolve an instance registered in the global scope.

        Raises:
            FacadeNoMappingError: If nothing is registered for the key.

        """
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = global_scope_context.get_current()
        try:
            return cast("T", scope.instances.get(scope.key_for(capability, name)))
        except KeyError:
            raise _no_instance_mapping(capability, name) from None

    @classmethod
    def resolve_global_type(cls, capability: type[T], *, name: str | None = None) -> T:
        """Build a new object from a recipe registered in the global scope.

        Raises:
            FacadeNoMappingError: If nothing is registered for the key.

        """
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = global_scope_context.get_current()
        try:
            recipe = scope.recipes.get(scope.key_for(capability, name))
        except KeyError:
            raise _no_type_mapping(capability, name) from None
        return cast("T", recipe.build())

    @classmethod
    def invoke_global_method(cls, method_key: MethodKey, /, *args: Any, **kwargs: Any) -> Any:
        """Invoke a callable registered in the global scope.

        ``method_key`` is positional-only, so every keyword argument, including
        one called ``method_key``, is forwarded to the callable.

        Raises:
            FacadeNoMappingError: If nothing is registered for ``method_key``.
            FacadeMethodInvocationError: If the callable fails.

        """
        try:
            registration = global_scope_context.get_current().methods.get(method_key)
        except KeyError:
            raise _no_method_mapping(method_key) from None
        return registration.invoke(*args, **kwargs)

    @classmethod
    def has_global_instance_mapping(cls, capability: Any, *, name: str | None = None) -> bool:
        """Return whether ``resolve_global_instance`` would find a registration."""
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = global_scope_context.get_current()
        return scope.key_for(capability, name) in scope.instances

    @classmethod
    def has_global_type_mapping(cls, capability: Any, *, name: str | None = None) -> bool:
        """Return whether ``resolve_global_type`` would find a recipe."""
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = global_scope_context.get_current()
        return scope.key_for(capability, name) in scope.recipes

    @classmethod
    def has_global_method_mapping(cls, method_key: MethodKey) -> bool:
        """Return whether ``invoke_global_method`` would find a callable."""
        return method_key in global_scope_context.get_current().methods

    # endregion Global Resolution Methods

    # region Registration Methods
    def register_instance(
        self,
        capability: type[T],
        instance: T,
        *,
        name: str | None = None,
    ) -> None:
        """Register a pre-built instance in the local scope.

        Every resolution returns this very object. The local registration
        overrides a global registration under the same capability and name for
        this container only.

        Args:
            capability: Capability class the instance is resolved by.
            instance: Object returned on resolution; must be an instance of
                ``capability`` (subclasses are accepted).
            name: Optional mapping name distinguishing several registrations of
                the same capability. ``None`` uses the scope's default name.

        Raises:
            FacadeInvalidTypeMappingError: If ``capability`` is not a class or
                ``instance`` does not implement it.
            FacadeMappingTakenError: If the key is already registered locally.
            FacadeInvalidArgumentError: If ``name`` is not a string.

        Examples:
            .. code-block:: python

                container.register_instance(Counter, Counter("requests"))
                container.register_instance(Counter, Counter("errors"), name="errors")

        """
        _register_instance(self._local_scope, capability, instance, name)

    def register_type(
        self,
        capability: type[T],
        concrete_type: type[T],
        *args: Any,
        name: str | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> None:
        """Register a construction recipe in the local scope.

        Each ``resolve_type`` call instantiates ``concrete_type`` anew with the
        stored arguments. The constructor is checked now: the arguments must
        bind to its signature and match its annotated parameter types.

        Args:
            capability: Capability class the recipe is resolved by.
            concrete_type: Non-abstract subclass of ``capability``.
            *args: Positional constructor arguments.
            name: Optional mapping name.
            kwargs: Keyword constructor arguments.

        Raises:
            FacadeInvalidTypeMappingError: If ``concrete_type`` does not
                implement ``capability`` or its constructor does not accept the
                arguments.
            FacadeMappingTakenError: If the key is already registered locally.
            FacadeInvalidArgumentError: If ``name`` is not a string.

        Examples:
            .. code-block:: python

                container.register_type(Counter, AdvancedCounter, "visits", 5, name="visits")
                first = container.resolve_type(Counter, name="visits")
                second = container.resolve_type(Counter, name="visits")
                assert first is not second

        """
        _register_type(self._local_scope, capability, concrete_type, args, kwargs, name)

    def register_factory(
        self,
        capability: type[T],
        factory: Callable[..., T],
        *args: Any,
        name: str | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> None:
        """Register a factory recipe in the local scope.

        Factories share the type-mapping key space with ``register_type`` and
        are resolved with ``resolve_type``. A class return annotation is checked
        against ``capability`` now; every product is checked on resolution.

        Args:
            capability: Capability class the recipe is resolved by.
            factory: Callable building a new implementation on each call.
            *args: Positional factory arguments.
            name: Optional mapping name.
            kwargs: Keyword factory arguments.

        Raises:
            FacadeInvalidTypeMappingError: If the annotated return type does
                not implement ``capability`` or the arguments do not fit.
            FacadeInvalidArgumentError: If ``factory`` is not callable.
            FacadeMappingTakenError: If the key is already registered locally.

        """
        _register_factory(self._local_scope, capability, factory, args, kwargs, name)

    def register_method(
        self,
        method_key: MethodKey,
        method: Callable[..., Any],
        receiver: object = None,
    ) -> None:
        """Register a callable in the local scope under ``method_key``.

        Args:
            method_key: Non-blank key used by ``invoke_method``. Each key holds
                a single callable; overloads are not supported.
            method: Function, bound method, or unbound function. Generic
                (PEP 695) callables are rejected.
            receiver: Object passed as first argument to an unbound function,
                ``None`` otherwise.

        Raises:
            FacadeInvalidArgumentError: If the key is blank, the method is
                missing, not callable or generic, or a bound method is combined
                with a receiver.
            FacadeMappingTakenError: If the key is already registered locally.

        Examples:
            .. code-block:: python

                counter = Counter("clicks")
                container.register_method("click", Counter.increment, counter)
                container.register_method("status", counter.get_status)

        """
        _register_method(self._local_scope, method_key, method, receiver)

    # endregion Registration Methods

    # region Removal Methods
    def remove_instance_mapping(self, capability: Any, *, name: str | None = None) -> None:
        """Remove a local instance mapping; absent mappings are ignored.

        The global scope is never touched, so a global mapping for the same key
        becomes visible again.

        Raises:
            FacadeInvalidArgumentError: If ``name`` is not a string.

        """
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = self._local_scope
        _remove(_instances(scope), scope, scope.key_for(capability, name))

    def remove_type_mapping(self, capability: Any, *, name: str | None = None) -> None:
        """Remove a local type or factory mapping; absent mappings are ignored."""
        _REGISTRATION_VALIDATOR.validate_name(name)
        scope = self._local_scope
        _remove(_recipes(scope), scope, scope.key_for(capability, name))

    def remove_method_mapping(self, method_key: MethodKey) -> None:
        """Remove a local method mapping; absent mappings are ignored."""
        scope = self._local_scope
        _remove(_methods(scope), scope, method_key)

    # endregion Removal Methods

    # region Resolution Methods
    def resolve_instance(self, capability: type[T], *, name: str | None = None) -> T:
        """Resolve a registered instance, preferring the local scope.

        Args:
            capability: Capability class to look up.
            name: Optional mapping name; ``None`` looks up the default
                (unnamed) registration of each scope.

        Returns:
            The registered object itself, not a copy.

        Raises:
            FacadeNoMappingError: If neither the local nor the global scope has
                an instance for the key.

        """
        _REGISTRATION_VALIDATOR.validate_name(name)
        try:
            return cast(
                "T",
                self._get_with_fallback(_instances, lambda scope: scope.key_for(capability, name)),
            )
        except KeyError:
            raise _no_instance_mapping(capability, name) from None

    def resolve_type(self, capability: type[T], *, name: str | None = None) -> T:
        """Build a new object from a registered recipe, preferring the local scope.

        Returns:
            A freshly constructed object; consecutive calls never return the
            same object.

        Raises:
            FacadeNoMappingError: If neither scope has a recipe for the key.
            FacadeInvalidTypeMappingError: If a factory produced an object that
                does not implement ``capability``.

        """
        _REGISTRATION_VALIDATOR.validate_name(name)
        try:
            recipe = self._get_with_fallback(
                _recipes,
                lambda scope: scope.key_for(capability, name),
            )
        except KeyError:
            raise _no_type_mapping(capability, name) from None
        return cast("T", recipe.build())

    def invoke_method(self, method_key: MethodKey, /, *args: Any, **kwargs: Any) -> Any:
        """Invoke a registered callable, preferring the local scope.

        ``method_key`` is positional-only, so every keyword argument, including
        one called ``method_key``, is forwarded to the callable.

        Returns:
            Whatever the callable returns.

        Raises:
            FacadeNoMappingError: If neither scope has a callable for the key.
            FacadeMethodInvocationError: If the arguments do not fit the
                callable or the callable raises.

        Examples:
            .. code-block:: python

                container.register_method("print_age", lambda name, age: f"{name} is {age}")
                container.invoke_method("print_age", "Alex", 27)

        """
        try:
            registration = self._get_with_fallback(_methods, lambda _scope: method_key)
        except KeyError:
            raise _no_method_mapping(method_key) from None
        return registration.invoke(*args, **kwargs)

    def has_instance_mapping(
        self,
        capability: Any,
        *,
        name: str | None = None,
        include_global: bool = True,
    ) -> bool:
        """Return whether ``resolve_instance`` would find a registration."""
        _REGISTRATION_VALIDATOR.validate_name(name)
        return self._has_mapping(
            _instances,
            lambda scope: scope.key_for(capability, name),
            include_global=include_global,
        )

    def has_type_mapping(
        self,
        capability: Any,
        *,
        name: str | None = None,
        include_global: bool = True,
    ) -> bool:
        """Return whether ``resolve_type`` would find a recipe."""
        _REGISTRATION_VALIDATOR.validate_name(name)
        return self._has_mapping(
            _recipes,
            lambda scope: scope.key_for(capability, name),
            include_global=include_global,
        )

    def has_method_mapping(self, method_key: MethodKey, *, include_global: bool = True) -> bool:
        """Return whether ``invoke_method`` would find a callable."""
        return self._has_mapping(
            _methods,
            lambda _scope: method_key,
            include_global=include_global,
        )

    # endregion Resolution Methods

    def _get_with_fallback(
        self,
        store_of: Callable[[RegistryScope], RegistrationStore[Any, T]],
        key_for: Callable[[RegistryScope], Hashable],
    ) -> T:
        local_scope = self._local_scope
        try:
            return store_of(local_scope).get(key_for(local_scope))
        except KeyError:
            pass
        global_scope = self.global_scope
        global_key = key_for(global_scope)
        logger.debug(
            "No local %s for %r, falling back to %s scope",
            store_of(local_scope).kind,
            global_key,
            global_scope.label,
        )
        return store_of(global_scope).get(global_key)

    def _has_mapping(
        self,
        store_of: Callable[[RegistryScope], RegistrationStore[Any, Any]],
        key_for: Callable[[RegistryScope], Hashable],
        *,
        include_global: bool,
    ) -> bool:
        if key_for(self._local_scope) in store_of(self._local_scope):
            return True
        if not include_global:
            return False
        global_scope = self.global_scope
        return key_for(global_scope) in store_of(global_scope)

    def __repr__(self) -> str:
        return f"Container(local={self._local_scope!r}, lock_mode={self._lock_mode})"


# region Scope operations
def _register_instance(
    scope: RegistryScope,
    capability: Any,
    instance: object,
    name: str | None,
) -> None:
    _REGISTRATION_VALIDATOR.validate_capability(capability)
    _REGISTRATION_VALIDATOR.validate_name(name)
    _REGISTRATION_VALIDATOR.validate_instance(capability, instance)

    key = scope.key_for(capability, name)
    scope.instances.add(key, instance, describe=CapabilityKey.describe)
    logger.debug("Registered instance %s in %s scope", key.describe(), scope.label)


def _register_type(
    scope: RegistryScope,
    capability: Any,
    concrete_type: Any,
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any] | None,
    name: str | None,
) -> None:
    recipe_kwargs = dict(kwargs or {})
    _REGISTRATION_VALIDATOR.validate_capability(capability)
    _REGISTRATION_VALIDATOR.validate_name(name)
    _REGISTRATION_VALIDATOR.validate_concrete_type(capability, concrete_type, args, recipe_kwargs)

    key = scope.key_for(capability, name)
    scope.recipes.add(
        key,
        ConstructionRecipe(
            capability=capability,
            provider=concrete_type,
            args=args,
            kwargs=recipe_kwargs,
        ),
        describe=CapabilityKey.describe,
    )
    logger.debug(
        "Registered type %s -> %s in %s scope",
        key.describe(),
        concrete_type.__qualname__,
        scope.label,
    )


def _register_factory(
    scope: RegistryScope,
    capability: Any,
    factory: Any,
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any] | None,
    name: str | None,
) -> None:
    recipe_kwargs = dict(kwargs or {})
    _REGISTRATION_VALIDATOR.validate_capability(capability)
    _REGISTRATION_VALIDATOR.validate_name(name)
    _REGISTRATION_VALIDATOR.validate_factory(capability, factory, args, recipe_kwargs)

    key = scope.key_for(capability, name)
    scope.recipes.add(
        key,
        ConstructionRecipe(
            capability=capability,
            provider=factory,
            args=args,
            kwargs=recipe_kwargs,
            verify_result=True,
        ),
        describe=CapabilityKey.describe,
    )
    logger.debug("Registered factory %s in %s scope", key.describe(), scope.label)


def _register_method(
    scope: RegistryScope,
    method_key: Any,
    method: Any,
    receiver: object,
) -> None:
    _REGISTRATION_VALIDATOR.validate_method_key(method_key)
    _REGISTRATION_VALIDATOR.validate_method(method, receiver)

    scope.methods.add(
        method_key,
        MethodRegistration(method_key=method_key, method=method, receiver=receiver),
    )
    logger.debug("Registered method %r in %s scope", method_key, scope.label)


def _remove(store: RegistrationStore[Any, Any], scope: RegistryScope, key: Hashable) -> None:
    if store.remove(key):
        logger.debug("Removed %s %r from %s scope", store.kind, key, scope.label)


def _no_instance_mapping(capability: Any, name: str | None) -> FacadeNoMappingError:
    msg = f"An instance of {_describe(capability, name)} is not registered."
    return FacadeNoMappingError(msg)


def _no_type_mapping(capability: Any, name: str | None) -> FacadeNoMappingError:
    msg = f"A type mapping of {_describe(capability, name)} is not registered."
    return FacadeNoMappingError(msg)


def _no_method_mapping(method_key: Any) -> FacadeNoMappingError:
    msg = f"No method mapped to {method_key!r}."
    return FacadeNoMappingError(msg)


def _describe(capability: Any, name: str | None) -> str:
    capability_name = getattr(capability, "__qualname__", repr(capability))
    if name is None:
        return f"'{capability_name}'"
    return f"'{capability_name}' named {name!r}"


# endregion Scope operations
