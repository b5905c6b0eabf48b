from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from facade._internal.signatures import CallableSignatureMatcher, SignatureMismatch
from facade._internal.type_checks import (
    is_capability_subclass,
    is_runtime_class,
    runtime_classes_of,
    satisfies_capability,
)
from facade.exceptions import FacadeInvalidArgumentError, FacadeInvalidTypeMappingError


@dataclass(slots=True)
class RegistrationValidator:
    """Validates registrations before any store is mutated."""

    signature_matcher: CallableSignatureMatcher = field(default_factory=CallableSignatureMatcher)

    def validate_capability(self, capability: object) -> None:
        """Validate that a capability can be used as a registration key."""
        if not is_runtime_class(capability):
            msg = f"Capability must be a class, got {capability!r}."
            raise FacadeInvalidTypeMappingError(msg)

    def validate_name(self, name: object) -> None:
        """Validate an optional mapping name."""
        if name is not None and not isinstance(name, str):
            msg = f"Mapping name must be a string or None, got {name!r}."
            raise FacadeInvalidArgumentError(msg)

    def validate_instance(self, capability: type[Any], instance: object) -> None:
        """Validate that an instance satisfies its capability."""
        try:
            satisfied = satisfies_capability(instance, capability)
        except TypeError as error:
            msg = f"Capability '{capability.__qualname__}' cannot be checked at runtime: {error}"
            raise FacadeInvalidTypeMappingError(msg) from error
        if not satisfied:
            msg = (
                f"Instance of '{type(instance).__qualname__}' does not implement "
                f"'{capability.__qualname__}'."
            )
            raise FacadeInvalidTypeMappingError(msg)

    def validate_concrete_type(
        self,
        capability: type[Any],
        concrete_type: object,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> None:
        """Validate that a concrete type satisfies its capability and accepts the arguments."""
        if not is_runtime_class(concrete_type):
            msg = f"Concrete type must be a class, got {concrete_type!r}."
            raise FacadeInvalidTypeMappingError(msg)

        if inspect.isabstract(concrete_type):
            msg = f"Concrete type '{concrete_type.__qualname__}' cannot be an abstract class."
            raise FacadeInvalidTypeMappingError(msg)

        self._validate_subclass(capability, concrete_type)
        self._validate_arguments(concrete_type, args, kwargs)

    def validate_factory(
        self,
        capability: type[Any],
        factory: object,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> None:
        """Validate a factory callable, its arguments and its declared return type.

        Unannotated factories are accepted here; their products are checked on
        every resolution instead.
        """
        if not callable(factory):
            msg = f"Factory must be callable, got {factory!r}."
            raise FacadeInvalidArgumentError(msg)

        return_annotation = self.signature_matcher.return_annotation(factory)
        if return_annotation is not None:
            return_classes = runtime_classes_of(return_annotation)
            if return_classes is not None and len(return_classes) == 1:
                self._validate_subclass(capability, return_classes[0])
        self._validate_arguments(factory, args, kwargs)

    def validate_method_key(self, method_key: object) -> None:
        """Validate that a method key is a non-blank string."""
        if not isinstance(method_key, str) or not method_key.strip():
            msg = f"Method key must be a non-empty string, got {method_key!r}."
            raise FacadeInvalidArgumentError(msg)

    def validate_method(self, method: object, receiver: object) -> None:
        """Validate a callable descriptor and its receiver."""
        if method is None:
            msg = "Method must not be None."
            raise FacadeInvalidArgumentError(msg)

        if not callable(method):
            msg = f"Method must be callable, got {method!r}."
            raise FacadeInvalidArgumentError(msg)

        if getattr(method, "__type_params__", ()):
            msg = f"Generic callables are not supported, got {method!r}."
            raise FacadeInvalidArgumentError(msg)

        if receiver is not None and inspect.ismethod(method):
            msg = f"Method {method!r} is already bound; pass the receiver only with unbound functions."
            raise FacadeInvalidArgumentError(msg)

    def _validate_subclass(self, capability: type[Any], concrete_type: type[Any]) -> None:
        try:
            satisfied = is_capability_subclass(concrete_type, capability)
        except TypeError as error:
            msg = f"Capability '{capability.__qualname__}' cannot be checked at runtime: {error}"
            raise FacadeInvalidTypeMappingError(msg) from error
        if not satisfied:
            msg = f"'{concrete_type.__qualname__}' does not implement '{capability.__qualname__}'."
            raise FacadeInvalidTypeMappingError(msg)

    def _validate_arguments(
        self,
        provider: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> None:
        try:
            self.signature_matcher.match(provider, args, kwargs)
        except SignatureMismatch as error:
            raise FacadeInvalidTypeMappingError(str(error)) from error
