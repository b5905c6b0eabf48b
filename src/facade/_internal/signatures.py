from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, get_type_hints

from facade._internal.type_checks import runtime_classes_of

_MISSING_ANNOTATION: Any = object()


class SignatureMismatch(Exception):  # noqa: N818
    """Arguments do not fit a callable's signature.

    Internal signal translated into a public ``FacadeError`` by the engine that
    performed the match.
    """


@dataclass(slots=True)
class CallableSignatureMatcher:
    """Match call arguments against the signature and annotations of a callable.

    Arguments must bind to the signature, and every argument bound to a
    parameter annotated with a runtime class (or a union of runtime classes)
    must be an instance of that annotation. Unannotated parameters and
    annotations that cannot be checked at runtime accept any value. Callables
    without an introspectable signature (some builtins) accept any arguments.
    """

    def match(
        self,
        provider: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> None:
        """Raise ``SignatureMismatch`` if the arguments do not fit ``provider``.

        Args:
            provider: Class or callable that will receive the arguments.
            args: Positional arguments in call order.
            kwargs: Keyword arguments.

        """
        signature = self._signature(provider)
        if signature is None:
            return

        try:
            bound = signature.bind(*args, **kwargs)
        except TypeError as error:
            msg = f"{self._provider_name(provider)}{signature} cannot accept these arguments: {error}"
            raise SignatureMismatch(msg) from error

        hints = self.resolved_type_hints(provider)
        for parameter_name, value in bound.arguments.items():
            annotation = hints.get(parameter_name, _MISSING_ANNOTATION)
            if annotation is _MISSING_ANNOTATION:
                continue
            expected = runtime_classes_of(annotation)
            if expected is None:
                continue
            parameter = signature.parameters[parameter_name]
            for item in self._bound_values(parameter, value):
                if not isinstance(item, expected):
                    msg = (
                        f"{self._provider_name(provider)} parameter '{parameter_name}' expects "
                        f"{self._annotation_name(annotation)}, got {type(item).__qualname__}."
                    )
                    raise SignatureMismatch(msg)

    def return_annotation(self, provider: Callable[..., Any]) -> Any:
        """Return the resolved return annotation of ``provider``, or ``None`` if absent.

        ``get_type_hints`` maps an explicit ``-> None`` to ``NoneType``, so
        ``None`` only ever means "not annotated".
        """
        return self.resolved_type_hints(provider).get("return")

    def resolved_type_hints(self, provider: Callable[..., Any]) -> dict[str, Any]:
        """Return resolved parameter annotations, empty when they cannot be evaluated."""
        if inspect.isclass(provider):
            annotations: dict[str, Any] = {}
            for callable_member_name in ("__init__", "__new__"):
                callable_member = getattr(provider, callable_member_name, None)
                if callable_member is None:
                    continue
                for parameter_name, annotation in self._type_hints(callable_member).items():
                    annotations.setdefault(parameter_name, annotation)
            # __init__ returns None; the class itself is what a call produces.
            annotations["return"] = provider
            return annotations
        return self._type_hints(provider)

    def _type_hints(self, provider: Callable[..., Any]) -> dict[str, Any]:
        try:
            return get_type_hints(provider)
        except (AttributeError, NameError, TypeError):
            return {}

    def _signature(self, provider: Callable[..., Any]) -> inspect.Signature | None:
        try:
            return inspect.signature(provider)
        except (TypeError, ValueError):
            return None

    def _bound_values(self, parameter: Parameter, value: Any) -> tuple[Any, ...]:
        if parameter.kind is Parameter.VAR_POSITIONAL:
            return tuple(value)
        if parameter.kind is Parameter.VAR_KEYWORD:
            return tuple(value.values())
        return (value,)

    def _annotation_name(self, annotation: Any) -> str:
        return getattr(annotation, "__qualname__", repr(annotation))

    def _provider_name(self, provider: Callable[..., Any]) -> str:
        return getattr(provider, "__qualname__", repr(provider))
