from __future__ import annotations

import types
from typing import Any, TypeGuard, Union, get_args, get_origin


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def runtime_classes_of(annotation: object) -> tuple[type[Any], ...] | None:
    """Return the runtime classes an annotation admits, or ``None`` if unknown.

    Plain classes map to a one-element tuple and unions of plain classes
    (``int | None``, ``Optional[str]``) map to all of their members. Anything
    else, including ``Any`` and parameterized generics, is not checkable.

    Args:
        annotation: Resolved parameter annotation.

    """
    if annotation is None:
        return (type(None),)
    if annotation is object or annotation is Any:
        return None
    if is_runtime_class(annotation):
        return (annotation,)
    if get_origin(annotation) in (Union, types.UnionType):
        members: list[type[Any]] = []
        for member in get_args(annotation):
            member_classes = runtime_classes_of(member)
            if member_classes is None:
                return None
            members.extend(member_classes)
        return tuple(members)
    return None


def satisfies_capability(candidate: object, capability: type[Any]) -> bool:
    """Return whether an instance satisfies a capability (is-a check).

    Raises:
        TypeError: If the capability cannot be checked at runtime, for example
            a ``Protocol`` not decorated with ``runtime_checkable``.

    """
    return isinstance(candidate, capability)


def is_capability_subclass(concrete_type: type[Any], capability: type[Any]) -> bool:
    """Return whether a class satisfies a capability (is-a check).

    Raises:
        TypeError: If the capability cannot be checked at runtime, for example
            a protocol with non-method members.

    """
    return issubclass(concrete_type, capability)


__all__ = [
    "is_capability_subclass",
    "is_runtime_class",
    "runtime_classes_of",
    "satisfies_capability",
]
