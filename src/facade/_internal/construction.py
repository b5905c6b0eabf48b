from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from facade._internal.type_checks import satisfies_capability
from facade.exceptions import FacadeInvalidTypeMappingError


@dataclass(frozen=True, slots=True, kw_only=True)
class ConstructionRecipe:
    """Describe how a fresh implementation of a capability is manufactured.

    A recipe stores the provider (a concrete class or a factory callable) and
    the arguments passed to it. ``build`` calls the provider on every
    invocation, so each resolution yields an independent object. The stored
    argument objects themselves are passed as-is, never copied.
    """

    capability: type[Any]
    """The capability the built objects must satisfy."""
    provider: Callable[..., Any]
    """Concrete class or factory invoked by ``build``."""
    args: tuple[Any, ...] = ()
    """Positional arguments in call order."""
    kwargs: dict[str, Any] = field(default_factory=dict)
    """Keyword arguments."""
    verify_result: bool = False
    """Check each product against ``capability``.

    Concrete classes are validated once at registration, so only factories
    need a per-resolution check.
    """

    def build(self) -> Any:
        """Call the provider with the stored arguments and return the new object.

        Raises:
            FacadeInvalidTypeMappingError: If a factory produced an object that
                does not satisfy the capability.

        """
        product = self.provider(*self.args, **self.kwargs)
        if self.verify_result and not satisfies_capability(product, self.capability):
            provider_name = getattr(self.provider, "__qualname__", repr(self.provider))
            msg = (
                f"Factory '{provider_name}' produced '{type(product).__qualname__}', which does "
                f"not implement '{self.capability.__qualname__}'."
            )
            raise FacadeInvalidTypeMappingError(msg)
        return product
