from facade._internal.container import Container
from facade._internal.global_scope import GlobalScopeContext, global_scope_context
from facade._internal.keys import CapabilityKey
from facade._internal.lock_mode import LockMode
from facade._internal.stores import RegistryScope
from facade.exceptions import (
    FacadeError,
    FacadeInvalidArgumentError,
    FacadeInvalidTypeMappingError,
    FacadeMappingTakenError,
    FacadeMethodInvocationError,
    FacadeNoMappingError,
)

__all__ = [
    "CapabilityKey",
    "Container",
    "FacadeError",
    "FacadeInvalidArgumentError",
    "FacadeInvalidTypeMappingError",
    "FacadeMappingTakenError",
    "FacadeMethodInvocationError",
    "FacadeNoMappingError",
    "GlobalScopeContext",
    "LockMode",
    "RegistryScope",
    "global_scope_context",
]
