class FacadeError(Exception):
    """Represent a base class for all facade-specific failures.

    Catch this type when you want to handle any registration, resolution, or
    invocation failure without matching each concrete exception class
    individually.
    """


class FacadeInvalidTypeMappingError(FacadeError):
    """Signal a registration whose implementation does not satisfy its capability.

    Raised by ``register_instance``/``register_global_instance`` when the
    instance is not an instance of the capability, by
    ``register_type``/``register_global_type`` when the concrete type is not a
    subclass of the capability or its constructor does not accept the supplied
    arguments, and by factory resolution when a factory produces an object that
    does not satisfy the capability.

    Typical fixes include registering the capability's base class rather than
    an unrelated type, decorating protocols with ``typing.runtime_checkable``,
    and passing constructor arguments that match the annotated parameters.
    """


class FacadeMappingTakenError(FacadeError):
    """Signal a second registration under an already used key.

    Registration keys are unique per store: instance, type, and method stores
    each accept a key at most once. The existing registration is left intact.

    Typical fix is removing the previous mapping first (for example
    ``container.remove_instance_mapping(Capability)``) or registering under a
    distinct ``name``.
    """


class FacadeNoMappingError(FacadeError):
    """Signal that a key has no registration in the local or global scope.

    Raised by ``resolve_instance``, ``resolve_type``, ``invoke_method`` and
    their global counterparts.
    """


class FacadeInvalidArgumentError(FacadeError):
    """Signal a structurally malformed registration request.

    Common triggers are blank method keys, missing or non-callable method
    descriptors, generic callables, and names that are not strings.
    """


class FacadeMethodInvocationError(FacadeError):
    """Signal that a registered method failed to execute.

    Raised by ``invoke_method``/``invoke_global_method`` for every failure of
    the registered callable: arguments that do not match its signature as
    well as exceptions raised from inside it. The underlying exception is
    available as ``__cause__`` for debugging only.
    """
