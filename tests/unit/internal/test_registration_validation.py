from __future__ import annotations

from typing import Any, TypeVar, cast

import pytest

from facade import Container
from facade._internal.validators import RegistrationValidator
from facade.exceptions import FacadeInvalidArgumentError, FacadeInvalidTypeMappingError
from tests.services import (
    Closable,
    Counter,
    Greeter,
    ICounter,
    SupportsClose,
    UncheckableProtocol,
    make_anything,
    make_counter,
    print_age,
)

T = TypeVar("T")


def test_capability_must_be_a_class() -> None:
    container = Container()

    with pytest.raises(FacadeInvalidTypeMappingError, match="must be a class"):
        container.register_instance(cast("Any", "ICounter"), Counter("x"))

    with pytest.raises(FacadeInvalidTypeMappingError, match="must be a class"):
        container.register_type(cast("Any", list[int]), list)


def test_concrete_type_must_be_a_class() -> None:
    container = Container()

    with pytest.raises(FacadeInvalidTypeMappingError, match="must be a class"):
        container.register_type(ICounter, cast("Any", Counter("x")))


def test_concrete_type_cannot_be_abstract() -> None:
    container = Container()

    with pytest.raises(FacadeInvalidTypeMappingError, match="abstract class"):
        container.register_type(ICounter, ICounter)


def test_concrete_capability_accepts_itself() -> None:
    container = Container()

    container.register_type(Counter, Counter, "self")

    assert container.resolve_type(Counter).get_status() == "self: 0"


def test_runtime_checkable_protocol_capability() -> None:
    container = Container()
    closable = Closable()

    container.register_instance(SupportsClose, closable)
    container.register_type(SupportsClose, Closable)

    assert container.resolve_instance(SupportsClose) is closable
    assert isinstance(container.resolve_type(SupportsClose), Closable)


def test_uncheckable_protocol_capability_is_rejected() -> None:
    container = Container()

    with pytest.raises(FacadeInvalidTypeMappingError, match="cannot be checked at runtime"):
        container.register_instance(UncheckableProtocol, Closable())  # type: ignore[arg-type]

    with pytest.raises(FacadeInvalidTypeMappingError, match="cannot be checked at runtime"):
        container.register_type(UncheckableProtocol, Closable)  # type: ignore[type-abstract]


def test_name_must_be_string() -> None:
    container = Container()

    with pytest.raises(FacadeInvalidArgumentError, match="Mapping name"):
        container.register_instance(ICounter, Counter("x"), name=cast("Any", 1))

    with pytest.raises(FacadeInvalidArgumentError, match="Mapping name"):
        container.resolve_instance(ICounter, name=cast("Any", 1))


def test_failed_validation_leaves_stores_unchanged() -> None:
    container = Container()
    container.register_instance(ICounter, Counter("kept"))

    with pytest.raises(FacadeInvalidTypeMappingError):
        container.register_instance(ICounter, cast("Any", Greeter()), name="other")
    with pytest.raises(FacadeInvalidTypeMappingError):
        container.register_type(ICounter, Counter, 1)

    assert len(container.local_scope.instances) == 1
    assert len(container.local_scope.recipes) == 0


@pytest.mark.parametrize("method_key", ["", "   ", None, 7])
def test_method_key_must_be_non_blank_string(method_key: object) -> None:
    container = Container()

    with pytest.raises(FacadeInvalidArgumentError, match="Method key"):
        container.register_method(cast("Any", method_key), print_age)


def test_method_must_be_present_and_callable() -> None:
    container = Container()

    with pytest.raises(FacadeInvalidArgumentError, match="must not be None"):
        container.register_method("missing", cast("Any", None))

    with pytest.raises(FacadeInvalidArgumentError, match="must be callable"):
        container.register_method("not-callable", cast("Any", "print_age"))


def test_generic_callables_are_rejected() -> None:
    def identity(value: T) -> T:
        return value

    identity.__type_params__ = (T,)  # type: ignore[attr-defined]
    container = Container()

    with pytest.raises(FacadeInvalidArgumentError, match="Generic callables"):
        container.register_method("identity", identity)

    assert not container.has_method_mapping("identity")


def test_bound_method_with_receiver_is_rejected() -> None:
    counter = Counter("x")
    container = Container()

    with pytest.raises(FacadeInvalidArgumentError, match="already bound"):
        container.register_method("increment", counter.increment, counter)


class TestRegistrationValidatorFactories:
    def test_annotated_factory_must_return_capability(self) -> None:
        validator = RegistrationValidator()

        validator.validate_factory(ICounter, make_counter, ("name",), {})
        with pytest.raises(FacadeInvalidTypeMappingError, match="does not implement"):
            validator.validate_factory(Greeter, make_counter, ("name",), {})

    def test_object_return_annotation_is_deferred_to_resolution(self) -> None:
        validator = RegistrationValidator()

        validator.validate_factory(ICounter, make_anything, (Counter("x"),), {})

    def test_factory_arguments_are_checked(self) -> None:
        validator = RegistrationValidator()

        with pytest.raises(FacadeInvalidTypeMappingError, match="expects str"):
            validator.validate_factory(ICounter, make_counter, (1,), {})

    def test_factory_must_be_callable(self) -> None:
        validator = RegistrationValidator()

        with pytest.raises(FacadeInvalidArgumentError, match="must be callable"):
            validator.validate_factory(ICounter, cast("Any", 3), (), {})
