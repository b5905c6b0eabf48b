import pytest

from facade import Container, GlobalScopeContext, RegistryScope, global_scope_context
from facade.exceptions import FacadeNoMappingError
from tests.services import Counter, ICounter


def test_global_scope_context_is_process_wide(global_scope: RegistryScope) -> None:
    assert global_scope_context.get_current() is global_scope
    assert global_scope.label == "global"


def test_set_current_returns_previous_scope() -> None:
    context = GlobalScopeContext()
    original = context.get_current()
    replacement = RegistryScope("global")

    previous = context.set_current(replacement)

    assert previous is original
    assert context.get_current() is replacement


def test_reset_installs_fresh_empty_scope() -> None:
    Container.register_global_instance(ICounter, Counter("x"))
    populated = global_scope_context.get_current()

    previous = global_scope_context.reset()

    assert previous is populated
    assert global_scope_context.get_current().is_empty()
    assert global_scope_context.get_current().default_name != populated.default_name
    with pytest.raises(FacadeNoMappingError):
        Container.resolve_global_instance(ICounter)


def test_isolated_restores_previous_scope() -> None:
    outer = global_scope_context.get_current()
    Container.register_global_instance(ICounter, Counter("outer"))

    with global_scope_context.isolated() as inner:
        assert global_scope_context.get_current() is inner
        assert not Container.has_global_instance_mapping(ICounter)
        Container.register_global_instance(ICounter, Counter("inner"))

    assert global_scope_context.get_current() is outer
    assert Container.resolve_global_instance(ICounter).get_status() == "outer: 0"


def test_isolated_restores_on_error() -> None:
    outer = global_scope_context.get_current()

    with pytest.raises(RuntimeError), global_scope_context.isolated():
        raise RuntimeError

    assert global_scope_context.get_current() is outer


def test_containers_follow_global_scope_swaps(container: Container) -> None:
    Container.register_global_instance(ICounter, Counter("first"))
    assert container.resolve_instance(ICounter).get_status() == "first: 0"

    with global_scope_context.isolated():
        Container.register_global_instance(ICounter, Counter("second"))
        assert container.resolve_instance(ICounter).get_status() == "second: 0"
