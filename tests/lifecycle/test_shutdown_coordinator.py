"""
Shutdown coordinator: hook queue, reverse-order stop, idempotency.
"""

import asyncio

import pytest

from lifecycle.exceptions import ConfigurationError
from lifecycle.models.enums import LifecyclePhase
from lifecycle.registry import ComponentRegistry
from lifecycle.shutdown_coordinator import ShutdownCoordinator
from lifecycle.state import LifecycleState

from conftest import DualComponent, LegacyComponent


class FakeSubscription:
    def __init__(self, events):
        self.events = events
        self.releases = 0

    def release(self):
        self.releases += 1
        self.events.append("signals.release")


def make_coordinator(components, signals=None):
    state = LifecycleState()
    state.advance(LifecyclePhase.WIRING)
    coordinator = ShutdownCoordinator(ComponentRegistry.freeze(components), state, signals)
    return coordinator, state


@pytest.mark.asyncio
async def test_components_stop_in_reverse_order_without_overlap(events, make_component):
    coordinator, state = make_coordinator({
        name: make_component(name) for name in ("a", "b", "c", "d")
    })

    await coordinator.shutdown()

    assert events == [
        "d.stop", "d.stopped",
        "c.stop", "c.stopped",
        "b.stop", "b.stopped",
        "a.stop", "a.stopped",
    ]
    assert state.phase is LifecyclePhase.TERMINATED


@pytest.mark.asyncio
async def test_shutdown_runs_once(events, make_component):
    a = make_component("a")
    coordinator, _ = make_coordinator({"a": a})
    hook_calls = []
    coordinator.register(lambda: hook_calls.append("hook"))

    first = coordinator.shutdown()
    second = coordinator.shutdown()
    await asyncio.gather(first, second)
    await coordinator.shutdown()

    assert first is second
    assert a.stop_calls == 1
    assert hook_calls == ["hook"]


@pytest.mark.asyncio
async def test_hooks_run_fifo_before_components_and_failures_are_isolated(events, make_component, capsys):
    coordinator, _ = make_coordinator({"a": make_component("a")})

    async def h1():
        await asyncio.sleep(0.01)
        events.append("h1")

    def h2():
        events.append("h2")
        raise RuntimeError("h2 failed")

    async def h3():
        events.append("h3")

    for hook in (h1, h2, h3):
        coordinator.register(hook)

    await coordinator.shutdown()

    assert events == ["h1", "h2", "h3", "a.stop", "a.stopped"]
    err = capsys.readouterr().err
    assert "Error in pre-stop hook" in err
    assert "h2 failed" in err


@pytest.mark.asyncio
async def test_hook_registered_while_draining_still_runs(events):
    coordinator, _ = make_coordinator({})

    def late():
        events.append("late")

    def first():
        events.append("first")
        coordinator.register(late)

    coordinator.register(first)
    await coordinator.shutdown()

    assert events == ["first", "late"]


@pytest.mark.asyncio
async def test_hook_registered_after_drain_is_ignored(events, capsys):
    coordinator, _ = make_coordinator({})
    await coordinator.shutdown()

    coordinator.register(lambda: events.append("too late"))

    assert events == []
    assert coordinator.pending_hooks == 0
    assert "will not be called" in capsys.readouterr().err


def test_non_callable_hook_is_rejected():
    coordinator, _ = make_coordinator({})

    with pytest.raises(ConfigurationError):
        coordinator.register("not a hook")


@pytest.mark.asyncio
async def test_stop_failure_aborts_remaining_components(make_component):
    error = RuntimeError("b cannot stop")
    a = make_component("a")
    b = make_component("b", stop_error=error)
    c = make_component("c")
    coordinator, state = make_coordinator({"a": a, "b": b, "c": c})

    with pytest.raises(RuntimeError) as excinfo:
        await coordinator.shutdown()

    assert excinfo.value is error
    assert c.stop_calls == 1
    assert b.stop_calls == 1
    assert a.stop_calls == 0
    assert state.phase is LifecyclePhase.TERMINATED


@pytest.mark.asyncio
async def test_repeated_shutdown_after_failure_does_not_retry(make_component):
    b = make_component("b", stop_error=RuntimeError("nope"))
    coordinator, _ = make_coordinator({"b": b})

    with pytest.raises(RuntimeError):
        await coordinator.shutdown()
    with pytest.raises(RuntimeError):
        await coordinator.shutdown()

    assert b.stop_calls == 1


@pytest.mark.asyncio
async def test_signal_subscription_is_released_first(events, make_component):
    signals = FakeSubscription(events)
    coordinator, _ = make_coordinator({"a": make_component("a")}, signals=signals)
    coordinator.register(lambda: events.append("hook"))

    task = coordinator.shutdown()
    assert events == ["signals.release"]

    await task
    coordinator.shutdown()

    assert events[0] == "signals.release"
    assert events[1:] == ["hook", "a.stop", "a.stopped", "signals.release"]
    assert signals.releases == 2


@pytest.mark.asyncio
async def test_already_stopped_components_are_skipped(make_component):
    a = make_component("a")
    b = make_component("b")
    coordinator, state = make_coordinator({"a": a, "b": b})
    state.stopped.add("a")

    await coordinator.shutdown()

    assert a.stop_calls == 0
    assert b.stop_calls == 1


@pytest.mark.asyncio
async def test_legacy_stop_is_called_with_warning(events, capsys):
    coordinator, _ = make_coordinator({"old": LegacyComponent("old", events)})

    await coordinator.shutdown()

    assert events == ["old.legacy_stop"]
    assert "old.stop is deprecated" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_only_current_stop_fires_when_both_exist(events):
    coordinator, _ = make_coordinator({"dual": DualComponent("dual", events)})

    await coordinator.shutdown()

    assert events == ["dual.stop"]


@pytest.mark.asyncio
async def test_shutdown_reason_is_recorded(make_component):
    coordinator, state = make_coordinator({"a": make_component("a")})

    await coordinator.shutdown(reason="SIGTERM")
    await coordinator.shutdown(reason="explicit")

    assert state.shutdown_reason == "SIGTERM"
