"""
Shared fakes and fixtures for lifecycle tests.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lifecycle.models.enums import LogLevel
from lifecycle.utils.logger import configure_logger


class FakeComponent:
    """
    Component using the current hook convention that records every call.

    Events: "<name>.start" when the hook is entered, "<name>.started" when an
    async start finishes, "<name>.stop" / "<name>.stopped" likewise.
    """

    def __init__(
        self,
        name: str,
        events: List[str],
        *,
        sync: bool = False,
        start_error: Optional[BaseException] = None,
        stop_error: Optional[BaseException] = None,
        start_delay: float = 0.0,
    ):
        self.name = name
        self.events = events
        self.sync = sync
        self.start_error = start_error
        self.stop_error = stop_error
        self.start_delay = start_delay
        self.start_calls = 0
        self.stop_calls = 0
        self.options = None

    def __start_component__(self, options):
        self.start_calls += 1
        self.options = options
        self.events.append(f"{self.name}.start")
        if self.sync:
            if self.start_error is not None:
                raise self.start_error
            return None
        return self._start()

    async def _start(self):
        await asyncio.sleep(self.start_delay)
        if self.start_error is not None:
            raise self.start_error
        self.events.append(f"{self.name}.started")

    def __stop_component__(self):
        self.stop_calls += 1
        self.events.append(f"{self.name}.stop")
        if self.sync:
            if self.stop_error is not None:
                raise self.stop_error
            return None
        return self._stop()

    async def _stop(self):
        await asyncio.sleep(0.01)
        if self.stop_error is not None:
            raise self.stop_error
        self.events.append(f"{self.name}.stopped")


class LegacyComponent:
    """Component still exposing the deprecated start/stop names."""

    def __init__(self, name: str, events: List[str]):
        self.name = name
        self.events = events

    async def start(self, options):
        self.events.append(f"{self.name}.legacy_start")

    async def stop(self):
        self.events.append(f"{self.name}.legacy_stop")


class DualComponent(LegacyComponent):
    """Exposes both conventions; only the current one may fire."""

    async def __start_component__(self, options):
        self.events.append(f"{self.name}.start")

    async def __stop_component__(self):
        self.events.append(f"{self.name}.stop")


class GatedComponent:
    """Start hook that blocks until the test opens the gate."""

    def __init__(self):
        self.gate = asyncio.Event()
        self.seen_live = None
        self.seen_started = None

    async def __start_component__(self, options):
        self.seen_live = options.live()
        self.seen_started = options.started()
        await self.gate.wait()


@pytest.fixture(autouse=True)
def reset_logger(monkeypatch):
    """Plain, uncolored DEBUG output on whatever sys.stderr is at write time."""
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("LIFECYCLE_CONFIG", raising=False)
    configure_logger(LogLevel.DEBUG, use_colors=False)
    yield
    configure_logger(LogLevel.INFO)


@pytest.fixture
def events() -> List[str]:
    return []


@pytest.fixture
def make_component(events):
    def factory(name: str, **kwargs) -> FakeComponent:
        return FakeComponent(name, events, **kwargs)
    return factory
