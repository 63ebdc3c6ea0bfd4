"""Shared test fixtures for all nsdispatch tests."""

from typing import Any

import pytest

from nsdispatch import AsyncDispatcher, Dispatcher


class Recorder:
    """Builds handlers that log their calls in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    def handler(self, label: str, result: Any = None, halt: bool = False):
        def handle(namespace: str, event: str, parameters: dict) -> Any:
            self.calls.append((label, namespace, event))
            if halt:
                parameters["halt"] = True
            return result

        handle.__qualname__ = f"handler_{label}"
        return handle

    def async_handler(self, label: str, result: Any = None, halt: bool = False):
        async def handle(namespace: str, event: str, parameters: dict) -> Any:
            self.calls.append((label, namespace, event))
            if halt:
                parameters["halt"] = True
            return result

        handle.__qualname__ = f"async_handler_{label}"
        return handle

    @property
    def labels(self) -> list[str]:
        return [label for label, _, _ in self.calls]


@pytest.fixture
def dispatcher() -> Dispatcher:
    """Fresh synchronous dispatcher."""
    return Dispatcher()


@pytest.fixture
def async_dispatcher() -> AsyncDispatcher:
    """Fresh asynchronous dispatcher."""
    return AsyncDispatcher()


@pytest.fixture
def recorder() -> Recorder:
    """Call recorder for building handlers."""
    return Recorder()
