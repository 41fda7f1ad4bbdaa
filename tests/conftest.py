"""Shared fixtures: fake renderers, recording elements and polling helpers."""

import asyncio
from collections.abc import Callable

import pytest

from overlayqueue.core.queue import Priority, QueueElement


class FakeTransition:
    """Exit transition that completes only when the test says so."""

    def __init__(self) -> None:
        self.completions: list[Callable[[], None]] = []

    def animate_out(self, completion: Callable[[], None]) -> None:
        self.completions.append(completion)

    def finish(self) -> None:
        completions, self.completions = self.completions, []
        for completion in completions:
            completion()


class FakeMount:
    def __init__(self, content, dismiss, animated: bool) -> None:
        self.content = content
        self.dismiss = dismiss
        self.transition: FakeTransition | None = FakeTransition() if animated else None
        self.unmount_count = 0

    def unmount(self) -> None:
        self.unmount_count += 1


class FakeRenderer:
    """Records every mount; transitions are manual when ``animated``."""

    def __init__(self, animated: bool = False) -> None:
        self.animated = animated
        self.mounts: list[FakeMount] = []

    def mount(self, content, dismiss) -> FakeMount:
        mount = FakeMount(content, dismiss, self.animated)
        self.mounts.append(mount)
        return mount

    @property
    def contents(self) -> list:
        return [m.content for m in self.mounts]


class Recorder:
    """Builds queue elements that record when they are presented."""

    def __init__(self) -> None:
        self.presented: list[str] = []
        self.releases: dict[str, Callable[[], None]] = {}
        self.present_times: dict[str, float] = {}

    def element(
        self,
        label: str,
        priority: Priority = Priority.DEFAULT,
        delay_ms: int = 0,
        auto_release: bool = False,
    ) -> QueueElement:
        def present(release: Callable[[], None]) -> None:
            self.presented.append(label)
            self.present_times[label] = asyncio.get_running_loop().time()
            self.releases[label] = release
            if auto_release:
                release()

        return QueueElement(present=present, priority=priority, delay_ms=delay_ms)

    def release(self, label: str) -> None:
        self.releases[label]()


async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def animated_renderer() -> FakeRenderer:
    return FakeRenderer(animated=True)


@pytest.fixture
def wait_until():
    """Poll a predicate until it holds, failing after a timeout."""
    return _wait_until
