"""Priority lane that presents queued overlays one at a time."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

DismissCallback = Callable[[], None]


class Priority(Enum):
    """Priority tiers for queued elements.

    A lane always presents every HIGH element before any DEFAULT element,
    and every DEFAULT element before any LOW element.
    """

    HIGH = "high"
    DEFAULT = "default"
    LOW = "low"


@dataclass(frozen=True)
class QueueElement:
    """A unit of work waiting in a lane.

    ``present`` is called exactly once when it is the element's turn. It must
    eventually call the callback it receives, exactly once, to release the lane.
    """

    present: Callable[[DismissCallback], None]
    priority: Priority = Priority.DEFAULT
    delay_ms: int = 0

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {self.delay_ms}")


class LaneDelegate(Protocol):
    """Receives lifecycle notifications from a lane."""

    def on_stop(self, lane: "Lane") -> None: ...


class Lane:
    """Named queue with a serialized run-loop.

    Elements are reordered by priority on every push. Starting the run-loop
    is debounced by ``delay_before_firing_ms`` so that a burst of pushes is
    fully reordered before the first element is popped.
    """

    def __init__(
        self,
        name: str,
        delegate: LaneDelegate | None = None,
        minimum_delay_ms: int = 0,
        preserve_when_empty: bool = False,
        delay_before_firing_ms: int = 10,
    ):
        """Initialize the lane.

        Use ``QueueRegistry.add_queue`` rather than constructing lanes directly.

        Args:
            name: Lane name, unique within its registry.
            delegate: Notified when the run-loop stops.
            minimum_delay_ms: Floor applied to every element's own delay.
            preserve_when_empty: Keep the lane registered once it drains.
            delay_before_firing_ms: Settle window between a push and the run-loop start.
        """
        self.name = name
        self.minimum_delay_ms = minimum_delay_ms
        self.preserve_when_empty = preserve_when_empty
        self.delay_before_firing_ms = delay_before_firing_ms
        self.paused = False

        self._delegate = delegate
        self._elements: list[QueueElement] = []
        self._running = False
        self._debounce_task: asyncio.Task[None] | None = None
        self._run_task: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        return (
            f"Lane(name={self.name!r}, pending={len(self._elements)}, "
            f"running={self._running}, paused={self.paused})"
        )

    def __len__(self) -> int:
        return len(self._elements)

    @property
    def is_empty(self) -> bool:
        """Whether no element is waiting to be presented."""
        return not self._elements

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> tuple[QueueElement, ...]:
        """Snapshot of waiting elements in pop order."""
        return tuple(self._elements)

    def push(self, element: QueueElement) -> None:
        """Add an element and schedule a debounced start of the run-loop.

        Must be called from within a running event loop.

        Args:
            element: The element to present.
        """
        highs: list[QueueElement] = []
        defaults: list[QueueElement] = []
        lows: list[QueueElement] = []

        for item in [*self._elements, element]:
            if item.priority is Priority.HIGH:
                highs.append(item)
            elif item.priority is Priority.LOW:
                lows.append(item)
            else:
                defaults.append(item)

        self._elements = highs + defaults + lows
        logger.debug(
            f"Lane '{self.name}': pushed {element.priority.value} element "
            f"({len(self._elements)} pending)"
        )
        self._schedule_fire()

    def pause(self) -> None:
        """Stop starting new elements. The one on screen is left alone."""
        self.paused = True

    def resume(self) -> None:
        """Clear the paused flag and wake the run-loop if work is waiting."""
        self.paused = False
        if not self.is_empty:
            self._schedule_fire()

    async def fire(self) -> None:
        """Drain the lane until it is empty or paused.

        No-op when the lane is already running, empty or paused.
        """
        if self._running or self.is_empty or self.paused:
            return

        self._running = True
        logger.debug(f"Lane '{self.name}' started")
        try:
            while not self.paused and not self.is_empty:
                await self.pop()
        finally:
            self._running = False

        logger.debug(f"Lane '{self.name}' stopped (pending={len(self._elements)})")
        if self._delegate is not None:
            self._delegate.on_stop(self)

    async def pop(self) -> None:
        """Present the front element and wait until it is dismissed."""
        if not self._elements:
            return
        element = self._elements.pop(0)

        final_delay_ms = max(element.delay_ms, self.minimum_delay_ms)
        if final_delay_ms > 0:
            await asyncio.sleep(final_delay_ms / 1000.0)

        loop = asyncio.get_running_loop()
        dismissed: asyncio.Future[None] = loop.create_future()

        def on_dismissed() -> None:
            if dismissed.done():
                logger.debug(f"Lane '{self.name}': duplicate dismiss signal ignored")
                return
            dismissed.set_result(None)

        try:
            element.present(on_dismissed)
        except Exception:
            logger.exception(f"Lane '{self.name}': presenter failed, skipping element")
            return

        await dismissed

    def close(self) -> None:
        """Cancel the pending wake-up and any running loop.

        Elements still pending stay in the lane.
        """
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None
        if self._run_task is not None and not self._run_task.done():
            self._run_task.cancel()
        self._run_task = None

    def _schedule_fire(self) -> None:
        """(Re)start the settle window; only the last scheduled wake fires."""
        if self._debounce_task is not None:
            self._debounce_task.cancel()
        self._debounce_task = asyncio.create_task(self._debounce_fire())

    async def _debounce_fire(self) -> None:
        try:
            await asyncio.sleep(self.delay_before_firing_ms / 1000.0)
        except asyncio.CancelledError:
            return
        self._debounce_task = None
        # Run-loop lives in its own task; later pushes only cancel the debounce task.
        if not self._running:
            self._run_task = asyncio.create_task(self.fire())
