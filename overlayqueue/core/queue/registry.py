"""Directory of named lanes."""

import logging
from threading import Lock
from typing import Any

from overlayqueue.core.config.models import LanePresetConfig, QueueConfig
from overlayqueue.core.exceptions import QueueConfigError
from overlayqueue.core.queue.lane import Lane

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_NAME = "default_queue"


class QueueRegistry:
    """Creates, finds and retires lanes by name.

    A lane that drains and is not marked ``preserve_when_empty`` is removed
    as soon as its run-loop stops. The default lane is created up front and
    preserved, so unrelated submissions share it.

    Thread-safe for lookup/add/remove. Create one registry per application
    and pass it to whoever needs it.

    Example:
        >>> registry = QueueRegistry()
        >>> lane = registry.add_queue("toasts")
        >>> lane.minimum_delay_ms = 200
        >>> registry.find_queue("toasts") is lane
        True
    """

    def __init__(
        self,
        config: QueueConfig | None = None,
        lane_presets: dict[str, LanePresetConfig] | None = None,
    ):
        """Initialize the registry and its default lane.

        Args:
            config: Queue defaults (default lane name, settle window, minimum delay).
            lane_presets: Per-lane overrides applied when a lane with that name is created.
        """
        self.config = config or QueueConfig()
        self._presets = dict(lane_presets or {})
        self._queues: dict[str, Lane] = {}
        self._lock = Lock()

        self.add_queue(self.default_queue_name)

    @property
    def default_queue_name(self) -> str:
        return self.config.default_queue_name or DEFAULT_QUEUE_NAME

    @property
    def default_queue(self) -> Lane:
        """The shared default lane, recreated if it was removed by hand."""
        return self.get_or_add_queue(self.default_queue_name)

    def __contains__(self, queue_name: object) -> bool:
        with self._lock:
            return queue_name in self._queues

    def __len__(self) -> int:
        with self._lock:
            return len(self._queues)

    def queue_names(self) -> list[str]:
        with self._lock:
            return list(self._queues)

    def find_queue(self, queue_name: str) -> Lane | None:
        """Return the lane registered under ``queue_name``, if any. O(1)."""
        with self._lock:
            return self._queues.get(queue_name)

    def add_queue(self, queue_name: str) -> Lane:
        """Create and register a new lane.

        Args:
            queue_name: Name for the new lane.

        Returns:
            The newly created lane.

        Raises:
            QueueConfigError: If the name is empty or already registered.
        """
        with self._lock:
            return self._add_locked(queue_name)

    def get_or_add_queue(self, queue_name: str) -> Lane:
        """Return the existing lane for ``queue_name`` or create it."""
        with self._lock:
            queue = self._queues.get(queue_name)
            if queue is None:
                queue = self._add_locked(queue_name)
            return queue

    def remove_queue(self, queue_name: str) -> None:
        """Forget the lane registered under ``queue_name``.

        Pending elements of the removed lane are not cancelled.
        """
        if not queue_name:
            logger.warning("queue_name cannot be empty. Call ignored")
            return
        with self._lock:
            removed = self._queues.pop(queue_name, None)
        if removed is not None:
            logger.debug(f"Removed lane '{queue_name}'")

    def on_stop(self, lane: Lane) -> None:
        """Retire a lane whose run-loop stopped with nothing left to do."""
        if not lane.is_empty or lane.preserve_when_empty:
            return
        with self._lock:
            # Only drop the entry if it still points at this lane.
            if self._queues.get(lane.name) is lane:
                del self._queues[lane.name]
                logger.debug(f"Lane '{lane.name}' drained and was removed")

    def get_stats(self) -> dict[str, dict[str, Any]]:
        """Get current lane statistics."""
        with self._lock:
            lanes = list(self._queues.values())
        return {
            lane.name: {
                "pending": len(lane),
                "running": lane.running,
                "paused": lane.paused,
                "preserve_when_empty": lane.preserve_when_empty,
                "minimum_delay_ms": lane.minimum_delay_ms,
            }
            for lane in lanes
        }

    def close(self) -> None:
        """Cancel timers and run-loops of every registered lane."""
        with self._lock:
            lanes = list(self._queues.values())
        for lane in lanes:
            lane.close()

    def _add_locked(self, queue_name: str) -> Lane:
        """Create a lane. Caller must hold self._lock."""
        if not queue_name:
            raise QueueConfigError("queue_name cannot be empty.")
        if queue_name in self._queues:
            raise QueueConfigError(f"A queue named '{queue_name}' already exists.")

        lane = Lane(
            queue_name,
            delegate=self,
            minimum_delay_ms=self.config.minimum_delay_ms,
            delay_before_firing_ms=self.config.delay_before_firing_ms,
        )
        preset = self._presets.get(queue_name)
        if preset is not None:
            _apply_preset(lane, preset)
        if queue_name == self.default_queue_name:
            lane.preserve_when_empty = True

        self._queues[queue_name] = lane
        logger.debug(f"Added lane '{queue_name}'")
        return lane


def _apply_preset(lane: Lane, preset: LanePresetConfig) -> None:
    if preset.minimum_delay_ms is not None:
        lane.minimum_delay_ms = preset.minimum_delay_ms
    if preset.delay_before_firing_ms is not None:
        lane.delay_before_firing_ms = preset.delay_before_firing_ms
    if preset.preserve_when_empty is not None:
        lane.preserve_when_empty = preset.preserve_when_empty
    if preset.paused is not None:
        lane.paused = preset.paused
