"""Submission API: queue overlays into lanes or show them immediately."""

import asyncio
import logging
from typing import Any

from overlayqueue.core.queue.lane import DismissCallback, Priority, QueueElement
from overlayqueue.core.queue.registry import QueueRegistry
from overlayqueue.presenter.base import Completion, Renderer
from overlayqueue.presenter.handle import OverlayHandle

logger = logging.getLogger(__name__)


class OverlayPresenter:
    """Presents overlay content through a renderer.

    ``submit`` queues content into a lane of the registry; ``show`` bypasses
    every lane and mounts the content right away.

    Example:
        >>> presenter = OverlayPresenter(QueueRegistry(), ConsoleRenderer())
        >>> handle = await presenter.submit("Saved!", priority="high")
        >>> handle.dismiss()
    """

    def __init__(self, registry: QueueRegistry, renderer: Renderer):
        self.registry = registry
        self.renderer = renderer

    def show(self, content: Any, *, on_dismiss: Completion | None = None) -> OverlayHandle:
        """Mount ``content`` immediately, on top of anything already shown.

        Args:
            content: Whatever the renderer knows how to draw.
            on_dismiss: Called once the overlay is dismissed.

        Returns:
            A handle that dismisses this overlay only.
        """
        handle = OverlayHandle(on_dismiss=on_dismiss)
        handle.attach(self.renderer.mount(content, handle.dismiss))
        return handle

    def submit(
        self,
        content: Any,
        *,
        queue_name: str | None = None,
        priority: Priority | str = Priority.DEFAULT,
        delay_ms: int = 0,
        on_dismiss: Completion | None = None,
    ) -> "asyncio.Future[OverlayHandle]":
        """Add ``content`` to a lane.

        The element is pushed before this method returns, so consecutive
        calls keep their priority ordering. Must be called from within a
        running event loop.

        Args:
            content: Whatever the renderer knows how to draw.
            queue_name: Target lane, created if missing. Defaults to the registry's default lane.
            priority: ``high``, ``default`` or ``low``.
            delay_ms: Delay before the overlay is presented once it reaches the front.
            on_dismiss: Called once the overlay is dismissed.

        Returns:
            A future resolving to the overlay's handle when it is mounted.

        Raises:
            QueueConfigError: If ``queue_name`` is an empty string.
        """
        loop = asyncio.get_running_loop()
        presented: asyncio.Future[OverlayHandle] = loop.create_future()

        if queue_name is None:
            lane = self.registry.default_queue
        else:
            lane = self.registry.get_or_add_queue(queue_name)

        def present(release: DismissCallback) -> None:
            handle = OverlayHandle(on_dismiss=on_dismiss, release=release)
            try:
                handle.attach(self.renderer.mount(content, handle.dismiss))
            except Exception as e:
                if not presented.done():
                    presented.set_exception(e)
                raise
            if not presented.done():
                presented.set_result(handle)

        element = QueueElement(present=present, priority=Priority(priority), delay_ms=delay_ms)
        lane.push(element)
        logger.debug(f"Submitted {element.priority.value} overlay to lane '{lane.name}'")
        return presented
