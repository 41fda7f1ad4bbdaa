"""overlayqueue: present overlays one at a time per named lane.

Overlays are reordered by priority, delayed as requested and handed to a
renderer; each lane waits for the current overlay to be dismissed before
presenting the next one.
"""

from overlayqueue.core.exceptions import OverlayQueueError, QueueConfigError
from overlayqueue.core.queue import DEFAULT_QUEUE_NAME, Lane, Priority, QueueElement, QueueRegistry
from overlayqueue.presenter import OverlayHandle, OverlayPresenter, Renderer

__all__ = [
    "__version__",
    "DEFAULT_QUEUE_NAME",
    "Lane",
    "OverlayHandle",
    "OverlayPresenter",
    "OverlayQueueError",
    "Priority",
    "QueueConfigError",
    "QueueElement",
    "QueueRegistry",
    "Renderer",
]

__version__ = "0.1.0"
