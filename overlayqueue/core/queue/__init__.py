"""Queue subsystem for overlayqueue.

Provides priority lanes and the registry that owns them.
"""

from overlayqueue.core.queue.lane import DismissCallback, Lane, LaneDelegate, Priority, QueueElement
from overlayqueue.core.queue.registry import DEFAULT_QUEUE_NAME, QueueRegistry

__all__ = [
    "DEFAULT_QUEUE_NAME",
    "DismissCallback",
    "Lane",
    "LaneDelegate",
    "Priority",
    "QueueElement",
    "QueueRegistry",
]
