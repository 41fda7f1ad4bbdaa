"""Exceptions raised by overlayqueue."""


class OverlayQueueError(Exception):
    """Base class for overlayqueue errors."""


class QueueConfigError(OverlayQueueError, ValueError):
    """Raised when a lane cannot be created with the given name."""
