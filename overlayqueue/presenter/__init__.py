"""Presentation layer: submit overlays to lanes and dismiss them through handles."""

from overlayqueue.presenter.base import Completion, DismissFunc, ExitTransition, Mount, Renderer
from overlayqueue.presenter.console import ConsoleRenderer
from overlayqueue.presenter.handle import OverlayHandle
from overlayqueue.presenter.service import OverlayPresenter

__all__ = [
    "Completion",
    "ConsoleRenderer",
    "DismissFunc",
    "ExitTransition",
    "Mount",
    "OverlayHandle",
    "OverlayPresenter",
    "Renderer",
]
