"""Caller-facing handle for a presented overlay."""

import logging

from overlayqueue.core.queue.lane import DismissCallback
from overlayqueue.presenter.base import Completion, Mount

logger = logging.getLogger(__name__)


class OverlayHandle:
    """Dismisses one presented overlay.

    Only the first ``dismiss`` call has an effect; calls made while the exit
    transition is still playing, or after teardown, are ignored. A dismiss
    requested before the mount is attached runs once it is.
    """

    def __init__(
        self,
        on_dismiss: Completion | None = None,
        release: DismissCallback | None = None,
    ):
        """Initialize the handle.

        Args:
            on_dismiss: Called once the overlay has been torn down.
            release: Lane completion signal, for overlays presented from a lane.
        """
        self._on_dismiss = on_dismiss
        self._release = release
        self._mount: Mount | None = None
        self._dismiss_requested = False
        self._pending_on_dismiss: Completion | None = None
        self._dismissing = False
        self._dismissed = False

    @property
    def is_dismissing(self) -> bool:
        return self._dismissing and not self._dismissed

    @property
    def is_dismissed(self) -> bool:
        return self._dismissed

    def attach(self, mount: Mount) -> None:
        """Bind the mounted overlay, replaying a dismiss requested during mount."""
        self._mount = mount
        if self._dismiss_requested:
            self._dismiss_requested = False
            on_dismiss, self._pending_on_dismiss = self._pending_on_dismiss, None
            self.dismiss(on_dismiss)

    def dismiss(self, on_dismiss: Completion | None = None) -> None:
        """Tear the overlay down, then notify listeners.

        A call made before the overlay is attached is held until ``attach``.

        Args:
            on_dismiss: Called after teardown, after the submit-time callback.
        """
        if self._dismissing:
            return
        mount = self._mount
        if mount is None:
            if not self._dismiss_requested:
                self._dismiss_requested = True
                self._pending_on_dismiss = on_dismiss
            return
        self._dismissing = True

        def cleanup() -> None:
            if self._dismissed:
                return
            self._dismissed = True
            self._mount = None
            try:
                mount.unmount()
            finally:
                if self._release is not None:
                    self._release()
            if self._on_dismiss is not None:
                self._on_dismiss()
            if on_dismiss is not None:
                on_dismiss()

        transition = mount.transition
        if transition is not None:
            transition.animate_out(cleanup)
        else:
            logger.warning("Dismissing an overlay without transition because its reference has been lost.")
            cleanup()
