"""Contracts between the presenter and whatever actually draws overlays."""

from collections.abc import Callable
from typing import Any, Protocol

Completion = Callable[[], None]
DismissFunc = Callable[[Completion | None], None]


class ExitTransition(Protocol):
    """Two-phase teardown of a mounted overlay (e.g. a fade-out)."""

    def animate_out(self, completion: Completion) -> None:
        """Play the exit transition and call ``completion`` once it has finished."""
        ...


class Mount(Protocol):
    """A mounted overlay.

    ``transition`` is None when the live reference to the rendered view has
    been lost; the overlay is then torn down without a transition.
    """

    transition: ExitTransition | None

    def unmount(self) -> None: ...


class Renderer(Protocol):
    """Draws overlay content.

    ``dismiss`` is handed to the content so it can close itself.
    """

    def mount(self, content: Any, dismiss: DismissFunc) -> Mount: ...
