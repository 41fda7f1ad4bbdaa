"""Renderer that draws overlays as framed blocks of text on a stream."""

import asyncio
import sys
from typing import Any, TextIO

from overlayqueue.presenter.base import Completion, DismissFunc


class ConsoleTransition:
    """Exit transition that waits ``exit_ms`` before completing."""

    def __init__(self, mount: "ConsoleMount", exit_ms: int):
        self._mount = mount
        self._exit_ms = exit_ms

    def animate_out(self, completion: Completion) -> None:
        self._mount.write(f"~ {self._mount.title} fading out")
        asyncio.get_running_loop().call_later(self._exit_ms / 1000.0, completion)


class ConsoleMount:
    """One overlay printed to the console."""

    def __init__(self, renderer: "ConsoleRenderer", title: str, exit_ms: int):
        self.renderer = renderer
        self.title = title
        self.transition: ConsoleTransition | None = ConsoleTransition(self, exit_ms)
        self.auto_dismiss: asyncio.TimerHandle | None = None

    def write(self, line: str) -> None:
        self.renderer.stream.write(line + "\n")
        self.renderer.stream.flush()

    def unmount(self) -> None:
        if self.auto_dismiss is not None:
            self.auto_dismiss.cancel()
            self.auto_dismiss = None
        self.transition = None
        self.renderer.mounted.remove(self)
        self.write(f"- {self.title} dismissed")


class ConsoleRenderer:
    """Prints overlays and dismisses each one after ``hold_ms``.

    A ``hold_ms`` of None leaves dismissal to the caller.
    """

    def __init__(self, stream: TextIO | None = None, hold_ms: int | None = 500, exit_ms: int = 100):
        self.stream = stream or sys.stdout
        self.hold_ms = hold_ms
        self.exit_ms = exit_ms
        self.mounted: list[ConsoleMount] = []

    def mount(self, content: Any, dismiss: DismissFunc) -> ConsoleMount:
        title = str(content)
        mount = ConsoleMount(self, title, self.exit_ms)
        self.mounted.append(mount)

        border = "+" + "-" * (len(title) + 2) + "+"
        mount.write("\n".join([border, f"| {title} |", border]))

        if self.hold_ms is not None:
            mount.auto_dismiss = asyncio.get_running_loop().call_later(
                self.hold_ms / 1000.0, dismiss, None
            )
        return mount
