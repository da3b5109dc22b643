"""Cosmetic "pop" animation played when a node is toggled.

The animation only ever changes the `emphasis` of a :class:`LayoutPosition`, game logic never waits on it.
"""
import logging
from math import pi, sin
from typing import Callable

from anyio import CancelScope, sleep
from anyio.abc import TaskGroup

from domgame.layout import LayoutPosition

logger = logging.getLogger("domgame.animation")


def pop_curve(start: float, frames: int, amplitude: float, rest: float = 1) -> list[float]:
    """Emphasis values of each frame of a pop.

    The node swells up and shrinks back, beginning at the `start` emphasis and ending exactly at `rest`. Starting
    from an emphasis other than `rest` happens if a running pop is restarted, the offset fades out over the frames.
    """
    if frames <= 0:
        return [rest]
    values = []
    for frame in range(1, frames + 1):
        t = frame / frames
        values.append((start - rest) * (1 - t) + rest + amplitude * sin(pi * t))
    values[-1] = rest
    return values


class PopAnimator:
    """Plays pop animations, at most one per node at a time."""

    def __init__(
        self,
        frames: int = 10,
        amplitude: float = 0.18,
        frame_interval: float = 1 / 60,
        on_frame: Callable[[], None] | None = None,
    ) -> None:
        """Plays pop animations, at most one per node at a time.

        Args:
            frames: Number of frames a pop lasts.
            amplitude: How much bigger than normal a node gets at the peak.
            frame_interval: Seconds between two frames.
            on_frame: Called after every frame so the display can be redrawn.
        """
        self.frames = frames
        self.amplitude = amplitude
        self.frame_interval = frame_interval
        self.on_frame = on_frame
        self._scopes: dict[int, CancelScope] = {}

    @property
    def running(self) -> set[int]:
        """Indices of the nodes currently being animated."""
        return set(self._scopes)

    async def animate(self, index: int, position: LayoutPosition) -> None:
        """Plays a pop on the node, replacing the one already running on it."""
        if (previous := self._scopes.pop(index, None)) is not None:
            logger.debug("Restarting the animation of node %d", index)
            previous.cancel()
        with CancelScope() as scope:
            self._scopes[index] = scope
            try:
                for value in pop_curve(position.emphasis, self.frames, self.amplitude):
                    await sleep(self.frame_interval)
                    position.emphasis = value
                    if self.on_frame is not None:
                        self.on_frame()
            finally:
                if self._scopes.get(index) is scope:
                    del self._scopes[index]

    def start(self, task_group: TaskGroup, index: int, position: LayoutPosition) -> None:
        """Schedules a pop in the task group without waiting for it."""
        task_group.start_soon(self.animate, index, position)

    def cancel_all(self) -> None:
        """Stops every running animation, leaving the emphasis where it currently is."""
        for scope in self._scopes.values():
            scope.cancel()
        self._scopes.clear()
