"""
Display-side driver: owns the field, render options and pixel buffer.

Every mutation (new random field, parameter change, marker toggle)
re-renders the whole buffer exactly once.  The controller knows nothing
about Qt; the canvas widget forwards key presses and timer ticks to it.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from .control import CommandChannel, ControlCommand, SetGoo, SetThreshold
from .field import MetaballField
from .renderer import RenderOptions, render

logger = logging.getLogger(__name__)


class MetaballController:
    """Holds the state behind the display and keeps the buffer current.

    Parameters:
        field:    Initial metaball field.
        options:  Render options (or defaults).
        rng:      Generator used when randomizing (None = unseeded).
        on_frame: Called after every re-render.
    """

    def __init__(
        self,
        field: MetaballField,
        options: Optional[RenderOptions] = None,
        rng: Optional[np.random.Generator] = None,
        on_frame: Optional[Callable[[], None]] = None,
    ) -> None:
        self.field = field
        self.options = options or RenderOptions()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.on_frame = on_frame
        self.buffer = bytearray(field.pixel_count * 4)
        self.render_count = 0
        self.redraw()

    @property
    def width(self) -> int:
        return self.field.width

    @property
    def height(self) -> int:
        return self.field.height

    def redraw(self) -> None:
        render(self.buffer, self.field, self.options)
        self.render_count += 1
        if self.on_frame is not None:
            self.on_frame()

    # ── triggers ──────────────────────────────────────────────────────────

    def randomize(self) -> None:
        logger.info("randomizing")
        self.field = self.field.randomized(self.rng)
        self.redraw()

    def toggle_centers(self) -> None:
        logger.info("crosses toggled")
        self.options.show_centers = not self.options.show_centers
        self.redraw()

    def set_scheme(self, scheme) -> None:
        self.options.scheme = scheme
        self.redraw()

    # ── control commands ──────────────────────────────────────────────────

    def apply(self, command: ControlCommand) -> None:
        command.apply(self.field)
        if isinstance(command, SetGoo):
            logger.info("Set goo to %s", command.value)
        elif isinstance(command, SetThreshold):
            logger.info("Set threshold to %s", command.value)
        self.redraw()

    def poll(self, channel: CommandChannel) -> int:
        """Apply every pending command; returns how many were applied.

        Raises:
            ChannelDisconnected: the producer is gone and nothing is left.
        """
        applied = 0
        while True:
            command = channel.try_receive()
            if command is None:
                return applied
            self.apply(command)
            applied += 1
