"""Rendering mode shared by every text-building function.

The mode is passed explicitly instead of flipping a process-wide color switch,
so building help, errors or examples never needs to re-parse the options.
"""

from __future__ import annotations

import os
from enum import Enum


class RenderMode(str, Enum):
    """How user-facing text is styled."""

    COLOR = "color"
    PLAIN = "plain"

    @classmethod
    def default(cls) -> "RenderMode":
        """Return the default mode, honouring the NO_COLOR convention."""

        return cls.PLAIN if os.environ.get("NO_COLOR") else cls.COLOR

    @classmethod
    def from_bool(cls, no_color: bool) -> "RenderMode":
        """Derive a mode from the --no-color flag."""

        return cls.PLAIN if no_color else cls.default()

    @property
    def colored(self) -> bool:
        return self is RenderMode.COLOR

    def style(self, style: str) -> str:
        """Return `style` in color mode and an empty style otherwise."""

        return style if self.colored else ""
