"""A coloured rectangle passed from the pixelating worker to the window."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

Rect = Tuple[int, int, int, int]
Color = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Block:
    """A rectangle ``(x, y, width, height)`` with an ``(r, g, b, a)`` colour.

    A colour given with three components is taken as fully opaque.
    """

    rect: Rect = (0, 0, 0, 0)
    color: Color = (0, 0, 0, 255)

    def __post_init__(self) -> None:
        rect = tuple(int(v) for v in self.rect)
        if len(rect) != 4:
            raise ValueError(f"rect needs four values, got {self.rect!r}")
        color = tuple(int(v) for v in self.color)
        if len(color) == 3:
            color = color + (255,)
        if len(color) != 4:
            raise ValueError(f"color needs three or four components, got {self.color!r}")
        if any(not 0 <= component <= 255 for component in color):
            raise ValueError(f"color components must lie in 0..255, got {self.color!r}")
        object.__setattr__(self, "rect", rect)
        object.__setattr__(self, "color", color)

    def with_alpha(self, alpha: int) -> "Block":
        """Return a copy of this block whose colour has the given alpha."""
        red, green, blue, _ = self.color
        return replace(self, color=(red, green, blue, alpha))