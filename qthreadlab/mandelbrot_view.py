"""Interaction state of the Mandelbrot viewer, independent of any toolkit."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from PIL import Image

from qthreadlab.mandelbrot_render import INFO_KEY

DEFAULT_CENTER_X = -0.637011
DEFAULT_CENTER_Y = -0.0395159
DEFAULT_SCALE = 0.00403897

ZOOM_IN_FACTOR = 0.8
ZOOM_OUT_FACTOR = 1 / ZOOM_IN_FACTOR
SCROLL_STEP = 20

SIZE_HINT = (1024, 768)
WINDOW_TITLE = "Mandelbrot"
HELP_TEXT = (
    "Zoom with mouse wheel, +/- keys or pinch.  Scroll with arrow keys or by dragging."
)
WAITING_TEXT = "Rendering initial image, please wait..."

RenderRequest = Callable[[float, float, float, Tuple[int, int], float], None]


class Key(enum.Enum):
    """Keys the viewer reacts to."""

    PLUS = "+"
    MINUS = "-"
    LEFT = "Left"
    RIGHT = "Right"
    DOWN = "Down"
    UP = "Up"
    Q = "q"


@dataclass(frozen=True)
class PreviewGeometry:
    """Where and how large the current pixmap is drawn, in widget coordinates."""

    x: int
    y: int
    width: int
    height: int
    scale: float


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _fuzzy_equal(p1: float, p2: float) -> bool:
    return abs(p1 - p2) * 1e12 <= min(abs(p1), abs(p2))


class MandelbrotView:
    """Tracks centre, scale, dragging and the last rendered image.

    ``request_render`` is called as
    ``request_render(center_x, center_y, scale, (width, height), device_pixel_ratio)``
    whenever a new rendering is needed.
    """

    def __init__(self, request_render: RenderRequest) -> None:
        self._request_render = request_render
        self.center_x = DEFAULT_CENTER_X
        self.center_y = DEFAULT_CENTER_Y
        self.pixmap_scale = DEFAULT_SCALE
        self.cur_scale = DEFAULT_SCALE
        self.width, self.height = SIZE_HINT
        self.device_pixel_ratio = 1.0
        self.pixmap: Optional[Image.Image] = None
        self.pixmap_device_pixel_ratio = 1.0
        self.pixmap_offset = (0, 0)
        self.last_drag_pos: Optional[Tuple[int, int]] = None
        self.help = HELP_TEXT
        self.info = ""
        self.closed = False
        self.needs_repaint = False

    def _update(self) -> None:
        self.needs_repaint = True

    def _render(self) -> None:
        self._request_render(
            self.center_x,
            self.center_y,
            self.cur_scale,
            (self.width, self.height),
            self.device_pixel_ratio,
        )

    def resize(self, width: int, height: int, device_pixel_ratio: float = 1.0) -> None:
        """Record the new widget size and request a fresh rendering."""
        self.width = int(width)
        self.height = int(height)
        self.device_pixel_ratio = device_pixel_ratio
        self._render()

    def zoom(self, zoom_factor: float) -> None:
        self.cur_scale *= zoom_factor
        self._update()
        self._render()

    def scroll(self, delta_x: int, delta_y: int) -> None:
        self.center_x += delta_x * self.cur_scale
        self.center_y += delta_y * self.cur_scale
        self._update()
        self._render()

    def key_press(self, key: Union[Key, str]) -> bool:
        """Handle a key; return False if the key is not one the viewer uses."""
        try:
            key = Key(key)
        except ValueError:
            return False
        if key is Key.PLUS:
            self.zoom(ZOOM_IN_FACTOR)
        elif key is Key.MINUS:
            self.zoom(ZOOM_OUT_FACTOR)
        elif key is Key.LEFT:
            self.scroll(-SCROLL_STEP, 0)
        elif key is Key.RIGHT:
            self.scroll(+SCROLL_STEP, 0)
        elif key is Key.DOWN:
            self.scroll(0, -SCROLL_STEP)
        elif key is Key.UP:
            self.scroll(0, +SCROLL_STEP)
        else:
            self.closed = True
        return True

    def wheel(self, angle_delta_y: int) -> None:
        """Zoom by a wheel rotation given in eighths of a degree."""
        num_degrees = _cdiv(int(angle_delta_y), 8)
        num_steps = num_degrees / 15.0
        self.zoom(math.pow(ZOOM_IN_FACTOR, num_steps))

    def pinch(self, scale_factor: float) -> None:
        self.zoom(1.0 / scale_factor)

    def mouse_press(self, x: int, y: int) -> None:
        self.last_drag_pos = (x, y)

    def mouse_move(self, x: int, y: int) -> None:
        if self.last_drag_pos is None:
            return
        last_x, last_y = self.last_drag_pos
        off_x, off_y = self.pixmap_offset
        self.pixmap_offset = (off_x + x - last_x, off_y + y - last_y)
        self.last_drag_pos = (x, y)
        self._update()

    def mouse_release(self, x: int, y: int) -> None:
        if self.last_drag_pos is None:
            return
        last_x, last_y = self.last_drag_pos
        off_x, off_y = self.pixmap_offset
        self.pixmap_offset = (off_x + x - last_x, off_y + y - last_y)
        self.last_drag_pos = None

        pix_w, pix_h = self._pixmap_size()
        delta_x = _cdiv(self.width - pix_w, 2) - self.pixmap_offset[0]
        delta_y = _cdiv(self.height - pix_h, 2) - self.pixmap_offset[1]
        self.scroll(delta_x, delta_y)

    def update_pixmap(self, image: Image.Image, scale_factor: float) -> None:
        """Take a freshly rendered image, unless a drag is in progress."""
        if self.last_drag_pos is not None:
            return
        self.info = image.info.get(INFO_KEY, "")
        self.pixmap = image
        self.pixmap_device_pixel_ratio = self.device_pixel_ratio
        self.pixmap_offset = (0, 0)
        self.last_drag_pos = None
        self.pixmap_scale = scale_factor
        self._update()

    def _pixmap_size(self) -> Tuple[int, int]:
        if self.pixmap is None:
            return (0, 0)
        dpr = self.pixmap_device_pixel_ratio or 1.0
        width, height = self.pixmap.size
        return (round(width / dpr), round(height / dpr))

    def preview_geometry(self) -> Optional[PreviewGeometry]:
        """Placement of the pixmap for painting, or None when nothing is rendered."""
        if self.pixmap is None:
            return None
        off_x, off_y = self.pixmap_offset
        pix_w, pix_h = self._pixmap_size()
        if _fuzzy_equal(self.cur_scale, self.pixmap_scale):
            return PreviewGeometry(off_x, off_y, pix_w, pix_h, 1.0)
        scale = self.pixmap_scale / self.cur_scale
        new_w = int(pix_w * scale)
        new_h = int(pix_h * scale)
        new_x = off_x + _cdiv(pix_w - new_w, 2)
        new_y = off_y + _cdiv(pix_h - new_h, 2)
        return PreviewGeometry(new_x, new_y, new_w, new_h, scale)