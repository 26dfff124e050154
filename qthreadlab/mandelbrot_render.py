"""Progressive Mandelbrot rendering on a background worker thread."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from PIL import Image

COLORMAP_SIZE = 512
ESCAPE_LIMIT = 4
DEFAULT_NUM_PASSES = 8
INFO_KEY = "info"

_BLACK = b"\x00\x00\x00"


def _qrgb(red: int, green: int, blue: int) -> int:
    """Pack components into an opaque 0xAARRGGBB value."""
    return 0xFF000000 | ((red & 0xFF) << 16) | ((green & 0xFF) << 8) | (blue & 0xFF)


def _rgb_bytes(value: int) -> bytes:
    return bytes(((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF))


def _qround(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def rgb_from_wavelength(wave: float) -> int:
    """Approximate the colour of visible light of the given wavelength in nm."""
    r = g = b = 0.0
    if 380.0 <= wave <= 440.0:
        r = -1.0 * (wave - 440.0) / (440.0 - 380.0)
        b = 1.0
    elif 440.0 <= wave <= 490.0:
        g = (wave - 440.0) / (490.0 - 440.0)
        b = 1.0
    elif 490.0 <= wave <= 510.0:
        g = 1.0
        b = -1.0 * (wave - 510.0) / (510.0 - 490.0)
    elif 510.0 <= wave <= 580.0:
        r = (wave - 510.0) / (580.0 - 510.0)
        g = 1.0
    elif 580.0 <= wave <= 645.0:
        r = 1.0
        g = -1.0 * (wave - 645.0) / (645.0 - 580.0)
    elif 645.0 <= wave <= 780.0:
        r = 1.0

    s = 1.0
    if wave > 700.0:
        s = 0.3 + 0.7 * (780.0 - wave) / (780.0 - 700.0)
    elif wave < 420.0:
        s = 0.3 + 0.7 * (wave - 380.0) / (420.0 - 380.0)

    def channel(value: float) -> int:
        scaled = value * s
        if scaled <= 0.0:
            return 0
        return int(math.pow(scaled, 0.8) * 255)

    return _qrgb(channel(r), channel(g), channel(b))


def make_colormap(size: int = COLORMAP_SIZE) -> list[int]:
    """Return ``size`` colours spread across the visible spectrum."""
    return [rgb_from_wavelength(380.0 + (i * 400.0 / size)) for i in range(size)]


def max_iterations(pass_index: int) -> int:
    """Iteration limit used for the given zero-based pass."""
    return (1 << (2 * pass_index + 6)) + 32


def escape_iterations(ax: float, ay: float, limit_iterations: int) -> int:
    """Count iterations until the orbit of ``ax + ay*i`` escapes, up to the limit."""
    a1, b1 = ax, ay
    count = 0
    while True:
        count += 1
        a2 = (a1 * a1) - (b1 * b1) + ax
        b2 = (2 * a1 * b1) + ay
        if (a2 * a2) + (b2 * b2) > ESCAPE_LIMIT:
            break
        count += 1
        a1 = (a2 * a2) - (b2 * b2) + ax
        b1 = (2 * a2 * b2) + ay
        if (a1 * a1) + (b1 * b1) > ESCAPE_LIMIT:
            break
        if count >= limit_iterations:
            break
    return count


def format_info(pass_index: int, num_passes: int, iterations: int, elapsed_ms: int) -> str:
    """Build the status line attached to each rendered pass."""
    if elapsed_ms > 2000:
        elapsed = f"{elapsed_ms // 1000}s"
    else:
        elapsed = f"{elapsed_ms}ms"
    return (
        f" Pass {pass_index + 1}/{num_passes}, max iterations: {iterations}, "
        f"time: {elapsed}"
    )


@dataclass(frozen=True)
class RenderedImage:
    """One finished rendering pass."""

    image: Image.Image
    scale_factor: float
    device_pixel_ratio: float
    info: str

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


class RenderThread:
    """Renders the Mandelbrot set in passes of increasing detail.

    ``on_rendered`` is called from the worker thread with a
    :class:`RenderedImage` after every completed pass.
    """

    def __init__(
        self,
        on_rendered: Callable[[RenderedImage], None],
        num_passes: int = DEFAULT_NUM_PASSES,
    ) -> None:
        self._on_rendered = on_rendered
        self.num_passes = num_passes
        self._colors = [_rgb_bytes(c) for c in make_colormap(COLORMAP_SIZE)]
        self._condition = threading.Condition(threading.Lock())
        self._center_x = 0.0
        self._center_y = 0.0
        self._scale_factor = 1.0
        self._device_pixel_ratio = 1.0
        self._result_size: Tuple[int, int] = (0, 0)
        self._restart = False
        self._abort = False
        self._thread: Optional[threading.Thread] = None

    def render(
        self,
        center_x: float,
        center_y: float,
        scale_factor: float,
        result_size: Tuple[int, int],
        device_pixel_ratio: float = 1.0,
    ) -> None:
        """Request a rendering; restarts any rendering in progress."""
        with self._condition:
            if self._abort:
                raise RuntimeError("render thread is closed")
            self._center_x = center_x
            self._center_y = center_y
            self._scale_factor = scale_factor
            self._device_pixel_ratio = device_pixel_ratio
            self._result_size = (int(result_size[0]), int(result_size[1]))
            if not self.is_running():
                self._thread = threading.Thread(
                    target=self._run, name="mandelbrot-render", daemon=True
                )
                self._thread.start()
            else:
                self._restart = True
                self._condition.notify()

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def close(self) -> None:
        """Stop the worker and wait for it to finish."""
        with self._condition:
            self._abort = True
            self._condition.notify()
        if self._thread is not None:
            self._thread.join()

    def __enter__(self) -> "RenderThread":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _run(self) -> None:
        colors = self._colors
        color_count = len(colors)
        while True:
            with self._condition:
                dpr = self._device_pixel_ratio
                width = _qround(self._result_size[0] * dpr)
                height = _qround(self._result_size[1] * dpr)
                requested_scale = self._scale_factor
                scale = requested_scale / dpr
                center_x = self._center_x
                center_y = self._center_y

            half_width = width // 2
            half_height = height // 2
            pixels = bytearray(width * height * 3)

            pass_index = 0
            while pass_index < self.num_passes:
                limit = max_iterations(pass_index)
                all_black = True
                started = time.monotonic()

                for y in range(-half_height, half_height):
                    if self._restart:
                        break
                    if self._abort:
                        return
                    ay = center_y + y * scale
                    row = bytearray()
                    for x in range(-half_width, half_width):
                        ax = center_x + x * scale
                        count = escape_iterations(ax, ay, limit)
                        if count < limit:
                            row += colors[count % color_count]
                            all_black = False
                        else:
                            row += _BLACK
                    offset = (y + half_height) * width * 3
                    pixels[offset:offset + len(row)] = row

                if all_black and pass_index == 0:
                    pass_index = 4
                else:
                    if not self._restart:
                        elapsed_ms = int((time.monotonic() - started) * 1000)
                        info = format_info(pass_index, self.num_passes, limit, elapsed_ms)
                        image = self._make_image(pixels, width, height, info)
                        self._on_rendered(
                            RenderedImage(image, requested_scale, dpr, info)
                        )
                    pass_index += 1

            with self._condition:
                if not self._restart and not self._abort:
                    self._condition.wait()
                self._restart = False
                if self._abort:
                    return

    @staticmethod
    def _make_image(pixels: bytearray, width: int, height: int, info: str) -> Image.Image:
        if width > 0 and height > 0:
            image = Image.frombytes("RGB", (width, height), bytes(pixels))
        else:
            image = Image.new("RGB", (max(width, 0), max(height, 0)))
        image.info[INFO_KEY] = info
        return image