"""Break an image into averaged blocks of decreasing size on a worker thread."""

from __future__ import annotations

import random
import threading
import time
from typing import Callable, Iterator, Optional

from PIL import Image

from qthreadlab.block import Block

BLOCKS_PER_SIZE = 400
DEFAULT_DELAY = 0.01


def average_block(image: Image.Image, x1: int, y1: int, x2: int, y2: int) -> Block:
    """Average the pixels in ``[x1, x2) x [y1, y2)`` into one block.

    The block's rectangle reaches one pixel past the averaged area on each axis.
    """
    if x2 <= x1 or y2 <= y1:
        raise ValueError(f"empty region ({x1}, {y1}) - ({x2}, {y2})")
    if image.mode != "RGB":
        image = image.convert("RGB")
    pixels = list(image.crop((x1, y1, x2, y2)).getdata())
    count = len(pixels)
    red = sum(p[0] for p in pixels)
    green = sum(p[1] for p in pixels)
    blue = sum(p[2] for p in pixels)
    return Block(
        (x1, y1, x2 - x1 + 1, y2 - y1 + 1),
        (red // count, green // count, blue // count),
    )


def generate_blocks(
    image: Image.Image, rng: Optional[random.Random] = None
) -> Iterator[Block]:
    """Yield averaged blocks, ``BLOCKS_PER_SIZE`` for each size from large to small."""
    width, height = image.size
    if width <= 0 or height <= 0:
        raise ValueError("image is empty")
    if rng is None:
        rng = random.Random()
    if image.mode != "RGB":
        image = image.convert("RGB")
    largest = max(width // 20, height // 20)
    for size in range(largest, 0, -1):
        half = size // 2
        for _ in range(BLOCKS_PER_SIZE):
            x1 = max(0, rng.randrange(width) - half)
            x2 = min(x1 + half + 1, width)
            y1 = max(0, rng.randrange(height) - half)
            y2 = min(y1 + half + 1, height)
            yield average_block(image, x1, y1, x2, y2)


class BlockRenderer:
    """Runs :func:`generate_blocks` on a background thread.

    ``on_block`` receives every block from the worker thread; ``on_finished``
    is called there once the run ends, whether completed or interrupted.
    """

    def __init__(
        self,
        on_block: Callable[[Block], None],
        on_finished: Optional[Callable[[], None]] = None,
        delay: float = DEFAULT_DELAY,
    ) -> None:
        self._on_block = on_block
        self._on_finished = on_finished
        self.delay = delay
        self._interrupted = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._image: Optional[Image.Image] = None

    def process_image(self, image: Optional[Image.Image]) -> None:
        """Start pixelating ``image``; empty images and busy workers are ignored."""
        if image is None or image.width <= 0 or image.height <= 0:
            return
        if self.is_running():
            return
        self._image = image.convert("RGB")
        self._interrupted.clear()
        self._thread = threading.Thread(target=self._run, name="pixelate", daemon=True)
        self._thread.start()

    def request_interruption(self) -> None:
        self._interrupted.set()

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker; return True if it is no longer running."""
        if self._thread is not None:
            self._thread.join(timeout)
        return not self.is_running()

    def _run(self) -> None:
        try:
            for block in generate_blocks(self._image):
                self._on_block(block)
                if self._interrupted.is_set():
                    return
                if self.delay > 0:
                    time.sleep(self.delay)
        finally:
            if self._on_finished is not None:
                self._on_finished()