"""Window that shows an image being rebuilt from blocks sent by a worker."""

from __future__ import annotations

import argparse
import os
import queue
import sys
from typing import Optional, Sequence

from PIL import Image

from qthreadlab.block import Block
from qthreadlab.pixelate import BlockRenderer
from qthreadlab.stars import create_image

WINDOW_TITLE = "Queued Custom Type"
BLOCK_ALPHA = 64
SCREEN_FRACTION = 0.75
_POLL_MS = 20
_FINISHED = object()


def fit_to_screen(image: Image.Image, screen_width: int, screen_height: int) -> Image.Image:
    """Shrink ``image`` to three quarters of the screen, keeping its aspect ratio."""
    width, height = image.size
    if not (width > SCREEN_FRACTION * screen_width or height > SCREEN_FRACTION * screen_height):
        return image
    max_w = int(SCREEN_FRACTION * screen_width)
    max_h = int(SCREEN_FRACTION * screen_height)
    scaled_w = max_h * width // height
    if scaled_w <= max_w:
        new_size = (scaled_w, max_h)
    else:
        new_size = (max_w, max_w * height // width)
    new_size = (max(new_size[0], 1), max(new_size[1], 1))
    return image.resize(new_size, Image.Resampling.LANCZOS)


def paint_block(canvas: Image.Image, block: Block) -> None:
    """Blend the block's colour, with its alpha, over its rectangle of ``canvas``."""
    x, y, width, height = block.rect
    left, top = max(0, x), max(0, y)
    right, bottom = min(canvas.width, x + width), min(canvas.height, y + height)
    if right <= left or bottom <= top:
        return
    red, green, blue, alpha = block.color
    box = (left, top, right, bottom)
    region = canvas.crop(box).convert("RGB")
    overlay = Image.new("RGB", region.size, (red, green, blue))
    blended = Image.blend(region, overlay, alpha / 255.0)
    canvas.paste(blended.convert(canvas.mode), box)


class Window:
    """Tk window with a picture, a load button and a stop button."""

    def __init__(self, root) -> None:
        import tkinter

        self.root = root
        self.path = ""
        self.canvas: Optional[Image.Image] = None
        self._photo = None
        self._events: "queue.Queue[object]" = queue.Queue()
        self._renderer = BlockRenderer(
            self._events.put, lambda: self._events.put(_FINISHED)
        )

        root.title(WINDOW_TITLE)
        self.label = tkinter.Label(root, anchor="center")
        self.label.pack(fill="both", expand=True)

        buttons = tkinter.Frame(root)
        buttons.pack()
        self.load_button = tkinter.Button(
            buttons, text="Load image...", underline=0, command=self.choose_image
        )
        self.reset_button = tkinter.Button(
            buttons, text="Stop", underline=0, state="disabled",
            command=self._renderer.request_interruption,
        )
        self.load_button.pack(side="left")
        self.reset_button.pack(side="left")

        root.bind("<Alt-l>", lambda event: self.load_button.invoke())
        root.bind("<Alt-s>", lambda event: self.reset_button.invoke())
        root.protocol("WM_DELETE_WINDOW", self._close)
        root.after(_POLL_MS, self._poll)

    def load_image(self, image: Image.Image) -> None:
        """Show a blank canvas of the image's size and start pixelating it."""
        use_image = fit_to_screen(
            image.convert("RGB"),
            self.root.winfo_screenwidth(),
            self.root.winfo_screenheight(),
        )
        self.canvas = Image.new("RGB", use_image.size, (255, 255, 255))
        self._show()
        self.load_button.configure(state="disabled")
        self.reset_button.configure(state="normal")
        self._renderer.process_image(use_image)

    def choose_image(self) -> None:
        """Ask for an image file and load it if it can be read."""
        from tkinter import filedialog

        extensions = sorted(
            ext for ext in Image.registered_extensions() if ext == ext.lower()
        )
        patterns = " ".join(f"*{ext}" for ext in extensions)
        new_path = filedialog.askopenfilename(
            parent=self.root,
            title="Open Image",
            initialdir=os.path.dirname(self.path) or None,
            filetypes=[(f"Image files ({patterns})", patterns)],
        )
        if not new_path:
            return
        try:
            with Image.open(new_path) as opened:
                image = opened.convert("RGB")
        except (OSError, ValueError):
            return
        self.load_image(image)
        self.path = new_path

    def add_block(self, block: Block) -> None:
        if self.canvas is None:
            return
        paint_block(self.canvas, block.with_alpha(BLOCK_ALPHA))
        self._show()

    def reset_ui(self) -> None:
        self.load_button.configure(state="normal")
        self.reset_button.configure(state="disabled")

    def _show(self) -> None:
        from PIL import ImageTk

        self._photo = ImageTk.PhotoImage(self.canvas)
        self.label.configure(image=self._photo)

    def _poll(self) -> None:
        while True:
            try:
                item = self._events.get_nowait()
            except queue.Empty:
                break
            if item is _FINISHED:
                self.reset_ui()
            else:
                self.add_block(item)
        self.root.after(_POLL_MS, self._poll)

    def _close(self) -> None:
        self._renderer.request_interruption()
        self._renderer.wait()
        self.root.destroy()


def main(argv: Optional[Sequence[str]] = None) -> int:
    argparse.ArgumentParser(prog="queuedcustomtype", description=WINDOW_TITLE).parse_args(argv)

    import tkinter

    root = tkinter.Tk()
    window = Window(root)
    window.load_image(create_image(256, 256))
    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())