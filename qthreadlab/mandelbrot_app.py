"""Interactive Mandelbrot viewer with a command line entry point."""

from __future__ import annotations

import argparse
import math
import queue
import sys
from typing import Optional, Sequence

from qthreadlab.mandelbrot_render import DEFAULT_NUM_PASSES, RenderedImage, RenderThread
from qthreadlab.mandelbrot_view import (
    SIZE_HINT,
    WAITING_TEXT,
    WINDOW_TITLE,
    Key,
    MandelbrotView,
)

VERSION = "1.0"
MIN_PASSES = 1
MAX_PASSES = 8
_POLL_MS = 30

_KEYSYMS = {
    "plus": Key.PLUS,
    "KP_Add": Key.PLUS,
    "minus": Key.MINUS,
    "KP_Subtract": Key.MINUS,
    "Left": Key.LEFT,
    "Right": Key.RIGHT,
    "Down": Key.DOWN,
    "Up": Key.UP,
    "q": Key.Q,
    "Q": Key.Q,
}


def parse_passes(value: str) -> int:
    """Convert a pass count given on the command line; it must lie in 1..8."""
    try:
        passes = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value: {value!r}") from None
    if not MIN_PASSES <= passes <= MAX_PASSES:
        raise ValueError(f"Invalid value: {value!r}")
    return passes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandelbrot", description="Mandelbrot Example"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "--passes", metavar="passes", help="Number of passes (1-8)", default=None
    )
    return parser


class MandelbrotWindow:
    """A Tk canvas showing the progressively rendered Mandelbrot set."""

    def __init__(self, root, num_passes: int = DEFAULT_NUM_PASSES) -> None:
        import tkinter

        self.root = root
        self._results: "queue.Queue[RenderedImage]" = queue.Queue()
        self._thread = RenderThread(self._results.put, num_passes)
        self.view = MandelbrotView(self._thread.render)
        self._photo = None
        self._closed = False

        root.title(WINDOW_TITLE)
        width, height = SIZE_HINT
        self.canvas = tkinter.Canvas(
            root, width=width, height=height, background="black",
            highlightthickness=0, cursor="crosshair",
        )
        self.canvas.pack(fill="both", expand=True)
        self.canvas.focus_set()

        self.canvas.bind("<Configure>", self._on_configure)
        self.canvas.bind("<KeyPress>", self._on_key)
        self.canvas.bind("<MouseWheel>", self._on_mouse_wheel)
        self.canvas.bind("<Button-4>", lambda event: self._on_wheel(120))
        self.canvas.bind("<Button-5>", lambda event: self._on_wheel(-120))
        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        root.protocol("WM_DELETE_WINDOW", self.close)
        root.after(_POLL_MS, self._poll)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._thread.close()
        self.root.destroy()

    def _refresh(self) -> None:
        if self.view.closed:
            self.close()
            return
        if self.view.needs_repaint:
            self.view.needs_repaint = False
            self._paint()

    def _poll(self) -> None:
        if self._closed:
            return
        while True:
            try:
                rendered = self._results.get_nowait()
            except queue.Empty:
                break
            self.view.update_pixmap(rendered.image, rendered.scale_factor)
        self._refresh()
        self.root.after(_POLL_MS, self._poll)

    def _on_configure(self, event) -> None:
        self.view.resize(event.width, event.height, 1.0)
        self._paint()

    def _on_key(self, event) -> None:
        key = _KEYSYMS.get(event.keysym)
        if key is not None:
            self.view.key_press(key)
            self._refresh()

    def _on_mouse_wheel(self, event) -> None:
        delta = event.delta
        # Windows reports multiples of 120, macOS small step counts.
        if abs(delta) < 120:
            delta *= 120
        self._on_wheel(delta)

    def _on_wheel(self, angle_delta_y: int) -> None:
        self.view.wheel(angle_delta_y)
        self._refresh()

    def _on_press(self, event) -> None:
        self.view.mouse_press(event.x, event.y)

    def _on_move(self, event) -> None:
        self.view.mouse_move(event.x, event.y)
        self._refresh()

    def _on_release(self, event) -> None:
        self.view.mouse_release(event.x, event.y)
        self._refresh()

    def _paint(self) -> None:
        from PIL import ImageTk

        canvas = self.canvas
        view = self.view
        width, height = view.width, view.height
        canvas.delete("all")
        canvas.create_rectangle(0, 0, width, height, fill="black", outline="")

        if view.pixmap is None:
            canvas.create_text(
                width / 2, height / 2, text=WAITING_TEXT, fill="white",
                width=max(width - 10, 1), justify="center",
            )
            return

        geometry = view.preview_geometry()
        preview = view.pixmap
        pix_w, pix_h = max(geometry.width, 0), max(geometry.height, 0)
        if geometry.scale == 1.0:
            if preview.size != (pix_w, pix_h) and pix_w > 0 and pix_h > 0:
                preview = preview.resize((pix_w, pix_h))
            self._photo = ImageTk.PhotoImage(preview)
            canvas.create_image(geometry.x, geometry.y, image=self._photo, anchor="nw")
        else:
            self._paint_scaled(preview, geometry)

        if view.info:
            self._paint_banner(view.info, width / 2, 0, "n")
        self._paint_banner(view.help, width / 2, height, "s")

    def _paint_scaled(self, pixmap, geometry) -> None:
        from PIL import ImageTk

        view = self.view
        base_w = round(pixmap.size[0] / (view.pixmap_device_pixel_ratio or 1.0))
        base_h = round(pixmap.size[1] / (view.pixmap_device_pixel_ratio or 1.0))
        if base_w <= 0 or base_h <= 0:
            return
        if pixmap.size != (base_w, base_h):
            pixmap = pixmap.resize((base_w, base_h))
        scale = geometry.scale
        left = max(0, math.floor(-geometry.x / scale) - 1)
        top = max(0, math.floor(-geometry.y / scale) - 1)
        right = min(base_w, math.ceil((view.width - geometry.x) / scale) + 1)
        bottom = min(base_h, math.ceil((view.height - geometry.y) / scale) + 1)
        if right <= left or bottom <= top:
            return
        target = (
            max(1, round((right - left) * scale)),
            max(1, round((bottom - top) * scale)),
        )
        exposed = pixmap.crop((left, top, right, bottom)).resize(target)
        self._photo = ImageTk.PhotoImage(exposed)
        self.canvas.create_image(
            geometry.x + left * scale, geometry.y + top * scale,
            image=self._photo, anchor="nw",
        )

    def _paint_banner(self, text: str, x: float, y: float, anchor: str) -> None:
        canvas = self.canvas
        text_id = canvas.create_text(
            x, y, text=text, fill="white", anchor=anchor,
            width=max(self.view.width - 10, 1), justify="center",
        )
        x1, y1, x2, y2 = canvas.bbox(text_id)
        box = canvas.create_rectangle(
            x1 - 5, y1, x2 + 5, y2, fill="black", outline="", stipple="gray50"
        )
        canvas.tag_lower(box, text_id)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    num_passes = DEFAULT_NUM_PASSES
    if args.passes is not None:
        try:
            num_passes = parse_passes(args.passes)
        except ValueError:
            print(f'Invalid value: "{args.passes}"', file=sys.stderr)
            return -1

    import tkinter

    root = tkinter.Tk()
    MandelbrotWindow(root, num_passes)
    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())