# qthreadlab

A small collection of threading programs, each showing a different way of
sharing work between threads:

- **Mandelbrot** – a background thread renders the Mandelbrot set in
  progressively finer passes while the window stays responsive.
- **Queued custom type** – a worker thread walks over an image, averages
  random square regions and sends each result back to the window as a
  `Block`, which is painted semi-transparently over a white canvas.
- **Semaphores** – a producer and a consumer share a ring buffer guarded by
  two counting semaphores.
- **Wait conditions** – the same producer/consumer pair, this time guarded by
  a lock and two condition variables.

## Installation

```
pip install .
```

The graphical programs use Tkinter from the standard library (it must be
available in your Python installation) and Pillow for images.

## Commands

```
qthreadlab-mandelbrot [--passes N] [--version]
```

Opens the Mandelbrot viewer. `--passes` sets the number of rendering passes,
from 1 to 8 (default 8); any other value prints `Invalid value: "..."` to
standard error and the command exits with status -1.

In the window:

- mouse wheel, `+` / `-` (also on the keypad) zoom in and out;
- the arrow keys scroll by 20 pixels;
- dragging with the left mouse button moves the picture, and releasing it
  re-centres the rendering on the new position;
- `q` closes the window.

While a new rendering is on its way, the previous image is shown scaled and
shifted as a preview. The status of the latest pass (pass number, iteration
limit and time taken) is shown at the top, a help line at the bottom.

```
qthreadlab-queued
```

Opens the block pixelator with a generated star pattern. *Load image...*
(Alt+L) picks a picture of your own, which is shrunk to three quarters of the
screen if it is larger; *Stop* (Alt+S) interrupts processing.

```
qthreadlab-semaphores [--data-size N] [--buffer-size N]
qthreadlab-waitconditions [--data-size N] [--buffer-size N]
```

Each runs a producer and a consumer thread that pass a stream of random
`A`, `C`, `G` and `T` characters through a shared ring buffer; the consumer
writes them to standard error, followed by a newline. The defaults are
100000 characters and a buffer of 8192 slots. A non-positive buffer size or a
negative data size is reported as a usage error.

## Library use

The building blocks work without any window.

```python
import io
import random

from qthreadlab.mandelbrot_render import escape_iterations, max_iterations, rgb_from_wavelength
from qthreadlab.semaphores import run

print(max_iterations(0))              # iteration limit of the first pass: 96
print(hex(rgb_from_wavelength(550.0)))  # packed 0xAARRGGBB colour of 550 nm light
print(escape_iterations(0.0, 0.0, 96))  # points inside the set reach the limit

out = io.StringIO()
run(data_size=20, buffer_size=4, output=out, rng=random.Random(1))
print(out.getvalue())                 # 20 letters from ACGT and a newline
```

Modules:

- `qthreadlab.mandelbrot_render` – `rgb_from_wavelength`, `make_colormap`,
  `max_iterations`, `escape_iterations`, `format_info`, and `RenderThread`,
  which renders in the background and hands each finished pass to a callback
  as a `RenderedImage` (a Pillow image, the scale it was rendered at, the
  device pixel ratio and the status text). A new `render()` call restarts any
  rendering in progress; `close()` (or leaving a `with` block) stops the
  worker.
- `qthreadlab.mandelbrot_view` – `MandelbrotView`, the toolkit-independent
  state of the viewer (centre, scale, drag offset, last image), driven by
  `resize`, `zoom`, `scroll`, `key_press`, `wheel`, `pinch`, `mouse_press`,
  `mouse_move`, `mouse_release` and `update_pixmap`; `preview_geometry()`
  tells where to draw the current image.
- `qthreadlab.mandelbrot_app` – the Tk window `MandelbrotWindow`,
  `parse_passes`, `build_parser` and `main`.
- `qthreadlab.block` – `Block`, an immutable rectangle with an RGBA colour.
- `qthreadlab.pixelate` – `average_block`, `generate_blocks` and
  `BlockRenderer`, which runs `generate_blocks` on a worker thread and reports
  each `Block` and the end of the run through callbacks.
- `qthreadlab.stars` – `create_image`, which draws a 3×3 grid of white stars
  on blue.
- `qthreadlab.queued_app` – `fit_to_screen`, `paint_block`, the Tk `Window`
  and `main`.
- `qthreadlab.semaphores` and `qthreadlab.waitconditions` – the buffers
  (`SemaphoreBuffer`, `ConditionBuffer`), `Producer` and `Consumer` threads,
  `run` and `main`.

## Limitations

- The Tk Mandelbrot window does not receive pinch gestures; pinch zooming is
  only available by calling `MandelbrotView.pinch` directly.
- The Mandelbrot window always renders at a device pixel ratio of 1.
- Rendering is done in pure Python and is slow for large windows and later
  passes.

## Running the tests

```
pip install .[test]
pytest
```