"""Threading examples: progressive Mandelbrot rendering, queued image blocks and producer/consumer buffers."""

__version__ = "0.1.0"