"""Build the default star-pattern image shown at start-up."""

from __future__ import annotations

from PIL import Image, ImageDraw

BACKGROUND = (0, 0, 255)
FOREGROUND = (255, 255, 255)

_WINDOW = 10.0
_STAR = (
    ((4, 4), (7, 4), (5.5, 1)),
    ((1, 4), (7, 4), (10, 10)),
    ((4, 4), (10, 4), (1, 10)),
)


def create_image(width: int, height: int) -> Image.Image:
    """Return a blue image holding a 3x3 grid of white stars."""
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {width}x{height}")
    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    star_width = width // 3
    star_height = height // 3
    for row in range(3):
        for column in range(3):
            left = column * star_width
            top = row * star_height
            for triangle in _STAR:
                points = [
                    (left + px * star_width / _WINDOW, top + py * star_height / _WINDOW)
                    for px, py in triangle
                ]
                draw.polygon(points, fill=FOREGROUND)
    return image