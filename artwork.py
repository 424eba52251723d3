"""
Generated PNG artwork for the mini-app manifest: icon, splash/hero card and
a portrait screenshot. Each image is drawn once and cached as PNG bytes.
"""

import io
from functools import lru_cache

from PIL import Image, ImageDraw

BACKGROUND = "#1a1a2e"
TILE = "#23233d"
GRID = "#34345a"
X_COLOR = "#ecebf5"
O_COLOR = "#ff9f43"
ACCENT = "#7c7cff"

# A finished game for the artwork: X takes the diagonal.
SAMPLE_BOARD = ["X", "O", "O", None, "X", None, None, None, "X"]
SAMPLE_LINE = (0, 4, 8)

# Width, height for each advertised file.
SIZES = {
    "blue-icon.png": (1024, 1024),
    "blue-hero.png": (1200, 800),
    "screenshot-portrait.png": (1284, 2778),
}


def _draw_board(draw, left, top, size, board, line=None):
    cell = size // 3
    gap = max(size // 60, 4)
    pad = cell // 5
    stroke = max(cell // 10, 6)
    for i, mark in enumerate(board):
        x = left + (i % 3) * cell
        y = top + (i // 3) * cell
        box = (x + gap, y + gap, x + cell - gap, y + cell - gap)
        draw.rounded_rectangle(box, radius=cell // 8, fill=TILE, outline=GRID, width=max(gap // 2, 2))
        if mark == "X":
            draw.line((x + pad, y + pad, x + cell - pad, y + cell - pad), fill=X_COLOR, width=stroke)
            draw.line((x + cell - pad, y + pad, x + pad, y + cell - pad), fill=X_COLOR, width=stroke)
        elif mark == "O":
            draw.ellipse((x + pad, y + pad, x + cell - pad, y + cell - pad), outline=O_COLOR, width=stroke)
    if line:
        first, last = line[0], line[-1]
        half = cell // 2
        start = (left + (first % 3) * cell + half, top + (first // 3) * cell + half)
        end = (left + (last % 3) * cell + half, top + (last // 3) * cell + half)
        draw.line(start + end, fill=ACCENT, width=stroke // 2)


def _png(image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@lru_cache(maxsize=None)
def render(name: str) -> bytes:
    """Return PNG bytes for one of the names in SIZES."""
    if name not in SIZES:
        raise KeyError(name)
    width, height = SIZES[name]
    image = Image.new("RGB", (width, height), color=BACKGROUND)
    draw = ImageDraw.Draw(image)
    size = min(width, height) * 3 // 4
    if name == "screenshot-portrait.png":
        # Stats strip above the board, buttons below it.
        stat_w = size // 3
        for i in range(3):
            x = (width - size) // 2 + i * stat_w
            draw.rounded_rectangle((x + 10, height // 4, x + stat_w - 10, height // 4 + stat_w // 2),
                                   radius=24, fill=TILE, outline=GRID, width=3)
        top = (height - size) // 2
        _draw_board(draw, (width - size) // 2, top, size, SAMPLE_BOARD, SAMPLE_LINE)
        button_top = top + size + 80
        draw.rounded_rectangle(((width - size) // 2, button_top, width // 2 - 20, button_top + 120),
                               radius=24, fill=TILE, outline=GRID, width=3)
        draw.rounded_rectangle((width // 2 + 20, button_top, (width + size) // 2, button_top + 120),
                               radius=24, fill=ACCENT)
    else:
        _draw_board(draw, (width - size) // 2, (height - size) // 2, size, SAMPLE_BOARD, SAMPLE_LINE)
    return _png(image)
