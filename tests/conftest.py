"""
Shared pytest fixtures for sprite_slicer tests.
"""
import numpy as np
import pytest

from sprite_slicer.image_io import encode_png

WHITE = (255, 255, 255, 255)
RED = (200, 30, 30, 255)


@pytest.fixture
def canvas():
    """Factory: new RGBA raster filled with one color (transparent by default)."""
    def _canvas(w, h, color=(0, 0, 0, 0)):
        img = np.zeros((h, w, 4), dtype=np.uint8)
        img[...] = color
        return img
    return _canvas


@pytest.fixture
def fill():
    """Factory: paint a solid rectangle in place and return the raster."""
    def _fill(img, x, y, w, h, color=RED):
        img[y:y + h, x:x + w] = color
        return img
    return _fill


@pytest.fixture
def square_sheet(canvas, fill):
    """Factory: white sheet with an 80x80 square in each cell of a 200x200 grid.

    offsets shifts each square (row-major) from the cell's centered position,
    blank lists cell indices left empty, colors optionally gives one color
    per cell. Returns encoded PNG bytes.
    """
    def _sheet(rows, cols, offsets=None, blank=(), size=80, cell=200, colors=None):
        img = canvas(cols * cell, rows * cell, WHITE)
        margin = (cell - size) // 2
        for i in range(rows * cols):
            if i in blank:
                continue
            r, c = divmod(i, cols)
            dx, dy = offsets[i] if offsets else (0, 0)
            color = colors[i] if colors else RED
            fill(img, c * cell + margin + dx, r * cell + margin + dy, size, size, color)
        return encode_png(img)
    return _sheet
