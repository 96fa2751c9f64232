"""
Unit tests for sprite_slicer.sanitizer
"""
import numpy as np

from sprite_slicer.sanitizer import key_out_white, sanitize, shave_edges


class TestShaveEdges:
    """Tests for shave_edges"""

    def test_clears_border(self, canvas):
        cell = canvas(20, 20, (200, 30, 30, 255))
        out = shave_edges(cell, 4)
        assert (out[:4, :, 3] == 0).all()
        assert (out[-4:, :, 3] == 0).all()
        assert (out[:, :4, 3] == 0).all()
        assert (out[:, -4:, 3] == 0).all()
        assert np.array_equal(out[4:16, 4:16], cell[4:16, 4:16])

    def test_input_untouched(self, canvas):
        cell = canvas(20, 20, (200, 30, 30, 255))
        shave_edges(cell, 4)
        assert (cell[..., 3] == 255).all()

    def test_margin_larger_than_cell(self, canvas):
        out = shave_edges(canvas(6, 6, (0, 0, 0, 255)), 4)
        assert not out.any()

    def test_zero_margin(self, canvas):
        cell = canvas(5, 5, (1, 2, 3, 255))
        assert np.array_equal(shave_edges(cell, 0), cell)


class TestKeyOutWhite:
    """Tests for key_out_white"""

    def test_threshold(self, canvas):
        cell = canvas(3, 1, (0, 0, 0, 255))
        cell[0, 0] = (235, 235, 235, 255)
        cell[0, 1] = (229, 250, 250, 255)
        cell[0, 2] = (231, 231, 231, 255)
        out = key_out_white(cell, 230)
        assert out[0, 0, 3] == 0
        assert out[0, 1, 3] == 255
        assert out[0, 2, 3] == 0
        assert np.array_equal(out[..., :3], cell[..., :3])


class TestSanitize:
    """Tests for sanitize"""

    def test_idempotent_without_background_removal(self, canvas, fill):
        cell = fill(canvas(30, 30, (255, 255, 255, 255)), 2, 2, 20, 20)
        once = sanitize(cell, False)
        twice = sanitize(once, False)
        assert np.array_equal(once, twice)

    def test_same_size(self, canvas):
        cell = canvas(17, 11, (255, 255, 255, 255))
        assert sanitize(cell, True).shape == cell.shape

    def test_removes_background(self, canvas, fill):
        cell = fill(canvas(30, 30, (255, 255, 255, 255)), 10, 10, 5, 5)
        out = sanitize(cell, True)
        assert (out[10:15, 10:15, 3] == 255).all()
        assert out[..., 3].sum() == 25 * 255

    def test_keeps_background_when_disabled(self, canvas):
        out = sanitize(canvas(30, 30, (255, 255, 255, 255)), False)
        assert out[15, 15, 3] == 255
