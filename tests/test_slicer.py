"""
End-to-end tests for sprite_slicer.slicer
"""
import asyncio
import io
import threading

import numpy as np
import pytest
from PIL import Image

from sprite_slicer.bounds import detect_bounds
from sprite_slicer.image_io import encode_png
from sprite_slicer.params import SliceParams
from sprite_slicer.slicer import SpriteSheetSlicer, slice_sprite_sheet

OFFSETS = [(0, 0), (8, -6), (-7, 5), (5, 9), (-9, -4), (3, -8)]


def run(coro):
    return asyncio.run(coro)


class TestSliceSpriteSheet:
    """Scenario tests for slice_sprite_sheet"""

    def test_squares_centered(self, square_sheet):
        data = square_sheet(2, 3, offsets=OFFSETS)
        frames = run(slice_sprite_sheet(data, 2, 3, remove_background=True))

        assert len(frames) == 6
        assert len({f.shape for f in frames}) == 1
        h, w = frames[0].shape[:2]
        for frame in frames:
            box = detect_bounds(frame)
            assert box is not None
            assert abs((box.x + box.w / 2) - w / 2) <= 2
            assert abs((box.y + box.h / 2) - h / 2) <= 2

    def test_background_removed(self, square_sheet):
        frames = run(slice_sprite_sheet(square_sheet(2, 3), 2, 3, remove_background=True))
        frame = frames[0]
        assert frame[0, 0, 3] == 0
        h, w = frame.shape[:2]
        assert frame[h // 2, w // 2, 3] == 255

    def test_transparent_sheet_no_dark_fringe(self, canvas, fill):
        img = canvas(300, 100)
        for i in range(3):
            fill(img, i * 100 + 20, 20, 60, 60, (255, 255, 255, 255))
            fill(img, i * 100 + 40, 40, 20, 20, (255, 0, 0, 255))
        frames = run(slice_sprite_sheet(encode_png(img), 1, 3, remove_background=True))

        assert len(frames) == 3
        assert frames[0].shape[1] < 30
        for frame in frames:
            visible = frame[..., 3] > 20
            assert visible.any()
            assert (frame[..., 0][visible] > frame[..., 1][visible]).all()

    def test_16bit_sheet(self):
        sheet = np.full((200, 400), 65535, dtype=np.uint16)
        sheet[60:140, 60:140] = 4000
        sheet[60:140, 260:340] = 4000
        buf = io.BytesIO()
        Image.fromarray(sheet).save(buf, format="PNG")
        frames = run(slice_sprite_sheet(buf.getvalue(), 1, 2, remove_background=True))
        assert len(frames) == 2
        assert all(detect_bounds(f) is not None for f in frames)

    def test_white_sheet_fails(self, canvas):
        data = encode_png(canvas(400, 400, (255, 255, 255, 255)))
        assert run(slice_sprite_sheet(data, 2, 2)) == []

    def test_blank_cell_kept(self, square_sheet):
        frames = run(slice_sprite_sheet(square_sheet(2, 3, blank=(4,)), 2, 3))

        assert len(frames) == 6
        assert len({f.shape for f in frames}) == 1
        assert not frames[4][..., 3].any()
        for i, frame in enumerate(frames):
            if i != 4:
                assert detect_bounds(frame) is not None

    def test_undecodable_bytes(self):
        assert run(slice_sprite_sheet(b"definitely not an image", 2, 2)) == []

    def test_empty_bytes(self):
        assert run(slice_sprite_sheet(b"", 2, 2)) == []

    def test_oversized_image(self, square_sheet, monkeypatch):
        data = square_sheet(1, 2)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        assert run(slice_sprite_sheet(data, 1, 2)) == []

    def test_jpeg_input(self, canvas, fill):
        img = fill(canvas(200, 100, (255, 255, 255, 255)), 30, 30, 40, 40)
        fill(img, 130, 30, 40, 40)
        buf = io.BytesIO()
        Image.fromarray(img).convert("RGB").save(buf, format="JPEG", quality=95)
        frames = run(slice_sprite_sheet(buf.getvalue(), 1, 2, remove_background=True))
        assert len(frames) == 2

    def test_concurrent_calls_independent(self, square_sheet):
        data_a = square_sheet(2, 3, offsets=OFFSETS)
        data_b = square_sheet(1, 2)

        async def both():
            return await asyncio.gather(
                slice_sprite_sheet(data_a, 2, 3),
                slice_sprite_sheet(data_b, 1, 2),
            )

        frames_a, frames_b = run(both())
        assert len(frames_a) == 6
        assert len(frames_b) == 2
        solo = run(slice_sprite_sheet(data_a, 2, 3))
        assert all(np.array_equal(x, y) for x, y in zip(frames_a, solo))


class TestSpriteSheetSlicer:
    """Tests for SpriteSheetSlicer"""

    def test_custom_partitioner(self, canvas, fill):
        calls = []

        class HalvesPartitioner:
            def partition(self, img_np, rows, cols):
                calls.append((rows, cols))
                w = img_np.shape[1] // 2
                return [img_np[:, :w].copy(), img_np[:, w:].copy()]

        img = fill(canvas(40, 20), 5, 5, 6, 6)
        fill(img, 25, 5, 10, 8)
        frames = SpriteSheetSlicer(partitioner=HalvesPartitioner()).slice_image(img, 1, 2)
        assert calls == [(1, 2)]
        assert len(frames) == 2
        assert frames[0].shape == (12, 14, 4)

    def test_params_applied(self, square_sheet):
        params = SliceParams(frame_pad=10)
        frames = run(SpriteSheetSlicer(params).slice_bytes(square_sheet(1, 2), 1, 2))
        box = detect_bounds(frames[0])
        assert box.x == 10
        assert frames[0].shape[1] == box.w + 20

    def test_invalid_grid(self, canvas):
        with pytest.raises(ValueError):
            SpriteSheetSlicer().slice_image(canvas(10, 10), 0, 1)

    def test_slice_bytes_runs_off_loop_thread(self, canvas, fill):
        threads = []

        class RecordingPartitioner:
            def partition(self, img_np, rows, cols):
                threads.append(threading.get_ident())
                return [img_np.copy()]

        data = encode_png(fill(canvas(20, 20), 5, 5, 8, 8))
        frames = run(SpriteSheetSlicer(partitioner=RecordingPartitioner()).slice_bytes(data, 1, 1))
        assert len(frames) == 1
        assert threads and threads[0] != threading.get_ident()
