"""
---------------------------------------------------------------
File name:                  normalizer.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                帧归一化: 裁剪角色、统一尺寸并居中
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 从MaskProcessor.extract_rois的居中逻辑改写;
----
"""
import logging

import numpy as np

from .bounds import detect_bounds
from .constants import DEFAULT_ALPHA_THRESH, DEFAULT_FRAME_PAD, DEFAULT_WHITE_THRESH


def center_on_canvas(img_np, bound, out_w, out_h):
    """把img_np中bound区域复制到 out_w x out_h 透明画布的正中。

    Args:
        img_np (np.ndarray): 源图像 (RGBA)。
        bound (BoundingBox | None): 要复制的区域，None时返回空白画布。
        out_w (int): 画布宽度。
        out_h (int): 画布高度。

    Returns:
        np.ndarray: 新画布。
    """
    canvas = np.zeros((out_h, out_w, 4), dtype=np.uint8)
    if bound is None:
        return canvas
    roi = bound.slice_of(img_np)
    ry, rx = roi.shape[0], roi.shape[1]
    sy = max((out_h - ry) // 2, 0)
    sx = max((out_w - rx) // 2, 0)
    cy = min(ry, out_h - sy)
    cx = min(rx, out_w - sx)
    canvas[sy:sy + cy, sx:sx + cx] = roi[:cy, :cx]
    return canvas


def normalize_frames(cells, pad=DEFAULT_FRAME_PAD, alpha_thresh=DEFAULT_ALPHA_THRESH,
                     white_thresh=DEFAULT_WHITE_THRESH):
    """把清理后的单元格统一为相同尺寸的帧，角色居中并尽量放大。

    1. 在每个单元格中重新检测角色的真实边界；
    2. 取所有非空边界的最大宽高；
    3. 帧尺寸为 (max_w + 2*pad, max_h + 2*pad)；
    4. 每帧新建透明画布，把角色区域居中复制进去。

    空单元格保留位置，输出全透明帧，保证帧数与播放节奏不变。

    Args:
        cells (list[np.ndarray]): 行优先顺序的单元格图像。
        pad (int, optional): 帧四周留白. Defaults to 2.
        alpha_thresh (int, optional): 可见阈值. Defaults to 20.
        white_thresh (int, optional): 白色阈值. Defaults to 240.

    Returns:
        list[np.ndarray]: 尺寸一致的帧列表；所有单元格都没有内容时返回空列表。
    """
    bounds = [detect_bounds(cell, alpha_thresh, white_thresh) for cell in cells]
    found = [b for b in bounds if b is not None]
    if not found:
        logging.warning(f"{len(cells)} 个单元格中均未检测到内容")
        return []

    max_w = max(b.w for b in found)
    max_h = max(b.h for b in found)
    final_w = max_w + pad * 2
    final_h = max_h + pad * 2

    empty = [i for i, b in enumerate(bounds) if b is None]
    if empty:
        logging.info(f"单元格 {empty} 为空，输出透明帧")
    logging.debug(f"归一化 {len(cells)} 帧 -> {final_w}x{final_h}")

    return [center_on_canvas(cell, bound, final_w, final_h) for cell, bound in zip(cells, bounds)]
