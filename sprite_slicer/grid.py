"""
---------------------------------------------------------------
File name:                  grid.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                网格规格与固定网格切分
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 初始创建，替代基于轮廓的ROI提取;
----
"""
import logging
import math

from .bounds import BoundingBox, detect_bounds
from .constants import DEFAULT_ALPHA_THRESH, DEFAULT_WHITE_THRESH
from .image_io import resample_region


class GridSpec:
    """精灵图的行列布局。

    Attributes:
        rows (int): 行数 (>= 1)。
        cols (int): 列数 (>= 1)。
    """
    def __init__(self, rows, cols):
        if rows < 1 or cols < 1:
            raise ValueError(f"行列数必须 >= 1: rows={rows}, cols={cols}")
        self.rows = int(rows)
        self.cols = int(cols)

    @property
    def count(self):
        return self.rows * self.cols

    def __eq__(self, other):
        if not isinstance(other, GridSpec):
            return NotImplemented
        return (self.rows, self.cols) == (other.rows, other.cols)

    def __repr__(self):
        return f"GridSpec(rows={self.rows}, cols={self.cols})"


def grid_spec_for(frame_count):
    """根据帧数选择网格布局。

    取行数不大于列数的最接近正方形的因式分解:
    4 -> 2x2, 6 -> 2x3, 8 -> 2x4, 9 -> 3x3。

    Args:
        frame_count (int): 期望的帧数。

    Returns:
        GridSpec: 对应的网格规格。
    """
    if frame_count < 1:
        raise ValueError(f"帧数必须 >= 1: {frame_count}")
    rows = math.isqrt(frame_count)
    while frame_count % rows:
        rows -= 1
    return GridSpec(rows, frame_count // rows)


class FixedGridPartitioner:
    """固定网格切分策略。

    先裁掉整张图外围空白得到网格区域，再按浮点单元尺寸严格等分，
    避免整数截断在多列/多行间累积误差。

    其他切分策略只需提供相同签名的 partition(img_np, rows, cols) 方法即可替换。
    """
    def __init__(self, alpha_thresh=DEFAULT_ALPHA_THRESH, white_thresh=DEFAULT_WHITE_THRESH):
        self.alpha_thresh = alpha_thresh
        self.white_thresh = white_thresh

    def grid_area(self, img_np):
        """返回网格区域：全局内容边界，没有内容时退化为整张图。"""
        area = detect_bounds(img_np, self.alpha_thresh, self.white_thresh)
        if area is None:
            h, w = img_np.shape[0], img_np.shape[1]
            logging.debug("未检测到全局内容，使用整张图作为网格区域")
            area = BoundingBox(0, 0, w, h)
        return area

    def partition(self, img_np, rows, cols):
        """按行优先顺序切出 rows x cols 个单元格。

        Args:
            img_np (np.ndarray): 源图像 (RGBA)。
            rows (int): 行数。
            cols (int): 列数。

        Returns:
            list[np.ndarray]: 单元格图像列表，顺序为第0行的所有列，然后第1行...
        """
        spec = GridSpec(rows, cols)
        area = self.grid_area(img_np)
        cell_w = area.w / spec.cols
        cell_h = area.h / spec.rows
        out_w = math.ceil(cell_w)
        out_h = math.ceil(cell_h)
        logging.debug(f"网格区域 {area}, 单元格 {cell_w:.2f}x{cell_h:.2f} -> {out_w}x{out_h}")

        cells = []
        for r in range(spec.rows):
            for c in range(spec.cols):
                cells.append(resample_region(
                    img_np,
                    area.x + c * cell_w,
                    area.y + r * cell_h,
                    cell_w,
                    cell_h,
                    out_w,
                    out_h,
                ))
        return cells


def partition(img_np, rows, cols, alpha_thresh=DEFAULT_ALPHA_THRESH, white_thresh=DEFAULT_WHITE_THRESH):
    """使用固定网格策略切分图像。"""
    return FixedGridPartitioner(alpha_thresh, white_thresh).partition(img_np, rows, cols)
