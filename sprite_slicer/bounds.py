"""
---------------------------------------------------------------
File name:                  bounds.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                内容边界检测: 查找非透明且非近白像素的最小外接矩形
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 从roi.py的FrameROI坐标部分拆出;
----
"""
import numpy as np

from .constants import DEFAULT_ALPHA_THRESH, DEFAULT_WHITE_THRESH


class BoundingBox:
    """图像中前景内容的最小轴对齐外接矩形。

    没有前景时用None表示，而不是宽高为0的矩形。

    Attributes:
        x (int): 左上角x坐标。
        y (int): 左上角y坐标。
        w (int): 宽度 (>= 1)。
        h (int): 高度 (>= 1)。
    """
    __slots__ = ("x", "y", "w", "h")

    def __init__(self, x, y, w, h):
        if x < 0 or y < 0 or w < 1 or h < 1:
            raise ValueError(f"无效的边界框: x={x}, y={y}, w={w}, h={h}")
        self.x = int(x)
        self.y = int(y)
        self.w = int(w)
        self.h = int(h)

    def as_tuple(self):
        return (self.x, self.y, self.w, self.h)

    def slice_of(self, img_np):
        """返回图像中该矩形区域的视图。"""
        return img_np[self.y:self.y + self.h, self.x:self.x + self.w]

    def __eq__(self, other):
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return f"BoundingBox(x={self.x}, y={self.y}, w={self.w}, h={self.h})"


def foreground_mask(img_np, alpha_thresh=DEFAULT_ALPHA_THRESH, white_thresh=DEFAULT_WHITE_THRESH):
    """生成前景布尔蒙版。

    像素可见 (alpha > alpha_thresh) 且RGB中至少一个通道低于white_thresh时为前景。

    Args:
        img_np (np.ndarray): RGBA图像。
        alpha_thresh (int, optional): 可见阈值. Defaults to 20.
        white_thresh (int, optional): 白色阈值. Defaults to 240.

    Returns:
        np.ndarray: (h, w) 布尔数组。
    """
    visible = img_np[..., 3] > alpha_thresh
    not_white = np.any(img_np[..., :3] < white_thresh, axis=2)
    return visible & not_white


def detect_bounds(img_np, alpha_thresh=DEFAULT_ALPHA_THRESH, white_thresh=DEFAULT_WHITE_THRESH):
    """扫描全部像素，返回前景内容的精确边界。

    Args:
        img_np (np.ndarray): RGBA图像。
        alpha_thresh (int, optional): 可见阈值. Defaults to 20.
        white_thresh (int, optional): 白色阈值. Defaults to 240.

    Returns:
        BoundingBox | None: 前景边界；全透明或全白图像返回None。
    """
    if img_np.size == 0:
        return None
    ys, xs = np.nonzero(foreground_mask(img_np, alpha_thresh, white_thresh))
    if xs.size == 0:
        return None
    min_x, max_x = int(xs.min()), int(xs.max())
    min_y, max_y = int(ys.min()), int(ys.max())
    return BoundingBox(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)
