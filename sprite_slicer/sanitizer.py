"""
---------------------------------------------------------------
File name:                  sanitizer.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                单元格清理: 边缘清除与近白背景抠除
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 初始创建;
----
"""
from .constants import DEFAULT_BG_THRESH, DEFAULT_EDGE_SHAVE


def shave_edges(cell, margin=DEFAULT_EDGE_SHAVE):
    """清除单元格四边各margin像素宽的区域（置为全透明）。

    生成模型偶尔把相邻姿势画得稍大，脚或手会越过单元格边界，
    这里牺牲边缘极少量真实内容来去掉这些溢出。

    Args:
        cell (np.ndarray): 单元格图像 (RGBA)。
        margin (int, optional): 清除宽度. Defaults to 4.

    Returns:
        np.ndarray: 新的单元格图像。
    """
    out = cell.copy()
    if margin <= 0:
        return out
    out[:margin, :] = 0
    out[-margin:, :] = 0
    out[:, :margin] = 0
    out[:, -margin:] = 0
    return out


def key_out_white(cell, thresh=DEFAULT_BG_THRESH):
    """将RGB三通道均大于thresh的像素alpha置0。硬阈值，不做羽化。"""
    out = cell.copy()
    near_white = (out[..., 0] > thresh) & (out[..., 1] > thresh) & (out[..., 2] > thresh)
    out[near_white, 3] = 0
    return out


def sanitize(cell, remove_background, margin=DEFAULT_EDGE_SHAVE, bg_thresh=DEFAULT_BG_THRESH):
    """清理单个单元格: 先清除边缘，再按需抠除白色背景。

    Args:
        cell (np.ndarray): 单元格图像 (RGBA)。
        remove_background (bool): 是否抠除近白背景。
        margin (int, optional): 边缘清除宽度. Defaults to 4.
        bg_thresh (int, optional): 背景阈值. Defaults to 230.

    Returns:
        np.ndarray: 同尺寸的新图像。
    """
    out = shave_edges(cell, margin)
    if remove_background:
        out = key_out_white(out, bg_thresh)
    return out
