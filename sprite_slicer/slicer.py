"""
---------------------------------------------------------------
File name:                  slicer.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                精灵图切片入口: 解码 -> 切分 -> 清理 -> 归一化
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 初始创建;
----
"""
import asyncio
import logging

from .grid import FixedGridPartitioner, GridSpec
from .image_io import ImageDecodeError, decode_image_async
from .normalizer import normalize_frames
from .params import SliceParams
from .sanitizer import sanitize


class SpriteSheetSlicer:
    """把一张网格精灵图切成尺寸一致、角色居中的帧序列。

    不持有任何跨调用的可变状态，可以在多个输入上并发调用。

    Attributes:
        params (SliceParams): 流水线参数。
        partitioner: 切分策略，需提供 partition(img_np, rows, cols) 方法。
    """
    def __init__(self, params=None, partitioner=None):
        self.params = params if params is not None else SliceParams()
        if partitioner is None:
            partitioner = FixedGridPartitioner(self.params.alpha_thresh, self.params.white_thresh)
        self.partitioner = partitioner

    def slice_image(self, img_np, rows, cols, remove_background=False):
        """对已解码的RGBA图像执行切片。

        Args:
            img_np (np.ndarray): 源图像 (RGBA)。
            rows (int): 行数。
            cols (int): 列数。
            remove_background (bool, optional): 是否抠除近白背景. Defaults to False.

        Returns:
            list[np.ndarray]: 行优先顺序的帧列表；未提取到任何内容时为空列表。
        """
        spec = GridSpec(rows, cols)
        p = self.params
        cells = self.partitioner.partition(img_np, spec.rows, spec.cols)
        cleaned = [sanitize(cell, remove_background, p.edge_shave, p.bg_thresh) for cell in cells]
        frames = normalize_frames(cleaned, p.frame_pad, p.alpha_thresh, p.white_thresh)
        if frames:
            h, w = frames[0].shape[0], frames[0].shape[1]
            logging.info(f"切片完成: {len(frames)} 帧, {w}x{h}")
        else:
            logging.warning("切片失败: 未提取到任何内容")
        return frames

    async def slice_bytes(self, data, rows, cols, remove_background=False):
        """解码图像字节并切片。解码失败时返回空列表而不是抛出异常。

        解码和像素处理都在工作线程中执行，不阻塞事件循环。
        """
        try:
            img_np = await decode_image_async(data)
        except ImageDecodeError as e:
            logging.warning(f"切片失败: {e}")
            return []
        return await asyncio.to_thread(self.slice_image, img_np, rows, cols, remove_background)


async def slice_sprite_sheet(data, rows, cols, remove_background=False, params=None):
    """切片入口。

    调用方应把空列表视为"提取失败"并提示用户重试。

    Args:
        data (bytes): 编码后的精灵图。
        rows (int): 行数。
        cols (int): 列数。
        remove_background (bool, optional): 是否抠除近白背景. Defaults to False.
        params (SliceParams, optional): 流水线参数. Defaults to None.

    Returns:
        list[np.ndarray]: 帧列表。
    """
    return await SpriteSheetSlicer(params).slice_bytes(data, rows, cols, remove_background)
