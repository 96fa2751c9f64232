"""
---------------------------------------------------------------
File name:                  image_io.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                图像解码、编码与子像素区域重采样
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 初始创建;
----
"""
import asyncio
import io
import logging

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError


class ImageDecodeError(ValueError):
    """源字节无法解析为图像时抛出。"""


# 16位灰度PNG等高位深模式，convert("RGBA")会截断而不是缩放
HIGH_BIT_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I")


def to_8bit(image):
    """把高位深的单通道图像按比例缩放为8位L模式，其他模式原样返回。"""
    if image.mode in HIGH_BIT_MODES:
        arr = np.asarray(image).astype(np.int64) >> 8
    elif image.mode == "F":
        arr = np.asarray(image)
    else:
        return image
    return Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8))


def decode_image(data):
    """将编码后的图像字节解码为RGBA Numpy数组。

    支持Pillow能识别的所有常见格式 (PNG, JPEG, WEBP, GIF, BMP...)，
    多帧格式只取第一帧。

    Args:
        data (bytes): 编码后的图像数据。

    Returns:
        np.ndarray: 形状为 (h, w, 4) 的uint8数组。

    Raises:
        ImageDecodeError: 数据为空或不是有效图像。
    """
    if not data:
        raise ImageDecodeError("图像数据为空")
    try:
        with Image.open(io.BytesIO(data)) as image:
            return np.array(to_8bit(image).convert("RGBA"))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise ImageDecodeError(f"无法解码图像: {e}") from e


async def decode_image_async(data):
    """在工作线程中解码，解码是流水线中唯一的挂起点。"""
    return await asyncio.to_thread(decode_image, data)


def load_image(path):
    """从文件读取并解码图像。"""
    with open(path, "rb") as f:
        data = f.read()
    logging.debug(f"读取图像 {path} ({len(data)} bytes)")
    return decode_image(data)


def encode_png(img_np):
    """将RGBA数组编码为PNG字节。"""
    buf = io.BytesIO()
    Image.fromarray(img_np).save(buf, format="PNG")
    return buf.getvalue()


def resample_region(img_np, x, y, w, h, out_w, out_h):
    """提取浮点坐标矩形区域并重采样到整数尺寸的新画布。

    源矩形 (x, y, w, h) 可以是非整数，输出尺寸为 out_w x out_h。
    超出源图像的部分为全透明。插值在预乘alpha空间进行，
    整数偏移且缩放为1时结果与直接切片一致。

    Args:
        img_np (np.ndarray): 源图像 (RGBA)。
        x (float): 源矩形左上角x。
        y (float): 源矩形左上角y。
        w (float): 源矩形宽度，必须大于0。
        h (float): 源矩形高度，必须大于0。
        out_w (int): 输出宽度。
        out_h (int): 输出高度。

    Returns:
        np.ndarray: 新分配的 (out_h, out_w, 4) 数组。
    """
    if w <= 0 or h <= 0 or out_w < 1 or out_h < 1:
        raise ValueError(f"无效的重采样区域: ({x}, {y}, {w}, {h}) -> {out_w}x{out_h}")
    sx = out_w / w
    sy = out_h / h
    # 以像素中心对齐: dst = s * (src - x + 0.5) - 0.5
    matrix = np.array([
        [sx, 0.0, sx * (0.5 - x) - 0.5],
        [0.0, sy, sy * (0.5 - y) - 0.5],
    ], dtype=np.float64)
    # 预乘alpha后插值，避免透明像素的黑色RGB渗入边缘
    src = img_np.astype(np.float32)
    src[..., :3] *= src[..., 3:4] / 255.0
    warped = cv2.warpAffine(
        src,
        matrix,
        (int(out_w), int(out_h)),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=(0, 0, 0, 0),
    )
    alpha = warped[..., 3:4]
    rgb = np.where(alpha > 0, warped[..., :3] * 255.0 / np.maximum(alpha, 1e-6), 0.0)
    out = np.concatenate([rgb, alpha], axis=2)
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)
