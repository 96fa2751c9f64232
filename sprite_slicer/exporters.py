"""
---------------------------------------------------------------
File name:                  exporters.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                帧序列导出: GIF、APNG动画与ZIP帧压缩包
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 从mask_processor.render_filename及主窗口导出逻辑改写;
----
"""
import io
import logging
import os
import re
import zipfile

import numpy as np
from PIL import Image

from .constants import DEFAULT_NAME_TEMPLATE, DEFAULT_ZIP_FOLDER
from .image_io import encode_png

# GIF调色板中保留给透明色的索引
GIF_TRANSPARENT_INDEX = 255

# Placeholder mapping for render_filename
PLACEHOLDER_MAP = {
    '[索引]': 'idx',
    '[宽]': 'w',
    '[高]': 'h',
}


class FrameInfo:
    """导出时用于命名的帧信息。

    Attributes:
        idx (int): 从1开始的帧序号。
        w (int): 帧宽度。
        h (int): 帧高度。
    """
    def __init__(self, idx, w, h):
        self.idx = idx
        self.w = w
        self.h = h


def render_filename(template, info):
    """根据模板和帧信息渲染文件名。

    支持友好占位符如 '[索引]', '[宽]', '[索引:03d]'。

    Args:
        template (str): 包含占位符的命名模板。
        info (FrameInfo): 帧信息。

    Returns:
        str: 渲染后的文件名，保证以.png结尾。
    """
    rendered_name = template
    # Regex to find placeholders like [Name] or [Name:FormatSpec]
    placeholder_pattern = re.compile(r'\[([^\]:]+)(?::([^\]]+))?\]')

    for match in placeholder_pattern.finditer(template):
        placeholder = match.group(0)
        name_key = match.group(1)
        format_spec = match.group(2)

        attr_name = PLACEHOLDER_MAP.get(f'[{name_key}]')
        if attr_name and hasattr(info, attr_name):
            value = getattr(info, attr_name)
            try:
                formatted_value = f"{value:{format_spec}}" if format_spec else str(value)
            except (ValueError, TypeError) as fmt_err:
                logging.warning(f"格式化占位符 '{placeholder}' 出错 (值: {value}, 格式: '{format_spec}'): {fmt_err}. 使用原始值替代。")
                formatted_value = str(value)
            rendered_name = rendered_name.replace(placeholder, formatted_value)
        else:
            logging.warning(f"在模板中发现未知或无效的占位符: {placeholder}")

    invalid_chars = r'[\\/:*?"<>|]'
    rendered_name = re.sub(invalid_chars, '_', rendered_name)

    base, ext = os.path.splitext(rendered_name)
    if not ext:
        rendered_name += ".png"
    elif ext.lower() != ".png":
        rendered_name = base + ".png"
    return rendered_name


def check_frames(frames):
    """检查帧序列非空且尺寸一致。"""
    if not frames:
        raise ValueError("没有可导出的帧")
    size = frames[0].shape[:2]
    for i, frame in enumerate(frames):
        if frame.shape[:2] != size:
            raise ValueError(f"第 {i} 帧尺寸 {frame.shape[1]}x{frame.shape[0]} 与首帧 {size[1]}x{size[0]} 不一致")


def frame_duration(fps):
    """每帧持续的毫秒数。"""
    if fps <= 0:
        raise ValueError(f"帧率必须大于0: {fps}")
    return int(round(1000 / fps))


def to_gif_frame(frame):
    """把RGBA帧转换为带透明索引的调色板图像。

    颜色量化到255色，alpha < 128 的像素映射到透明索引。
    """
    rgb = Image.fromarray(frame).convert("RGB")
    p_frame = rgb.quantize(colors=GIF_TRANSPARENT_INDEX, method=Image.Quantize.MEDIANCUT)
    palette = p_frame.getpalette() or []
    palette = palette[:GIF_TRANSPARENT_INDEX * 3]
    palette += [0] * (256 * 3 - len(palette))
    p_frame.putpalette(palette)
    transparent = Image.fromarray(((frame[..., 3] < 128) * 255).astype(np.uint8))
    p_frame.paste(GIF_TRANSPARENT_INDEX, mask=transparent)
    p_frame.info["transparency"] = GIF_TRANSPARENT_INDEX
    return p_frame


def encode_gif(frames, fps):
    """编码为无限循环的GIF动画。

    Args:
        frames (list[np.ndarray]): 尺寸一致的RGBA帧。
        fps (int): 帧率。

    Returns:
        bytes: GIF文件内容。
    """
    check_frames(frames)
    duration = frame_duration(fps)
    images = [to_gif_frame(f) for f in frames]
    buf = io.BytesIO()
    images[0].save(
        buf,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=duration,
        loop=0,
        disposal=2,
        transparency=GIF_TRANSPARENT_INDEX,
        optimize=False,
    )
    logging.info(f"GIF导出: {len(frames)} 帧, {duration}ms/帧")
    return buf.getvalue()


def encode_apng(frames, fps):
    """编码为无限循环的APNG动画，保留完整alpha通道。"""
    check_frames(frames)
    duration = frame_duration(fps)
    images = [Image.fromarray(f) for f in frames]
    buf = io.BytesIO()
    images[0].save(
        buf,
        format="PNG",
        save_all=True,
        append_images=images[1:],
        duration=duration,
        loop=0,
    )
    logging.info(f"APNG导出: {len(frames)} 帧, {duration}ms/帧")
    return buf.getvalue()


def encode_zip(frames, template=DEFAULT_NAME_TEMPLATE, folder=DEFAULT_ZIP_FOLDER):
    """把每帧编码为PNG并打包为ZIP，序号从1开始。

    Args:
        frames (list[np.ndarray]): 尺寸一致的RGBA帧。
        template (str, optional): 文件命名模板. Defaults to "frame_[索引]".
        folder (str, optional): 压缩包内目录，空字符串表示根目录. Defaults to "frames".

    Returns:
        bytes: ZIP文件内容。
    """
    check_frames(frames)
    buf = io.BytesIO()
    names = set()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for i, frame in enumerate(frames, start=1):
            name = render_filename(template, FrameInfo(i, frame.shape[1], frame.shape[0]))
            if name in names:
                logging.warning(f"文件名 '{name}' 重复，改用默认命名")
                name = f"frame_{i}.png"
            names.add(name)
            arcname = f"{folder}/{name}" if folder else name
            zf.writestr(arcname, encode_png(frame))
    logging.info(f"ZIP导出: {len(frames)} 帧")
    return buf.getvalue()
