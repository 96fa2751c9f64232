"""
---------------------------------------------------------------
File name:                  cli.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                命令行入口: 切片精灵图并导出GIF/APNG/ZIP/PNG帧
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 初始创建，日志初始化沿用主窗口的_init_logging;
----
"""
import argparse
import asyncio
import logging
import os
import sys

from .constants import APP_NAME, APP_VERSION, DEFAULT_NAME_TEMPLATE
from .exporters import FrameInfo, encode_apng, encode_gif, encode_zip, render_filename
from .grid import grid_spec_for
from .image_io import encode_png
from .params import SliceParams
from .presets import PresetManager
from .slicer import SpriteSheetSlicer

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
CONSOLE_HANDLER = "sprite_slicer.console"
FILE_HANDLER = "sprite_slicer.file"


def init_logging(verbose=False, log_file=None):
    """初始化日志系统: 控制台输出，可选写入文件。"""
    log_format = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_format)

    file_handler = None
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(log_format)
        except OSError as e:
            print(f"Error setting up file logger: {e}", file=sys.stderr)

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # 重复调用时替换之前安装的处理器
    for handler in list(logger.handlers):
        if getattr(handler, "name", None) in (CONSOLE_HANDLER, FILE_HANDLER):
            logger.removeHandler(handler)
            handler.close()
    console_handler.set_name(CONSOLE_HANDLER)
    logger.addHandler(console_handler)
    if file_handler:
        file_handler.set_name(FILE_HANDLER)
        logger.addHandler(file_handler)

    logging.debug(f"{APP_NAME} v{APP_VERSION} started.")
    if file_handler:
        logging.debug(f"Log file location: {os.path.abspath(log_file)}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="sprite-slicer",
        description="把AI生成的网格精灵图切成尺寸一致、角色居中的动画帧",
    )
    parser.add_argument("sheet", help="精灵图文件路径")
    parser.add_argument("--rows", type=int, help="行数")
    parser.add_argument("--cols", type=int, help="列数")
    parser.add_argument("--frames", type=int, help="帧数，自动换算行列 (与 --rows/--cols 互斥)")
    parser.add_argument("--remove-bg", action="store_true", help="抠除近白背景")
    parser.add_argument("--fps", type=int, help="导出动画的帧率")
    parser.add_argument("--gif", help="导出GIF路径")
    parser.add_argument("--apng", help="导出APNG路径")
    parser.add_argument("--zip", help="导出ZIP路径")
    parser.add_argument("--out-dir", help="逐帧导出PNG的目录")
    parser.add_argument("--name-template", default=DEFAULT_NAME_TEMPLATE, help="帧文件命名模板")
    parser.add_argument("--preset", help="加载参数预设")
    parser.add_argument("--save-preset", help="把当前参数保存为预设")
    parser.add_argument("--presets-dir", help="预设目录")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    parser.add_argument("--log-file", help="日志文件路径")
    return parser


def resolve_grid(parser, args):
    """从命令行参数得到 (rows, cols)。"""
    if args.frames is not None:
        if args.rows is not None or args.cols is not None:
            parser.error("--frames 不能与 --rows/--cols 同时使用")
        if args.frames < 1:
            parser.error("--frames 必须 >= 1")
        spec = grid_spec_for(args.frames)
        return spec.rows, spec.cols
    if args.rows is None or args.cols is None:
        parser.error("需要同时指定 --rows 和 --cols，或者指定 --frames")
    if args.rows < 1 or args.cols < 1:
        parser.error("--rows 和 --cols 必须 >= 1")
    return args.rows, args.cols


def write_bytes(path, data):
    with open(path, "wb") as f:
        f.write(data)
    logging.info(f"已写入 {path} ({len(data)} bytes)")


def export_frames(frames, args, fps):
    """按命令行参数导出帧序列。"""
    if args.gif:
        write_bytes(args.gif, encode_gif(frames, fps))
    if args.apng:
        write_bytes(args.apng, encode_apng(frames, fps))
    if args.zip:
        write_bytes(args.zip, encode_zip(frames, args.name_template))
    if args.out_dir:
        os.makedirs(args.out_dir, exist_ok=True)
        for i, frame in enumerate(frames, start=1):
            name = render_filename(args.name_template, FrameInfo(i, frame.shape[1], frame.shape[0]))
            write_bytes(os.path.join(args.out_dir, name), encode_png(frame))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    rows, cols = resolve_grid(parser, args)
    if args.fps is not None and args.fps <= 0:
        parser.error("--fps 必须大于0")

    init_logging(args.verbose, args.log_file)

    params = SliceParams()
    presets = None
    if args.preset or args.save_preset:
        presets = PresetManager(APP_NAME, args.presets_dir)
    if args.preset:
        params = presets.load_preset(args.preset)
        if params is None:
            logging.error(f"无法加载预设 '{args.preset}'")
            return 1
    if args.fps is not None:
        params.fps = args.fps
    if args.save_preset and not presets.save_preset(args.save_preset, params):
        return 1

    try:
        with open(args.sheet, "rb") as f:
            data = f.read()
    except OSError as e:
        logging.error(f"无法读取精灵图: {e}")
        return 1

    frames = asyncio.run(SpriteSheetSlicer(params).slice_bytes(data, rows, cols, args.remove_bg))
    if not frames:
        print("提取失败: 未能从精灵图中切出任何帧，请重新生成后重试。", file=sys.stderr)
        return 1

    export_frames(frames, args, params.fps)
    print(f"已提取 {len(frames)} 帧 ({frames[0].shape[1]}x{frames[0].shape[0]})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
