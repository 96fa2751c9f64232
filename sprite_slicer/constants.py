"""
---------------------------------------------------------------
File name:                  constants.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                Sprite Sheet Slicer的常量定义
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 从sprite_editor/constants.py改为切片流水线常量;
----
"""

# 应用信息
APP_NAME = "SpriteSlicer"
APP_VERSION = "1.0.0"

# 前景判定: alpha > 可见阈值 且 RGB任一通道 < 白色阈值
DEFAULT_ALPHA_THRESH = 20
DEFAULT_WHITE_THRESH = 240

# 背景抠除: RGB三通道均 > 该值视为背景
DEFAULT_BG_THRESH = 230

# 单元格四边清除的像素宽度，防止相邻姿势溢出
DEFAULT_EDGE_SHAVE = 4

# 归一化帧四周的留白
DEFAULT_FRAME_PAD = 2

# 默认每秒12帧
DEFAULT_FPS = 12

# 导出命名
DEFAULT_NAME_TEMPLATE = "frame_[索引]"
DEFAULT_ZIP_FOLDER = "frames"
