"""
---------------------------------------------------------------
File name:                  params.py
Author:                     Ignorant-lu
Date created:               2026/10/17
Description:                切片流水线的可调参数
----------------------------------------------------------------

Changed history:            
                            2026/10/17: 从MaskProcessor的参数管理部分拆分;
                            2026/10/18: 增加参数类型与取值范围校验;
----
"""
from .constants import (
    DEFAULT_ALPHA_THRESH,
    DEFAULT_BG_THRESH,
    DEFAULT_EDGE_SHAVE,
    DEFAULT_FPS,
    DEFAULT_FRAME_PAD,
    DEFAULT_WHITE_THRESH,
)

# 参数名 -> (最小值, 最大值)，None表示不限
PARAM_RANGES = {
    "alpha_thresh": (0, 255),
    "white_thresh": (0, 255),
    "bg_thresh": (0, 255),
    "edge_shave": (0, None),
    "frame_pad": (0, None),
    "fps": (1, None),
}


def check_param(key, value):
    """检查单个参数。

    Returns:
        str | None: 错误信息，合法时返回None。
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return f"参数 {key} 必须是整数，实际为 {value!r}"
    low, high = PARAM_RANGES[key]
    if value < low or (high is not None and value > high):
        upper = high if high is not None else "∞"
        return f"参数 {key}={value} 超出范围 [{low}, {upper}]"
    return None


class SliceParams:
    """切片流水线中所有经验阈值的集合。

    这些常量都是经验调出来的，没有严格推导，因此作为参数暴露，
    可通过预设保存和加载。

    Attributes:
        alpha_thresh (int): 可见阈值，alpha大于该值才算可见。
        white_thresh (int): 白色阈值，RGB任一通道低于该值才算前景。
        bg_thresh (int): 背景抠除阈值，RGB均高于该值的像素变透明。
        edge_shave (int): 单元格四边清除的像素宽度。
        frame_pad (int): 归一化帧四周的留白。
        fps (int): 导出动画的帧率。
    """
    def __init__(self, alpha_thresh=DEFAULT_ALPHA_THRESH, white_thresh=DEFAULT_WHITE_THRESH,
                 bg_thresh=DEFAULT_BG_THRESH, edge_shave=DEFAULT_EDGE_SHAVE,
                 frame_pad=DEFAULT_FRAME_PAD, fps=DEFAULT_FPS):
        self.alpha_thresh = alpha_thresh
        self.white_thresh = white_thresh
        self.bg_thresh = bg_thresh
        self.edge_shave = edge_shave
        self.frame_pad = frame_pad
        self.fps = fps

    def get_params(self):
        """获取当前所有处理参数。

        Returns:
            dict: 包含所有参数的字典。
        """
        return {key: getattr(self, key) for key in PARAM_RANGES}

    def set_params(self, params):
        """根据提供的字典设置处理参数，未知的键被忽略。

        先校验全部已知参数，任一不合法时不做任何修改。

        Args:
            params (dict): 包含参数键值对的字典。

        Raises:
            ValueError: params不是字典，或某个参数类型/取值不合法。
        """
        if not isinstance(params, dict):
            raise ValueError(f"参数必须是字典，实际为 {type(params).__name__}")
        known = {k: v for k, v in params.items() if k in PARAM_RANGES}
        errors = [msg for msg in (check_param(k, v) for k, v in known.items()) if msg]
        if errors:
            raise ValueError("; ".join(errors))
        for key, value in known.items():
            setattr(self, key, value)

    @classmethod
    def from_dict(cls, params):
        obj = cls()
        obj.set_params(params)
        return obj
