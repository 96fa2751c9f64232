"""
---------------------------------------------------------------
File name:                  presets.py
Author:                     Ignorant-lu
Date created:               2025/04/15
Description:                切片参数预设的保存与加载
----------------------------------------------------------------

Changed history:            
                            2025/04/15: 从sprite_mask_editor.py拆分为独立模块;
                            2026/10/17: 预设内容改为SliceParams，加载时校验;
----
"""
import json
import logging
import os

from .params import SliceParams


def safe_preset_name(name):
    """只保留字母数字、下划线和连字符。"""
    return "".join(c for c in name if c.isalnum() or c in ('_', '-'))


class PresetManager:
    """以JSON文件保存SliceParams预设。

    每个预设对应预设目录下的一个 <名称>.json 文件，
    加载时会校验内容，损坏或不合法的预设不会进入流水线。

    Attributes:
        presets_dir (str): 预设目录。
    """
    def __init__(self, app_name, presets_dir=None):
        """初始化PresetManager。

        Args:
            app_name (str): 应用程序名称，默认目录为 ~/.<app_name小写>。
            presets_dir (str, optional): 自定义预设目录. Defaults to None.
        """
        self.presets_dir = presets_dir or os.path.join(os.path.expanduser("~"), f".{app_name.lower()}")
        os.makedirs(self.presets_dir, exist_ok=True)

    def preset_path(self, name):
        return os.path.join(self.presets_dir, f"{safe_preset_name(name)}.json")

    def get_presets_list(self):
        """返回排序后的预设名称列表 (不含.json后缀)。"""
        try:
            files = os.listdir(self.presets_dir)
        except OSError as e:
            logging.error(f"获取预设列表出错: {e}")
            return []
        return sorted(f[:-5] for f in files if f.endswith(".json"))

    def save_preset(self, name, params):
        """保存切片参数为预设。

        Args:
            name (str): 预设名称。
            params (SliceParams): 要保存的参数。

        Returns:
            bool: 保存成功返回True。
        """
        if not safe_preset_name(name):
            logging.error(f"无效的预设名称 '{name}'")
            return False
        path = self.preset_path(name)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(params.get_params(), f, ensure_ascii=False, indent=2)
        except OSError as e:
            logging.exception(f"保存预设 '{name}' 出错: {e}")
            return False
        logging.info(f"已保存预设 {path}")
        return True

    def load_preset(self, name):
        """加载并校验预设。

        预设中缺少的参数取默认值，未知的键被忽略。

        Args:
            name (str): 预设名称。

        Returns:
            SliceParams | None: 参数对象；文件不存在、JSON损坏或参数不合法时返回None。
        """
        path = self.preset_path(name)
        if not os.path.exists(path):
            logging.warning(f"预设文件不存在: {path}")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.error(f"读取预设 '{name}' 出错: {e}")
            return None
        try:
            return SliceParams.from_dict(data)
        except ValueError as e:
            logging.error(f"预设 '{name}' 内容不合法: {e}")
            return None

    def delete_preset(self, name):
        """删除预设，文件不存在也视为成功。"""
        path = self.preset_path(name)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            logging.error(f"删除预设 '{name}' 出错: {e}")
            return False
        return True
