# -*- coding: utf-8 -*-
"""
路径管理模块
"""

import re
from pathlib import Path

from astrbot.api import logger

from core.config import PluginConfig
from core.exceptions import FileOperationError

_UNSAFE_CHARS = re.compile(r"[^\w.-]+")


def safe_name(name: str) -> str:
    """把平台ID或文件名转换为安全的路径片段"""
    cleaned = _UNSAFE_CHARS.sub("_", name).strip("._")
    return cleaned or "default"


class PathManager:
    """路径管理器"""

    def __init__(self, config: PluginConfig):
        """
        初始化路径管理器

        Args:
            config: 插件配置
        """
        self.config = config
        self._data_dir = config.get_data_dir()

    def get_output_dir(self, platform: str, user_id: str) -> Path:
        """
        获取用户压缩结果目录

        Args:
            platform: 平台名称
            user_id: 用户ID

        Returns:
            输出目录路径
        """
        output_dir = self._data_dir / "outputs" / safe_name(platform) / safe_name(user_id)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"创建输出目录失败: {e}")
            raise FileOperationError(f"创建输出目录失败: {e}") from e
        logger.debug(f"输出目录: {output_dir}")
        return output_dir

    def get_session_path(self, user_key: str) -> Path:
        """
        获取分析会话文件路径

        Args:
            user_key: 用户标识（平台:用户ID）

        Returns:
            会话文件路径
        """
        return self._data_dir / "sessions" / f"{safe_name(user_key)}.json"
