# -*- coding: utf-8 -*-
"""
配置管理模块
"""

from pathlib import Path
from typing import Any, Dict, Optional

from astrbot.api import logger


class PluginConfig:
    """插件配置包装类，提供统一的配置访问接口"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        初始化配置

        Args:
            config: AstrBot传入的配置字典
        """
        self.config = config if config is not None else {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        获取配置值

        Args:
            key: 配置键
            default: 默认值

        Returns:
            配置值
        """
        return self.config.get(key, default)

    # 压缩配置
    @property
    def default_mode(self) -> str:
        """默认压缩模式: lossless, quality, max, advanced"""
        return self.get("default_mode", "quality")

    @property
    def default_target_amount(self) -> float:
        """advanced模式默认目标大小数值"""
        return self.get("default_target_amount", 2)

    @property
    def default_target_unit(self) -> str:
        """advanced模式默认目标大小单位: KB 或 MB"""
        return self.get("default_target_unit", "MB")

    @property
    def enable_image_encoder(self) -> bool:
        """是否对静态图片使用图片编码器（否则按通用文件压缩）"""
        return self.get("enable_image_encoder", True)

    @property
    def image_output_format(self) -> str:
        """图片编码输出格式: JPEG 或 WEBP"""
        return self.get("image_output_format", "JPEG")

    @property
    def max_concurrency(self) -> int:
        """批量压缩时的最大并发数"""
        return self.get("max_concurrency", 4)

    @property
    def max_input_size(self) -> int:
        """单个输入文件最大大小（字节）"""
        return self.get("max_input_size", 50) * 1024 * 1024

    # 分析服务配置
    @property
    def analysis_api_url(self) -> str:
        """外部规则分析服务地址"""
        return self.get(
            "analysis_api_url", "https://algotrading-1-dluo.onrender.com/analyze"
        )

    @property
    def analysis_timeout(self) -> int:
        """分析服务请求超时（秒）"""
        return self.get("analysis_timeout", 120)

    @property
    def chat_max_content_chars(self) -> int:
        """问答提示词中文件内容的最大字符数，0表示不截断"""
        return self.get("chat_max_content_chars", 20000)

    def set_data_dir(self, data_dir: Path) -> None:
        """
        设置数据目录

        Args:
            data_dir: 数据目录路径
        """
        self._data_dir = data_dir
        logger.info(f"文件压缩插件数据目录: {data_dir}")

    def get_data_dir(self) -> Path:
        """
        获取数据目录

        Returns:
            数据目录路径
        """
        if not hasattr(self, "_data_dir"):
            raise RuntimeError("数据目录未初始化，请先调用 set_data_dir()")
        return self._data_dir
