# -*- coding: utf-8 -*-
"""
压缩配置模块
"""

from dataclasses import dataclass
from typing import Optional

from core.compression.models import CompressionMode, SizeUnit, TargetBudget
from core.config import PluginConfig


@dataclass
class CompressionConfig:
    """统一压缩配置"""

    default_mode: str = "quality"  # 未指定模式时使用
    default_target_amount: float = 2  # advanced模式默认目标大小
    default_target_unit: str = "MB"  # KB 或 MB
    enable_image_encoder: bool = True  # 静态图片是否使用图片编码器
    image_output_format: str = "JPEG"  # 图片编码输出格式
    max_concurrency: int = 4  # 批量压缩最大并发数

    @property
    def mode(self) -> CompressionMode:
        return CompressionMode.parse(self.default_mode)

    def default_budget(self) -> Optional[TargetBudget]:
        """默认目标大小，配置值非法时返回None"""
        if self.default_target_amount <= 0:
            return None
        return TargetBudget(
            amount=self.default_target_amount,
            unit=SizeUnit.parse(self.default_target_unit),
        )

    @staticmethod
    def from_plugin_config(config: PluginConfig) -> "CompressionConfig":
        """
        从插件配置创建压缩配置

        Args:
            config: 插件配置对象

        Returns:
            压缩配置对象
        """
        return CompressionConfig(
            default_mode=config.default_mode,
            default_target_amount=config.default_target_amount,
            default_target_unit=config.default_target_unit,
            enable_image_encoder=config.enable_image_encoder,
            image_output_format=config.image_output_format,
            max_concurrency=max(1, config.max_concurrency),
        )
