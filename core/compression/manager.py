# -*- coding: utf-8 -*-
"""
压缩管理器模块
"""

import asyncio
from typing import List, Optional, Sequence

from astrbot.api import logger

from core.compression.codec import GenericCompressor
from core.compression.config import CompressionConfig
from core.compression.format import detect_media_kind
from core.compression.image_encoder import ImageEncoder
from core.compression.models import (
    CompressionMode,
    CompressionRequest,
    CompressionResult,
    TargetBudget,
)
from core.compression.policy import SizeConstraintPolicy
from core.compression.strategy import GenericStrategy, ImageStrategy
from core.config import PluginConfig


class CompressionManager:
    """统一压缩管理器"""

    def __init__(
        self,
        config: PluginConfig,
        policy: Optional[SizeConstraintPolicy] = None,
    ):
        """
        初始化压缩管理器

        Args:
            config: 插件配置对象
            policy: 大小约束策略，默认按配置构建
        """
        self.config = config
        self.compression_config = CompressionConfig.from_plugin_config(config)
        self.policy = policy or self._build_policy(self.compression_config)
        self._semaphore = asyncio.Semaphore(self.compression_config.max_concurrency)

        logger.debug("压缩管理器初始化完成")

    @staticmethod
    def _build_policy(config: CompressionConfig) -> SizeConstraintPolicy:
        image_strategy = None
        if config.enable_image_encoder:
            image_strategy = ImageStrategy(ImageEncoder(config.image_output_format))
        return SizeConstraintPolicy(
            generic_strategy=GenericStrategy(GenericCompressor()),
            image_strategy=image_strategy,
        )

    def build_request(
        self,
        content: bytes,
        mode: Optional[CompressionMode] = None,
        budget: Optional[TargetBudget] = None,
        filename: Optional[str] = None,
    ) -> CompressionRequest:
        """
        构造压缩请求，自动识别媒体类型

        Args:
            content: 文件内容
            mode: 压缩模式，默认使用配置
            budget: advanced模式目标大小，默认使用配置
            filename: 文件名，仅用于日志

        Returns:
            压缩请求
        """
        mode = CompressionMode.parse(mode) if mode is not None else self.compression_config.mode
        if mode is CompressionMode.ADVANCED and budget is None:
            budget = self.compression_config.default_budget()
        return CompressionRequest(
            content=content,
            mode=mode,
            media_kind=detect_media_kind(content, filename),
            target_budget=budget,
        )

    async def compress(self, request: CompressionRequest) -> CompressionResult:
        """
        统一压缩接口

        Args:
            request: 压缩请求

        Returns:
            压缩结果
        """
        async with self._semaphore:
            return await self.policy.compress(request)

    async def compress_file(
        self,
        content: bytes,
        mode: Optional[CompressionMode] = None,
        budget: Optional[TargetBudget] = None,
        filename: Optional[str] = None,
    ) -> CompressionResult:
        """识别媒体类型并压缩单个文件"""
        request = self.build_request(content, mode, budget, filename)
        return await self.compress(request)

    async def compress_many(
        self, requests: Sequence[CompressionRequest]
    ) -> List[CompressionResult]:
        """
        并发压缩多个请求，结果顺序与请求顺序一致

        Args:
            requests: 压缩请求列表

        Returns:
            压缩结果列表
        """
        logger.debug(f"批量压缩 {len(requests)} 个文件")
        return list(await asyncio.gather(*(self.compress(r) for r in requests)))

    def extension_for(
        self, request: CompressionRequest, result: CompressionResult
    ) -> Optional[str]:
        """输出文件扩展名；回退原始内容时返回None表示沿用原扩展名"""
        if not result.accepted:
            return None
        return self.policy.strategy_for(request).extension
