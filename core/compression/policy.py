# -*- coding: utf-8 -*-
"""
大小约束策略 - 决定保留压缩结果还是回退到原始内容

流程: 编码 -> 检查大小 -> 接受 / 回退原始内容。
数据相关的失败（编码出错、未达到目标大小、没有变小）都不会抛出异常，
而是返回原始内容并附带诊断信息。
"""

import asyncio
from typing import Optional

from astrbot.api import logger

from core.compression.models import (
    CompressionMode,
    CompressionRequest,
    CompressionResult,
    MediaKind,
    Outcome,
)
from core.compression.sizes import format_bytes
from core.compression.strategy import CompressionStrategy, GenericStrategy
from core.exceptions import CodecFailure

NO_IMPROVEMENT_MESSAGE = "Compression did not reduce file size. Original file retained."
CODEC_FAILURE_MESSAGE = "An error occurred during compression. Original file retained."


def budget_unmet_message(achieved_size: int, target: str) -> str:
    return (
        f"Could not reach the target size of {target}: best effort was "
        f"{format_bytes(achieved_size)}. Original file retained."
    )


class SizeConstraintPolicy:
    """按模式选择编码方式并校验大小约束"""

    def __init__(
        self,
        generic_strategy: Optional[CompressionStrategy] = None,
        image_strategy: Optional[CompressionStrategy] = None,
    ):
        """
        初始化大小约束策略

        Args:
            generic_strategy: 通用文件压缩策略
            image_strategy: 静态图片压缩策略，为None时图片也按通用文件处理
        """
        self.generic_strategy = generic_strategy or GenericStrategy()
        self.image_strategy = image_strategy

    def strategy_for(self, request: CompressionRequest) -> CompressionStrategy:
        if request.media_kind is MediaKind.IMAGE and self.image_strategy is not None:
            return self.image_strategy
        return self.generic_strategy

    async def compress(self, request: CompressionRequest) -> CompressionResult:
        """压缩（异步包装器）"""
        return await asyncio.to_thread(self.compress_sync, request)

    def compress_sync(self, request: CompressionRequest) -> CompressionResult:
        """
        同步压缩

        Args:
            request: 压缩请求

        Returns:
            压缩结果，失败时为原始内容加诊断信息
        """
        strategy = self.strategy_for(request)
        original_size = request.original_size
        logger.debug(
            f"开始压缩: 模式 {request.mode.value}, 策略 {strategy.describe(request)}, "
            f"原始大小 {original_size} 字节"
        )

        try:
            candidate = strategy.encode(request)
        except CodecFailure as e:
            logger.warning(f"压缩失败，保留原始文件: {e}")
            return self._fallback(request, CODEC_FAILURE_MESSAGE, Outcome.CODEC_FAILURE)

        candidate_size = len(candidate)

        if request.mode is CompressionMode.ADVANCED:
            target_bytes = request.target_budget.to_bytes()
            if candidate_size > target_bytes:
                logger.info(
                    f"未达到目标大小 {target_bytes} 字节，最佳结果 {candidate_size} 字节，保留原始文件"
                )
                return self._fallback(
                    request,
                    budget_unmet_message(candidate_size, request.target_budget.describe()),
                    Outcome.BUDGET_UNMET,
                )

        if candidate_size >= original_size:
            logger.info(
                f"压缩后大小 {candidate_size} 字节未小于原始大小 {original_size} 字节，保留原始文件"
            )
            return self._fallback(request, NO_IMPROVEMENT_MESSAGE, Outcome.NO_IMPROVEMENT)

        logger.info(
            f"压缩完成: {original_size} -> {candidate_size} 字节 "
            f"({format_bytes(candidate_size)})"
        )
        return CompressionResult(output_bytes=candidate, original_size=original_size)

    @staticmethod
    def _fallback(
        request: CompressionRequest, diagnostic: str, outcome: Outcome
    ) -> CompressionResult:
        return CompressionResult(
            output_bytes=request.content,
            original_size=request.original_size,
            diagnostic=diagnostic,
            outcome=outcome,
        )
