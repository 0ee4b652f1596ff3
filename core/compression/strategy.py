# -*- coding: utf-8 -*-
"""
压缩策略模块 - 为每种媒体类型生成候选压缩结果
"""

from abc import ABC, abstractmethod
from typing import Optional

from core.compression.codec import EffortLevel, GenericCompressor
from core.compression.image_encoder import ImageEncoder, quality_for_mode
from core.compression.models import CompressionMode, CompressionRequest

# 模式到压缩力度的映射；advanced 同样只做一次最大力度压缩
EFFORT_BY_MODE = {
    CompressionMode.LOSSLESS: EffortLevel.FASTEST,
    CompressionMode.QUALITY: EffortLevel.BALANCED,
    CompressionMode.MAX: EffortLevel.MAXIMUM,
    CompressionMode.ADVANCED: EffortLevel.MAXIMUM,
}


class CompressionStrategy(ABC):
    """压缩策略基类"""

    # 候选结果的文件扩展名，None 表示沿用原扩展名
    extension: Optional[str] = None

    @abstractmethod
    def encode(self, request: CompressionRequest) -> bytes:
        """
        生成候选压缩结果

        Args:
            request: 压缩请求

        Returns:
            候选内容

        Raises:
            CodecFailure: 编码器出错
        """
        pass

    def describe(self, request: CompressionRequest) -> str:
        """用于日志的策略描述"""
        return type(self).__name__


class GenericStrategy(CompressionStrategy):
    """通用文件压缩策略（gzip）"""

    extension = "gz"

    def __init__(self, compressor: Optional[GenericCompressor] = None):
        self.compressor = compressor or GenericCompressor()

    def effort_for(self, mode: CompressionMode) -> EffortLevel:
        return EFFORT_BY_MODE[mode]

    def encode(self, request: CompressionRequest) -> bytes:
        return self.compressor.compress(request.content, self.effort_for(request.mode))

    def describe(self, request: CompressionRequest) -> str:
        return f"gzip/{self.effort_for(request.mode).name}"


class ImageStrategy(CompressionStrategy):
    """静态图片压缩策略（按质量参数重新编码）"""

    def __init__(self, encoder: Optional[ImageEncoder] = None):
        self.encoder = encoder or ImageEncoder()
        self.extension = self.encoder.extension

    def quality_for(self, request: CompressionRequest) -> float:
        return quality_for_mode(
            request.mode, request.original_size, request.target_budget
        )

    def encode(self, request: CompressionRequest) -> bytes:
        return self.encoder.encode(request.content, self.quality_for(request))

    def describe(self, request: CompressionRequest) -> str:
        return f"{self.encoder.output_format}/q={self.quality_for(request):.2f}"
