# -*- coding: utf-8 -*-
"""
压缩核心模块 - 带大小约束的自适应压缩

提供通用文件压缩与静态图片重新编码，支持四种模式，
压缩结果不理想时回退到原始内容。
"""

from core.compression.codec import EffortLevel, GenericCompressor
from core.compression.config import CompressionConfig
from core.compression.format import ImageFormat, detect_format, detect_media_kind
from core.compression.image_encoder import ImageEncoder, quality_for_mode
from core.compression.manager import CompressionManager
from core.compression.models import (
    CompressionMode,
    CompressionRequest,
    CompressionResult,
    MediaKind,
    Outcome,
    SizeUnit,
    TargetBudget,
)
from core.compression.policy import SizeConstraintPolicy
from core.compression.sizes import format_amount, format_bytes, summarize
from core.compression.strategy import CompressionStrategy, GenericStrategy, ImageStrategy

__all__ = [
    "CompressionManager",
    "CompressionConfig",
    "CompressionMode",
    "CompressionRequest",
    "CompressionResult",
    "MediaKind",
    "Outcome",
    "SizeUnit",
    "TargetBudget",
    "EffortLevel",
    "GenericCompressor",
    "ImageEncoder",
    "quality_for_mode",
    "ImageFormat",
    "detect_format",
    "detect_media_kind",
    "SizeConstraintPolicy",
    "CompressionStrategy",
    "GenericStrategy",
    "ImageStrategy",
    "format_amount",
    "format_bytes",
    "summarize",
]
