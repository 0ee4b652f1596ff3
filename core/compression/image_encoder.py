# -*- coding: utf-8 -*-
"""
图片编码器 - 以质量参数重新编码静态图片
"""

import io
from typing import Optional

from PIL import Image

from astrbot.api import logger

from core.compression.models import CompressionMode, TargetBudget
from core.exceptions import CodecFailure

# 各固定模式对应的编码质量 (0, 1]
MODE_QUALITY = {
    CompressionMode.LOSSLESS: 0.95,
    CompressionMode.QUALITY: 0.8,
    CompressionMode.MAX: 0.6,
}

MIN_ADVANCED_QUALITY = 0.5
MAX_ADVANCED_QUALITY = 0.95

SUPPORTED_OUTPUT_FORMATS = ("JPEG", "WEBP")


def quality_for_mode(
    mode: CompressionMode,
    original_size: int,
    budget: Optional[TargetBudget] = None,
) -> float:
    """
    根据压缩模式计算编码质量

    advanced模式按目标大小与原始大小的比例线性估算，并限制在 [0.5, 0.95]，
    只是一次性估算，不保证输出一定满足目标大小。

    Args:
        mode: 压缩模式
        original_size: 原始大小（字节）
        budget: advanced模式的目标大小

    Returns:
        编码质量
    """
    if mode is not CompressionMode.ADVANCED:
        return MODE_QUALITY[mode]

    if budget is None:
        raise ValueError("advanced 模式需要目标大小")
    if original_size <= 0:
        return MAX_ADVANCED_QUALITY

    target = budget.to_bytes()
    estimate = 1 - (original_size - target) / original_size
    return max(MIN_ADVANCED_QUALITY, min(MAX_ADVANCED_QUALITY, estimate))


class ImageEncoder:
    """静态图片编码器"""

    def __init__(self, output_format: str = "JPEG"):
        """
        初始化图片编码器

        Args:
            output_format: 输出格式 (JPEG 或 WEBP)
        """
        output_format = output_format.upper()
        if output_format not in SUPPORTED_OUTPUT_FORMATS:
            logger.warning(f"不支持的图片输出格式 {output_format}，使用JPEG")
            output_format = "JPEG"
        self.output_format = output_format

    @property
    def extension(self) -> str:
        return "jpg" if self.output_format == "JPEG" else "webp"

    def encode(self, content: bytes, quality: float) -> bytes:
        """
        以指定质量重新编码图片

        Args:
            content: 图片内容
            quality: 编码质量 (0, 1]

        Returns:
            编码后的图片内容
        """
        pil_quality = max(1, min(100, int(round(quality * 100))))
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.load()
                img = self._flatten(img)

                output = io.BytesIO()
                img.save(
                    output,
                    format=self.output_format,
                    quality=pil_quality,
                    optimize=True,
                )
        except Exception as e:
            logger.error(f"图片编码失败: {e}")
            raise CodecFailure(f"图片编码失败: {e}") from e

        encoded = output.getvalue()
        logger.debug(
            f"图片编码完成 ({self.output_format}, 质量 {pil_quality}): "
            f"{len(content)} -> {len(encoded)} 字节"
        )
        return encoded

    def _flatten(self, img: Image.Image) -> Image.Image:
        """处理透明通道，JPEG输出时铺白色背景"""
        if self.output_format == "JPEG" and img.mode in ("RGBA", "LA", "P"):
            if img.mode != "RGBA":
                img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        if self.output_format == "WEBP" and img.mode in ("LA", "P"):
            return img.convert("RGBA")
        if img.mode not in ("RGB", "L", "RGBA"):
            return img.convert("RGB")
        return img
