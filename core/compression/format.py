# -*- coding: utf-8 -*-
"""
文件格式检测工具
"""

import io
from enum import Enum
from typing import Optional

from PIL import Image

from astrbot.api import logger

from core.compression.models import MediaKind


class ImageFormat(Enum):
    """图片格式枚举"""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"
    BMP = "bmp"
    UNKNOWN = "unknown"

    @staticmethod
    def from_pil_format(pil_format: str | None) -> "ImageFormat":
        """
        从PIL格式转换为ImageFormat

        Args:
            pil_format: PIL的format属性值

        Returns:
            对应的ImageFormat枚举
        """
        if not pil_format:
            return ImageFormat.UNKNOWN

        format_map = {
            "JPEG": ImageFormat.JPEG,
            "PNG": ImageFormat.PNG,
            "GIF": ImageFormat.GIF,
            "WEBP": ImageFormat.WEBP,
            "BMP": ImageFormat.BMP,
        }
        return format_map.get(pil_format.upper(), ImageFormat.UNKNOWN)


# 可以用图片编码器重新编码的静态格式
RASTER_FORMATS = {ImageFormat.JPEG, ImageFormat.PNG, ImageFormat.WEBP, ImageFormat.BMP}


def detect_format(content: bytes) -> tuple[ImageFormat, bool]:
    """
    检测图片格式和是否为动图

    Args:
        content: 文件内容

    Returns:
        (格式类型, 是否为动图)
        非图片或检测失败时返回 (ImageFormat.UNKNOWN, False)
    """
    if not content:
        return ImageFormat.UNKNOWN, False
    try:
        with Image.open(io.BytesIO(content)) as img:
            format_type = ImageFormat.from_pil_format(img.format)
            is_animated = False
            if format_type in (ImageFormat.GIF, ImageFormat.WEBP, ImageFormat.PNG):
                is_animated = bool(getattr(img, "is_animated", False))
            return format_type, is_animated
    except Exception as e:
        logger.debug(f"图片格式检测失败: {e}")
        return ImageFormat.UNKNOWN, False


def detect_media_kind(content: bytes, filename: Optional[str] = None) -> MediaKind:
    """
    判断文件应使用图片编码器还是通用压缩

    动图按通用文件处理以保留所有帧。

    Args:
        content: 文件内容
        filename: 文件名，仅用于日志

    Returns:
        媒体类型
    """
    format_type, is_animated = detect_format(content)
    if format_type in RASTER_FORMATS and not is_animated:
        logger.debug(f"{filename or '文件'} 识别为静态图片: {format_type.value}")
        return MediaKind.IMAGE
    if format_type != ImageFormat.UNKNOWN:
        logger.debug(f"{filename or '文件'} 为动图 {format_type.value}，按通用文件压缩")
    return MediaKind.GENERIC
