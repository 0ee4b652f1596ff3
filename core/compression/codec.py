# -*- coding: utf-8 -*-
"""
通用无损压缩编码器（gzip/deflate）
"""

import gzip
import zlib
from enum import Enum

from astrbot.api import logger

from core.exceptions import CodecFailure


class EffortLevel(Enum):
    """压缩力度，值为gzip压缩级别"""

    FASTEST = 1
    BALANCED = 6
    MAXIMUM = 9


class GenericCompressor:
    """任意字节内容的通用压缩器"""

    def compress(self, content: bytes, effort: EffortLevel) -> bytes:
        """
        按指定力度压缩字节内容

        Args:
            content: 原始内容（不会被修改）
            effort: 压缩力度

        Returns:
            gzip格式的压缩内容
        """
        try:
            # mtime固定为0，保证同一输入得到相同输出
            compressed = gzip.compress(content, compresslevel=effort.value, mtime=0)
        except (zlib.error, MemoryError, OverflowError, TypeError, ValueError) as e:
            logger.error(f"通用压缩失败: {e}")
            raise CodecFailure(f"通用压缩失败: {e}") from e

        logger.debug(
            f"通用压缩完成 (力度 {effort.name}): {len(content)} -> {len(compressed)} 字节"
        )
        return compressed
