"""
文件压缩插件核心模块
"""

from core.config import PluginConfig
from core.exceptions import (
    FileCompressorError,
    InvalidRequestError,
    CodecFailure,
    DownloadError,
    AnalysisError,
    ChatError,
    FileOperationError,
)

__all__ = [
    "PluginConfig",
    "FileCompressorError",
    "InvalidRequestError",
    "CodecFailure",
    "DownloadError",
    "AnalysisError",
    "ChatError",
    "FileOperationError",
]
