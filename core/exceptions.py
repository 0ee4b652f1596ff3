# -*- coding: utf-8 -*-
"""
文件压缩插件异常定义
"""


class FileCompressorError(Exception):
    """文件压缩插件基础异常类"""
    pass


class InvalidRequestError(FileCompressorError):
    """压缩请求格式非法（调用方契约错误）"""
    pass


class CodecFailure(FileCompressorError):
    """编码器压缩失败"""
    pass


class DownloadError(FileCompressorError):
    """文件下载异常"""
    pass


class AnalysisError(FileCompressorError):
    """规则分析服务异常"""
    pass


class ChatError(FileCompressorError):
    """分析问答服务异常"""
    pass


class FileOperationError(FileCompressorError):
    """文件操作异常"""
    pass
