# -*- coding: utf-8 -*-
"""
字节大小格式化与压缩结果报告工具
"""

import math
from typing import Union

_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def _strip_number(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_bytes(num_bytes: int, decimals: int = 2) -> str:
    """
    将字节数格式化为可读字符串，例如 1024 -> "1 KB"

    Args:
        num_bytes: 字节数
        decimals: 保留的小数位数（末尾的0会被去掉）

    Returns:
        格式化后的字符串
    """
    if num_bytes <= 0:
        return "0 Bytes"
    decimals = max(decimals, 0)
    index = min(int(math.floor(math.log(num_bytes, 1024))), len(_UNITS) - 1)
    # log 的浮点误差可能让 1024**n 落到下一级之下
    if index + 1 < len(_UNITS) and num_bytes >= 1024 ** (index + 1):
        index += 1
    value = num_bytes / (1024 ** index)
    return f"{_strip_number(value, decimals)} {_UNITS[index]}"


def format_amount(amount: Union[int, float], unit: str) -> str:
    """格式化用户输入的目标大小，例如 (1, "KB") -> "1 KB" """
    return f"{_strip_number(float(amount), 2)} {unit}"


def reduction_percent(original_size: int, output_size: int) -> float:
    """计算体积减少的百分比"""
    if original_size <= 0:
        return 0.0
    return (original_size - output_size) / original_size * 100


def summarize(result, name: str = "") -> str:
    """
    生成单行压缩报告

    Args:
        result: CompressionResult 对象
        name: 文件名

    Returns:
        例如 "a.txt: 97.66 KB -> 210 Bytes (-99.8%)"
    """
    line = (
        f"{format_bytes(result.original_size)} -> "
        f"{format_bytes(result.output_size)}"
    )
    if result.output_size < result.original_size:
        percent = reduction_percent(result.original_size, result.output_size)
        line = f"{line} (-{percent:.1f}%)"
    else:
        line = f"{line} (未压缩)"
    if name:
        line = f"{name}: {line}"
    if result.diagnostic:
        line = f"{line}\n  {result.diagnostic}"
    return line
