# -*- coding: utf-8 -*-
"""
指令参数解析模块
"""

import re
from typing import Optional, Tuple

from astrbot.api import logger

from core.compression import CompressionMode, SizeUnit, TargetBudget
from core.exceptions import InvalidRequestError

_BUDGET_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*(kb|mb)?$", re.IGNORECASE)

COMMAND_NAMES = {"compress", "压缩"}


def _strip_command(message_str: str) -> list[str]:
    tokens = message_str.strip().split()
    if tokens and tokens[0].lstrip("/").lower() in COMMAND_NAMES:
        tokens = tokens[1:]
    return tokens


def parse_budget(text: str) -> TargetBudget:
    """
    解析目标大小，例如 "500KB"、"1.5 MB"，省略单位时按KB处理

    Args:
        text: 目标大小文本

    Returns:
        目标大小
    """
    match = _BUDGET_PATTERN.match(text.strip())
    if not match:
        raise InvalidRequestError(f"无法解析目标大小: {text!r}")
    amount = float(match.group(1))
    unit = SizeUnit.parse(match.group(2) or "KB")
    return TargetBudget(amount=int(amount) if amount.is_integer() else amount, unit=unit)


def parse_compress_args(
    message_str: str,
) -> Tuple[Optional[CompressionMode], Optional[TargetBudget]]:
    """
    解析压缩指令参数

    支持: "compress"、"compress max"、"compress advanced 500 KB"、"compress 2MB"
    （只给出目标大小时视为advanced模式）

    Args:
        message_str: 消息文本

    Returns:
        (压缩模式, 目标大小)，未指定时为None
    """
    tokens = _strip_command(message_str)
    if not tokens:
        return None, None

    mode: Optional[CompressionMode] = None
    try:
        mode = CompressionMode.parse(tokens[0])
        tokens = tokens[1:]
    except InvalidRequestError:
        pass

    budget = parse_budget(" ".join(tokens)) if tokens else None
    if budget is not None:
        if mode is None:
            mode = CompressionMode.ADVANCED
        elif mode is not CompressionMode.ADVANCED:
            logger.debug(f"模式 {mode.value} 不使用目标大小，忽略 {budget.describe()}")
            budget = None

    return mode, budget
