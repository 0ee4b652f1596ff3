# -*- coding: utf-8 -*-
"""
压缩请求与压缩结果数据模型
"""

import base64
import binascii
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from core.compression.sizes import format_amount
from core.exceptions import InvalidRequestError


class CompressionMode(Enum):
    """压缩模式枚举"""

    LOSSLESS = "lossless"
    QUALITY = "quality"
    MAX = "max"
    ADVANCED = "advanced"

    @staticmethod
    def parse(value: Any) -> "CompressionMode":
        """
        解析压缩模式

        Args:
            value: 模式字符串或枚举

        Returns:
            对应的CompressionMode枚举
        """
        if isinstance(value, CompressionMode):
            return value
        if isinstance(value, str):
            try:
                return CompressionMode(value.strip().lower())
            except ValueError:
                pass
        raise InvalidRequestError(f"未知的压缩模式: {value!r}")


class MediaKind(Enum):
    """媒体类型，用于选择编码器"""

    GENERIC = "generic"
    IMAGE = "image"

    @staticmethod
    def parse(value: Any) -> "MediaKind":
        if isinstance(value, MediaKind):
            return value
        aliases = {
            "generic": MediaKind.GENERIC,
            "generic-binary": MediaKind.GENERIC,
            "image": MediaKind.IMAGE,
            "raster-image": MediaKind.IMAGE,
        }
        if isinstance(value, str) and value.strip().lower() in aliases:
            return aliases[value.strip().lower()]
        raise InvalidRequestError(f"未知的媒体类型: {value!r}")


class SizeUnit(Enum):
    """目标大小单位"""

    KB = "KB"
    MB = "MB"

    @property
    def factor(self) -> int:
        return 1024 * 1024 if self is SizeUnit.MB else 1024

    @staticmethod
    def parse(value: Any) -> "SizeUnit":
        if isinstance(value, SizeUnit):
            return value
        if isinstance(value, str):
            try:
                return SizeUnit(value.strip().upper())
            except ValueError:
                pass
        raise InvalidRequestError(f"未知的大小单位: {value!r}")


class Outcome(Enum):
    """压缩结果类型"""

    ACCEPTED = "accepted"
    BUDGET_UNMET = "budget_unmet"
    NO_IMPROVEMENT = "no_improvement"
    CODEC_FAILURE = "codec_failure"


@dataclass(frozen=True)
class TargetBudget:
    """advanced模式的目标大小"""

    amount: float
    unit: SizeUnit = SizeUnit.KB

    def __post_init__(self):
        object.__setattr__(self, "unit", SizeUnit.parse(self.unit))
        amount = self.amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise InvalidRequestError(f"目标大小必须为数字: {amount!r}")
        if not math.isfinite(amount) or amount <= 0:
            raise InvalidRequestError(f"目标大小必须大于0: {amount!r}")

    def to_bytes(self) -> int:
        """换算为字节数"""
        return int(self.amount * self.unit.factor)

    def describe(self) -> str:
        """可读形式，例如 "1 KB" """
        return format_amount(self.amount, self.unit.value)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "TargetBudget":
        if not isinstance(data, dict):
            raise InvalidRequestError(f"targetBudget 格式错误: {data!r}")
        if "amount" not in data or "unit" not in data:
            raise InvalidRequestError("targetBudget 缺少 amount 或 unit")
        return TargetBudget(amount=data["amount"], unit=data["unit"])


@dataclass(frozen=True)
class CompressionRequest:
    """单次压缩请求，构造后不可变"""

    content: bytes
    mode: CompressionMode = CompressionMode.QUALITY
    media_kind: MediaKind = MediaKind.GENERIC
    target_budget: Optional[TargetBudget] = None

    def __post_init__(self):
        if isinstance(self.content, (bytearray, memoryview)):
            object.__setattr__(self, "content", bytes(self.content))
        elif not isinstance(self.content, bytes):
            raise InvalidRequestError(
                f"content 必须为字节串，实际为 {type(self.content).__name__}"
            )
        object.__setattr__(self, "mode", CompressionMode.parse(self.mode))
        object.__setattr__(self, "media_kind", MediaKind.parse(self.media_kind))
        if isinstance(self.target_budget, dict):
            object.__setattr__(
                self, "target_budget", TargetBudget.from_dict(self.target_budget)
            )
        if self.mode is CompressionMode.ADVANCED and self.target_budget is None:
            raise InvalidRequestError("advanced 模式必须提供 targetBudget")

    @property
    def original_size(self) -> int:
        return len(self.content)

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> "CompressionRequest":
        """
        从边界格式构造请求

        Args:
            payload: {content, mediaKind, mode, targetBudget?}，content 可为字节或base64字符串

        Returns:
            压缩请求对象
        """
        if not isinstance(payload, dict):
            raise InvalidRequestError("请求必须为字典")
        if "content" not in payload or "mode" not in payload:
            raise InvalidRequestError("请求缺少 content 或 mode")

        content = payload["content"]
        if isinstance(content, str):
            try:
                content = base64.b64decode(content, validate=True)
            except (binascii.Error, ValueError) as e:
                raise InvalidRequestError(f"content 不是合法的base64: {e}") from e

        budget = payload.get("targetBudget")
        return CompressionRequest(
            content=content,
            mode=payload["mode"],
            media_kind=payload.get("mediaKind", MediaKind.GENERIC),
            target_budget=TargetBudget.from_dict(budget) if budget is not None else None,
        )


@dataclass(frozen=True)
class CompressionResult:
    """压缩结果：压缩后的内容或原始内容"""

    output_bytes: bytes
    original_size: int
    diagnostic: Optional[str] = None
    outcome: Outcome = Outcome.ACCEPTED
    output_size: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "output_size", len(self.output_bytes))

    @property
    def accepted(self) -> bool:
        return self.outcome is Outcome.ACCEPTED

    @property
    def saved_bytes(self) -> int:
        return self.original_size - self.output_size

    @property
    def ratio(self) -> float:
        """输出大小与原始大小之比，空输入为1.0"""
        if self.original_size == 0:
            return 1.0
        return self.output_size / self.original_size

    def to_dict(self, encode_base64: bool = True) -> Dict[str, Any]:
        """转换为边界格式"""
        data: Dict[str, Any] = {
            "outputBytes": (
                base64.b64encode(self.output_bytes).decode("ascii")
                if encode_base64
                else self.output_bytes
            ),
            "originalSize": self.original_size,
            "outputSize": self.output_size,
        }
        if self.diagnostic is not None:
            data["diagnostic"] = self.diagnostic
        return data
