# -*- coding: utf-8 -*-
"""
文件操作模块
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Set

from astrbot.api import logger

from core.compression import (
    CompressionManager,
    CompressionMode,
    CompressionRequest,
    CompressionResult,
    TargetBudget,
)
from core.exceptions import FileOperationError
from core.path_manager import PathManager, safe_name


@dataclass(frozen=True)
class Attachment:
    """消息中的一个附件"""

    name: str
    content: bytes


@dataclass(frozen=True)
class CompressedFile:
    """已写入磁盘的压缩结果"""

    name: str
    path: Path
    result: CompressionResult


class FileHandler:
    """文件处理器"""

    def __init__(self, path_manager: PathManager, compression_manager: CompressionManager):
        """
        初始化文件处理器

        Args:
            path_manager: 路径管理器
            compression_manager: 压缩管理器
        """
        self.path_manager = path_manager
        self.compression_manager = compression_manager

    @staticmethod
    def output_name(name: str, extension: Optional[str]) -> str:
        """
        计算输出文件名

        Args:
            name: 原始文件名
            extension: 压缩结果扩展名，None表示沿用原文件名

        Returns:
            输出文件名
        """
        name = safe_name(name)
        if extension == "gz":
            return f"compressed-{name}.gz"
        if extension:
            return f"compressed-{Path(name).stem}.{extension}"
        return f"compressed-{name}"

    @staticmethod
    def unique_name(filename: str, used_names: Set[str]) -> str:
        """同一批次中重名时追加序号，例如 compressed-a-2.jpg"""
        if filename not in used_names:
            return filename
        path = Path(filename)
        index = 2
        while f"{path.stem}-{index}{path.suffix}" in used_names:
            index += 1
        return f"{path.stem}-{index}{path.suffix}"

    def clear_outputs(self, output_dir: Path) -> None:
        """删除该用户上一批次的压缩结果，只保留最近一次"""
        try:
            for old_file in output_dir.iterdir():
                if old_file.is_file():
                    old_file.unlink()
        except OSError as e:
            logger.error(f"清理旧压缩结果失败: {e}")
            raise FileOperationError(f"清理旧压缩结果失败: {e}") from e

    def save_output(self, content: bytes, filename: str, output_dir: Path) -> Path:
        """
        保存压缩结果到文件

        Args:
            content: 文件内容
            filename: 文件名
            output_dir: 输出目录

        Returns:
            保存的文件路径
        """
        try:
            filepath = output_dir / filename
            with open(filepath, "wb") as f:
                f.write(content)
            logger.info(f"压缩结果已保存: {filepath}")
            return filepath
        except OSError as e:
            logger.error(f"保存压缩结果失败: {e}")
            raise FileOperationError(f"保存压缩结果失败: {e}") from e

    async def compress_files(
        self,
        attachments: Sequence[Attachment],
        platform: str,
        user_id: str,
        mode: Optional[CompressionMode] = None,
        budget: Optional[TargetBudget] = None,
    ) -> List[CompressedFile]:
        """
        压缩一组附件并保存结果

        Args:
            attachments: 附件列表
            platform: 平台名称
            user_id: 用户ID
            mode: 压缩模式
            budget: advanced模式目标大小

        Returns:
            每个附件对应的压缩结果（顺序一致）
        """
        requests: List[CompressionRequest] = [
            self.compression_manager.build_request(a.content, mode, budget, a.name)
            for a in attachments
        ]
        results = await self.compression_manager.compress_many(requests)

        output_dir = self.path_manager.get_output_dir(platform, user_id)
        self.clear_outputs(output_dir)

        compressed: List[CompressedFile] = []
        used_names: Set[str] = set()
        for attachment, request, result in zip(attachments, requests, results):
            extension = self.compression_manager.extension_for(request, result)
            filename = self.unique_name(
                self.output_name(attachment.name, extension), used_names
            )
            used_names.add(filename)
            filepath = self.save_output(result.output_bytes, filename, output_dir)
            compressed.append(CompressedFile(name=filename, path=filepath, result=result))
        return compressed
