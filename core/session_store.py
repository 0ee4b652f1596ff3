# -*- coding: utf-8 -*-
"""
分析会话存储模块
"""

import json
import time
from dataclasses import dataclass, field
from typing import Optional

from astrbot.api import logger

from core.analysis_service import AnalysisResult
from core.exceptions import FileOperationError
from core.path_manager import PathManager


@dataclass
class AnalysisSession:
    """用户的分析会话：规则、文件内容和分析结果"""

    rules_text: str
    content_text: str
    analysis: Optional[AnalysisResult] = None
    updated_at: int = field(default_factory=lambda: int(time.time()))

    def to_dict(self) -> dict:
        return {
            "rules_text": self.rules_text,
            "content_text": self.content_text,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "updated_at": self.updated_at,
        }

    @staticmethod
    def from_dict(data: dict) -> "AnalysisSession":
        analysis = data.get("analysis")
        return AnalysisSession(
            rules_text=data.get("rules_text", ""),
            content_text=data.get("content_text", ""),
            analysis=AnalysisResult.from_dict(analysis) if analysis else None,
            updated_at=data.get("updated_at", 0),
        )


class SessionStore:
    """分析会话存储"""

    def __init__(self, path_manager: PathManager):
        """
        初始化会话存储

        Args:
            path_manager: 路径管理器
        """
        self.path_manager = path_manager

    def load(self, user_key: str) -> Optional[AnalysisSession]:
        """
        加载会话

        Args:
            user_key: 用户标识

        Returns:
            分析会话，不存在或文件损坏时返回None
        """
        session_path = self.path_manager.get_session_path(user_key)
        if not session_path.exists():
            return None
        try:
            with open(session_path, "r", encoding="utf-8") as f:
                data = json.load(f)
                logger.debug(f"加载会话文件: {session_path}")
                return AnalysisSession.from_dict(data)
        except json.JSONDecodeError as e:
            logger.error(f"会话文件JSON格式错误: {e}")
            return None
        except OSError as e:
            logger.error(f"加载会话文件失败: {e}")
            raise FileOperationError(f"加载会话文件失败: {e}") from e

    async def save(self, user_key: str, session: AnalysisSession) -> None:
        """
        保存会话

        Args:
            user_key: 用户标识
            session: 分析会话
        """
        session_path = self.path_manager.get_session_path(user_key)
        session.updated_at = int(time.time())
        try:
            session_path.parent.mkdir(parents=True, exist_ok=True)
            with open(session_path, "w", encoding="utf-8") as f:
                json.dump(session.to_dict(), f, ensure_ascii=False, indent=2)
            logger.debug(f"保存会话文件: {session_path}")
        except OSError as e:
            logger.error(f"保存会话文件失败: {e}")
            raise FileOperationError(f"保存会话文件失败: {e}") from e

    async def start(self, user_key: str, rules_text: str, content_text: str) -> AnalysisSession:
        """用新上传的文件开始会话，之前的分析结果被清除"""
        session = AnalysisSession(rules_text=rules_text, content_text=content_text)
        await self.save(user_key, session)
        return session

    async def clear(self, user_key: str) -> bool:
        """
        清除会话

        Returns:
            是否存在并删除了会话
        """
        session_path = self.path_manager.get_session_path(user_key)
        if not session_path.exists():
            return False
        try:
            session_path.unlink()
        except OSError as e:
            logger.error(f"删除会话文件失败: {e}")
            raise FileOperationError(f"删除会话文件失败: {e}") from e
        logger.debug(f"已清除会话: {user_key}")
        return True
