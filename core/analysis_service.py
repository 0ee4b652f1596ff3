# -*- coding: utf-8 -*-
"""
规则分析服务 - 调用外部接口按XML规则分析文本文件
"""

import asyncio
import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import aiohttp

from astrbot.api import logger

from core.config import PluginConfig
from core.exceptions import AnalysisError

ANALYSIS_FAILED_MESSAGE = "Failed to analyze files using the external service."


@dataclass(frozen=True)
class AnalysisResult:
    """分析结果"""

    analysis: str
    suggestions: str
    report: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "AnalysisResult":
        return AnalysisResult(
            analysis=data.get("analysis", ""),
            suggestions=data.get("suggestions", ""),
            report=data.get("report", ""),
        )

    @staticmethod
    def from_response(data: Dict[str, Any]) -> "AnalysisResult":
        """
        从接口返回值构造分析结果，缺失字段使用默认文本

        Args:
            data: 接口返回的JSON对象

        Returns:
            分析结果
        """
        analysis = data.get("analysis")
        suggestions = data.get("suggestions")
        report = data.get("report") or (
            f"Analysis Report:\n\nAnalysis:\n{analysis}\n\nSuggestions:\n{suggestions}"
        )
        return AnalysisResult(
            analysis=str(analysis or "No analysis provided."),
            suggestions=str(suggestions or "No suggestions provided."),
            report=str(report),
        )


class AnalysisService:
    """外部规则分析服务客户端"""

    def __init__(self, config: PluginConfig):
        """
        初始化分析服务

        Args:
            config: 插件配置
        """
        self.api_url = config.analysis_api_url
        self.timeout = config.analysis_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        获取或创建共享的 HTTP 会话

        Returns:
            aiohttp.ClientSession 实例
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self):
        """关闭 HTTP 会话，释放资源"""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def analyze(self, content_text: str, rules_text: str) -> AnalysisResult:
        """
        按规则分析文件内容

        Args:
            content_text: 待分析的文本内容
            rules_text: XML规则

        Returns:
            分析结果

        Raises:
            AnalysisError: 请求失败或返回内容无法解析
        """
        payload = {"xml_rules": rules_text, "txt_content": content_text}
        try:
            session = await self._get_session()
            async with session.post(
                self.api_url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                if resp.status >= 400:
                    raise AnalysisError(f"分析接口返回状态码 {resp.status}")
                data = await resp.json(content_type=None)
        except (AnalysisError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"调用分析服务失败: {e}")
            raise AnalysisError(ANALYSIS_FAILED_MESSAGE) from e

        if not isinstance(data, dict):
            logger.error(f"分析服务返回格式错误: {type(data).__name__}")
            raise AnalysisError(ANALYSIS_FAILED_MESSAGE)

        logger.debug(f"分析服务返回字段: {sorted(data.keys())}")
        return AnalysisResult.from_response(data)
