# -*- coding: utf-8 -*-
"""
分析问答服务 - 基于分析结果回答用户问题
"""

from typing import Any, Optional

from astrbot.api import logger

from core.analysis_service import AnalysisResult
from core.exceptions import ChatError

CHAT_PROMPT_TEMPLATE = """You are an AI assistant that helps users understand file analysis results.

You have access to the analysis result, the XML rules used for the analysis, and the content of the analyzed txt file.

Use this information to answer the user's question about the analysis.

Analysis Result: {analysis}
XML Rules: {rules}
TXT File Content: {content}
Question: {question}"""


class ChatService:
    """分析问答服务"""

    def __init__(self, provider: Any, max_content_chars: int = 0):
        """
        初始化问答服务

        Args:
            provider: AstrBot LLM提供商（需实现 text_chat）
            max_content_chars: 提示词中文件内容的最大字符数，0表示不截断
        """
        self.provider = provider
        self.max_content_chars = max_content_chars

    def build_prompt(
        self,
        question: str,
        analysis: AnalysisResult,
        rules_text: str,
        content_text: str,
    ) -> str:
        """拼接问答提示词"""
        if self.max_content_chars > 0 and len(content_text) > self.max_content_chars:
            logger.debug(
                f"文件内容 {len(content_text)} 字符，截断为 {self.max_content_chars} 字符"
            )
            content_text = content_text[: self.max_content_chars]
        return CHAT_PROMPT_TEMPLATE.format(
            analysis=analysis.to_json(),
            rules=rules_text,
            content=content_text,
            question=question,
        )

    async def ask(
        self,
        question: str,
        analysis: AnalysisResult,
        rules_text: str,
        content_text: str,
        session_id: Optional[str] = None,
    ) -> str:
        """
        回答关于分析结果的问题

        Args:
            question: 用户问题
            analysis: 分析结果
            rules_text: XML规则
            content_text: 被分析的文本内容
            session_id: 会话ID

        Returns:
            回答文本

        Raises:
            ChatError: 没有可用的LLM提供商或调用失败
        """
        if not question.strip():
            raise ChatError("问题不能为空")
        if self.provider is None:
            raise ChatError("未配置可用的LLM提供商")

        prompt = self.build_prompt(question, analysis, rules_text, content_text)
        try:
            response = await self.provider.text_chat(
                prompt=prompt, session_id=session_id, contexts=[]
            )
        except Exception as e:
            logger.error(f"LLM问答失败: {e}")
            raise ChatError(f"LLM问答失败: {e}") from e

        answer = getattr(response, "completion_text", None)
        if not answer:
            logger.warning("LLM未返回回答内容")
            raise ChatError("LLM未返回回答内容")
        return answer
