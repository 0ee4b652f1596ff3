# -*- coding: utf-8 -*-
"""AstrBot 文件压缩插件 - 压缩群友发送的文件，并支持按XML规则分析文件后问答"""

import os
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from astrbot.api import AstrBotConfig, logger
from astrbot.api.event import filter, AstrMessageEvent
from astrbot.api.message_components import File as CompFile
from astrbot.api.message_components import Image as CompImage
from astrbot.api.star import Context, Star, register
from astrbot.core.utils.astrbot_path import get_astrbot_data_path

from core.analysis_service import AnalysisService
from core.chat_service import ChatService
from core.command_parser import parse_compress_args
from core.compression import CompressionManager, summarize
from core.config import PluginConfig
from core.exceptions import (
    AnalysisError,
    ChatError,
    DownloadError,
    FileOperationError,
    InvalidRequestError,
)
from core.file_downloader import FileDownloader
from core.file_handler import Attachment, FileHandler
from core.path_manager import PathManager
from core.session_store import SessionStore


@register(
    "file_compressor",
    "Cline",
    "压缩群友发送的图片和文件（支持目标大小），并可按XML规则分析文本文件后进行问答",
    "1.0.0",
    "https://github.com/your-repo/astrbot_plugin_file_compressor",
)
class FileCompressorPlugin(Star):
    """文件压缩插件"""

    def __init__(self, context: Context, config: AstrBotConfig = None):
        super().__init__(context)
        self.config = PluginConfig(config)

        # 初始化数据目录
        data_dir = Path(get_astrbot_data_path()) / "plugin_data" / "file_compressor"
        data_dir.mkdir(parents=True, exist_ok=True)
        self.config.set_data_dir(data_dir)

        self.path_manager = PathManager(self.config)
        self.compression_manager = CompressionManager(self.config)
        self.file_handler = FileHandler(self.path_manager, self.compression_manager)
        self.downloader = FileDownloader(self.config.max_input_size)
        self.analysis_service = AnalysisService(self.config)
        self.session_store = SessionStore(self.path_manager)

        logger.info("文件压缩插件已加载")

    @staticmethod
    def _user_key(event: AstrMessageEvent) -> str:
        return f"{event.get_platform_name()}:{event.get_sender_id()}"

    @staticmethod
    def _attachment_name(component, index: int) -> str:
        name = getattr(component, "name", None)
        if name:
            return name
        for source in (getattr(component, "file", None), getattr(component, "url", None)):
            if source:
                basename = os.path.basename(urlparse(source).path)
                if basename:
                    return basename
        return f"image_{index}.jpg" if isinstance(component, CompImage) else f"file_{index}"

    async def _collect_attachments(self, event: AstrMessageEvent) -> Tuple[List[Attachment], List[str]]:
        """
        读取消息中的图片和文件附件

        Returns:
            (附件列表, 读取失败的说明)
        """
        attachments: List[Attachment] = []
        errors: List[str] = []
        components = [
            c for c in event.message_obj.message if isinstance(c, (CompImage, CompFile))
        ]
        for index, component in enumerate(components, start=1):
            name = self._attachment_name(component, index)
            url = getattr(component, "url", None)
            path = getattr(component, "file", None)
            if path and path.startswith(("http://", "https://")):
                url, path = url or path, None
            try:
                content = await self.downloader.fetch(url=url, path=path)
            except DownloadError as e:
                logger.warning(f"读取附件 {name} 失败: {e}")
                errors.append(f"{name}: {e}")
                continue
            attachments.append(Attachment(name=name, content=content))
        return attachments, errors

    @filter.command("compress", alias={"压缩"})
    async def compress(self, event: AstrMessageEvent):
        """压缩消息中的图片和文件。用法: /compress [lossless|quality|max|advanced] [目标大小，如 500KB]"""
        try:
            mode, budget = parse_compress_args(event.message_str or "")
        except InvalidRequestError as e:
            yield event.plain_result(f"参数错误: {e}")
            return

        attachments, errors = await self._collect_attachments(event)
        if not attachments:
            message = "请在发送指令时附带需要压缩的图片或文件"
            if errors:
                message += "\n" + "\n".join(errors)
            yield event.plain_result(message)
            return

        try:
            compressed = await self.file_handler.compress_files(
                attachments,
                event.get_platform_name(),
                event.get_sender_id(),
                mode=mode,
                budget=budget,
            )
        except InvalidRequestError as e:
            yield event.plain_result(f"参数错误: {e}")
            return
        except FileOperationError as e:
            logger.error(f"保存压缩结果失败: {e}")
            yield event.plain_result("压缩结果保存失败，请稍后再试")
            return

        lines = [summarize(item.result, item.name) for item in compressed]
        lines.extend(f"跳过 {error}" for error in errors)
        yield event.plain_result("压缩完成:\n" + "\n".join(lines))
        for item in compressed:
            yield event.chain_result([CompFile(name=item.name, file=str(item.path))])

    @filter.command("analyze", alias={"分析"})
    async def analyze(self, event: AstrMessageEvent):
        """按XML规则分析文本文件。用法: /analyze 并附带一个 .xml 规则文件和一个待分析文件"""
        attachments, errors = await self._collect_attachments(event)
        rules = [a for a in attachments if a.name.lower().endswith(".xml")]
        contents = [a for a in attachments if not a.name.lower().endswith(".xml")]
        if len(rules) != 1 or len(contents) != 1:
            message = "请附带一个 .xml 规则文件和一个待分析文件"
            if errors:
                message += "\n" + "\n".join(errors)
            yield event.plain_result(message)
            return

        rules_text = rules[0].content.decode("utf-8", errors="replace")
        content_text = contents[0].content.decode("utf-8", errors="replace")
        user_key = self._user_key(event)
        try:
            session = await self.session_store.start(user_key, rules_text, content_text)
            result = await self.analysis_service.analyze(content_text, rules_text)
            session.analysis = result
            await self.session_store.save(user_key, session)
        except AnalysisError as e:
            logger.error(f"分析失败: {e}")
            yield event.plain_result("Analysis failed. 初始分析未能完成，请稍后重试")
            return
        except FileOperationError as e:
            logger.error(f"保存分析会话失败: {e}")
            yield event.plain_result("分析会话保存失败，请稍后再试")
            return
        yield event.plain_result(
            "分析完成\n\n"
            f"分析摘要:\n{result.analysis}\n\n"
            f"修改建议:\n{result.suggestions}\n\n"
            "现在可以使用 /ask 提问，或使用 /report 查看完整报告"
        )

    @filter.command("ask", alias={"提问"})
    async def ask(self, event: AstrMessageEvent):
        """就最近一次分析结果提问。用法: /ask 问题"""
        question = self._command_text(event.message_str or "", {"ask", "提问"})
        try:
            session = self.session_store.load(self._user_key(event))
        except FileOperationError as e:
            logger.error(f"读取分析会话失败: {e}")
            yield event.plain_result("读取分析会话失败，请稍后再试")
            return
        if session is None or session.analysis is None:
            yield event.plain_result("还没有分析结果，请先使用 /analyze")
            return
        if not question:
            yield event.plain_result("请在指令后输入问题")
            return

        chat_service = ChatService(
            self.context.get_using_provider(),
            max_content_chars=self.config.chat_max_content_chars,
        )
        try:
            answer = await chat_service.ask(
                question,
                session.analysis,
                session.rules_text,
                session.content_text,
                session_id=event.unified_msg_origin,
            )
        except ChatError as e:
            logger.error(f"问答失败: {e}")
            yield event.plain_result("Failed to get a response from the AI. 请稍后重试")
            return
        yield event.plain_result(answer)

    @filter.command("report", alias={"报告"})
    async def report(self, event: AstrMessageEvent):
        """查看最近一次分析的完整报告"""
        try:
            session = self.session_store.load(self._user_key(event))
        except FileOperationError as e:
            logger.error(f"读取分析会话失败: {e}")
            yield event.plain_result("读取分析会话失败，请稍后再试")
            return
        if session is None or session.analysis is None:
            yield event.plain_result("还没有分析结果，请先使用 /analyze")
            return
        yield event.plain_result(session.analysis.report)

    @filter.command("reset", alias={"新分析"})
    async def reset(self, event: AstrMessageEvent):
        """清除当前分析会话"""
        try:
            cleared = await self.session_store.clear(self._user_key(event))
        except FileOperationError as e:
            logger.error(f"清除分析会话失败: {e}")
            yield event.plain_result("清除分析会话失败，请稍后再试")
            return
        yield event.plain_result("已清除分析会话" if cleared else "当前没有分析会话")

    @staticmethod
    def _command_text(message_str: str, names: set) -> Optional[str]:
        text = message_str.strip()
        head, _, rest = text.partition(" ")
        if head.lstrip("/").lower() in names:
            text = rest.strip()
        return text or None

    async def terminate(self):
        """插件卸载时调用"""
        await self.downloader.close()
        await self.analysis_service.close()
        logger.info("文件压缩插件已卸载")
