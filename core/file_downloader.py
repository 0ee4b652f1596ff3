# -*- coding: utf-8 -*-
"""
文件下载模块
"""

import asyncio
from pathlib import Path
from typing import Optional

import aiohttp

from astrbot.api import logger

from core.exceptions import DownloadError


class FileDownloader:
    """消息附件下载器"""

    def __init__(self, max_size: int):
        """
        初始化文件下载器

        Args:
            max_size: 允许的最大文件大小（字节）
        """
        self.max_size = max_size
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

    def _check_size(self, size: int, source: str) -> None:
        if size > self.max_size:
            raise DownloadError(
                f"文件过大: {source} ({size} 字节，上限 {self.max_size} 字节)"
            )

    async def download(self, url: str) -> bytes:
        """
        下载文件

        Args:
            url: 文件URL

        Returns:
            文件内容
        """
        try:
            session = await self._get_session()
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=30)) as resp:
                if resp.status != 200:
                    raise DownloadError(f"下载失败，状态码: {resp.status}")
                if resp.content_length is not None:
                    self._check_size(resp.content_length, url)
                content = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"网络请求失败 {url}: {e}")
            raise DownloadError(f"下载文件失败: {e}") from e

        self._check_size(len(content), url)
        logger.debug(f"成功下载文件: {url}, 大小: {len(content)} 字节")
        return content

    def read_local(self, path: str) -> bytes:
        """
        读取本地文件

        Args:
            path: 文件路径

        Returns:
            文件内容
        """
        file_path = Path(path)
        try:
            self._check_size(file_path.stat().st_size, path)
            return file_path.read_bytes()
        except OSError as e:
            logger.error(f"读取本地文件失败 {path}: {e}")
            raise DownloadError(f"读取本地文件失败: {e}") from e

    async def fetch(self, url: Optional[str] = None, path: Optional[str] = None) -> bytes:
        """从URL或本地路径获取附件内容"""
        if url:
            return await self.download(url)
        if path:
            return self.read_local(path)
        raise DownloadError("附件没有可用的URL或本地路径")
