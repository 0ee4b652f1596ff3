"""
Unit tests for FileDownloader.
"""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from core.exceptions import DownloadError
from core.file_downloader import FileDownloader


def _session_returning(status=200, body=b"", content_length=None):
    resp = MagicMock()
    resp.status = status
    resp.content_length = content_length
    resp.read = AsyncMock(return_value=body)
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    session = MagicMock()
    session.closed = False
    session.get.return_value = ctx
    return session


class TestReadLocal:
    """Test local attachment reads."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"hello")
        assert FileDownloader(max_size=100).read_local(str(path)) == b"hello"

    def test_too_large(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"x" * 101)
        with pytest.raises(DownloadError):
            FileDownloader(max_size=100).read_local(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(DownloadError):
            FileDownloader(max_size=100).read_local(str(tmp_path / "missing"))


class TestDownload:
    """Test URL downloads."""

    @pytest.mark.asyncio
    async def test_download(self):
        downloader = FileDownloader(max_size=100)
        downloader._get_session = AsyncMock(return_value=_session_returning(body=b"data"))
        assert await downloader.fetch(url="http://files.test/a") == b"data"

    @pytest.mark.asyncio
    async def test_bad_status(self):
        downloader = FileDownloader(max_size=100)
        downloader._get_session = AsyncMock(return_value=_session_returning(status=404))
        with pytest.raises(DownloadError):
            await downloader.download("http://files.test/a")

    @pytest.mark.asyncio
    async def test_declared_length_too_large(self):
        downloader = FileDownloader(max_size=100)
        session = _session_returning(body=b"x", content_length=10_000)
        downloader._get_session = AsyncMock(return_value=session)
        with pytest.raises(DownloadError):
            await downloader.download("http://files.test/a")

    @pytest.mark.asyncio
    async def test_network_error(self):
        downloader = FileDownloader(max_size=100)
        session = _session_returning()
        session.get.side_effect = aiohttp.ClientConnectionError("down")
        downloader._get_session = AsyncMock(return_value=session)
        with pytest.raises(DownloadError):
            await downloader.download("http://files.test/a")

    @pytest.mark.asyncio
    async def test_no_source(self):
        with pytest.raises(DownloadError):
            await FileDownloader(max_size=100).fetch()
