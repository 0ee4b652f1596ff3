"""
Unit tests for AnalysisService (external rule-analysis API client).
"""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from core.analysis_service import ANALYSIS_FAILED_MESSAGE, AnalysisResult, AnalysisService
from core.config import PluginConfig
from core.exceptions import AnalysisError


def _session_returning(status=200, payload=None, json_error=None):
    resp = MagicMock()
    resp.status = status
    resp.json = AsyncMock(return_value=payload, side_effect=json_error)
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    session = MagicMock()
    session.closed = False
    session.post.return_value = ctx
    return session


@pytest.fixture
def service():
    return AnalysisService(PluginConfig({"analysis_api_url": "http://analysis.test/analyze"}))


class TestAnalysisResult:
    """Test response mapping."""

    def test_full_response(self):
        result = AnalysisResult.from_response(
            {"analysis": "a", "suggestions": "s", "report": "r"}
        )
        assert result == AnalysisResult("a", "s", "r")

    def test_missing_fields_use_defaults(self):
        result = AnalysisResult.from_response({"analysis": "looks fine"})
        assert result.analysis == "looks fine"
        assert result.suggestions == "No suggestions provided."
        assert "Analysis:\nlooks fine" in result.report

    def test_empty_response(self):
        result = AnalysisResult.from_response({})
        assert result.analysis == "No analysis provided."

    def test_json_round_trip(self):
        result = AnalysisResult("a", "s", "r")
        assert AnalysisResult.from_dict(result.to_dict()) == result
        assert '"analysis": "a"' in result.to_json()


class TestAnalysisService:
    """Test the HTTP call and its failure modes."""

    @pytest.mark.asyncio
    async def test_successful_analysis(self, service):
        session = _session_returning(
            payload={"analysis": "ok", "suggestions": "none", "report": "full"}
        )
        service._get_session = AsyncMock(return_value=session)

        result = await service.analyze("content", "<rules/>")

        assert result == AnalysisResult("ok", "none", "full")
        args, kwargs = session.post.call_args
        assert args[0] == "http://analysis.test/analyze"
        assert kwargs["json"] == {"xml_rules": "<rules/>", "txt_content": "content"}

    @pytest.mark.asyncio
    async def test_http_error_status(self, service):
        service._get_session = AsyncMock(return_value=_session_returning(status=500))
        with pytest.raises(AnalysisError, match=ANALYSIS_FAILED_MESSAGE):
            await service.analyze("content", "<rules/>")

    @pytest.mark.asyncio
    async def test_network_error(self, service):
        session = _session_returning()
        session.post.side_effect = aiohttp.ClientConnectionError("down")
        service._get_session = AsyncMock(return_value=session)
        with pytest.raises(AnalysisError):
            await service.analyze("content", "<rules/>")

    @pytest.mark.asyncio
    async def test_invalid_json(self, service):
        session = _session_returning(json_error=ValueError("not json"))
        service._get_session = AsyncMock(return_value=session)
        with pytest.raises(AnalysisError):
            await service.analyze("content", "<rules/>")

    @pytest.mark.asyncio
    async def test_non_object_json(self, service):
        service._get_session = AsyncMock(return_value=_session_returning(payload=["x"]))
        with pytest.raises(AnalysisError):
            await service.analyze("content", "<rules/>")

    @pytest.mark.asyncio
    async def test_close_without_session(self, service):
        await service.close()
        assert service._session is None
