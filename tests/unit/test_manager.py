"""
Unit tests for CompressionManager and media detection.
"""

import asyncio
import gzip
import io
import os

import pytest
from PIL import Image

from core.compression.config import CompressionConfig
from core.compression.format import ImageFormat, detect_format, detect_media_kind
from core.compression.manager import CompressionManager
from core.compression.models import (
    CompressionMode,
    CompressionRequest,
    MediaKind,
    Outcome,
    SizeUnit,
    TargetBudget,
)
from core.compression.policy import SizeConstraintPolicy
from core.compression.strategy import CompressionStrategy
from core.config import PluginConfig
from core.exceptions import InvalidRequestError


def _animated_gif():
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
    frames = [Image.new("RGB", (32, 32), color) for color in colors]
    output = io.BytesIO()
    frames[0].save(output, format="GIF", save_all=True, append_images=frames[1:])
    return output.getvalue()


class TestDetection:
    """Test media kind detection."""

    def test_png_is_image(self, noise_png):
        assert detect_format(noise_png) == (ImageFormat.PNG, False)
        assert detect_media_kind(noise_png, "a.png") is MediaKind.IMAGE

    def test_text_is_generic(self, redundant_bytes):
        assert detect_format(redundant_bytes) == (ImageFormat.UNKNOWN, False)
        assert detect_media_kind(redundant_bytes) is MediaKind.GENERIC

    def test_empty_is_generic(self):
        assert detect_media_kind(b"") is MediaKind.GENERIC

    def test_animated_gif_is_generic(self):
        content = _animated_gif()
        assert detect_format(content) == (ImageFormat.GIF, True)
        assert detect_media_kind(content) is MediaKind.GENERIC


class TestCompressionConfig:
    """Test config derived from plugin settings."""

    def test_defaults(self):
        config = CompressionConfig.from_plugin_config(PluginConfig({}))
        assert config.mode is CompressionMode.QUALITY
        assert config.default_budget() == TargetBudget(2, SizeUnit.MB)
        assert config.max_concurrency == 4

    def test_overrides(self):
        config = CompressionConfig.from_plugin_config(
            PluginConfig(
                {
                    "default_mode": "max",
                    "default_target_amount": 500,
                    "default_target_unit": "KB",
                    "max_concurrency": 0,
                }
            )
        )
        assert config.mode is CompressionMode.MAX
        assert config.default_budget().to_bytes() == 500 * 1024
        assert config.max_concurrency == 1

    def test_zero_amount_means_no_default_budget(self):
        config = CompressionConfig(default_target_amount=0)
        assert config.default_budget() is None


class TestCompressionManager:
    """Test request building and dispatch."""

    def test_build_request_uses_config_defaults(self, redundant_bytes):
        manager = CompressionManager(PluginConfig({"default_mode": "lossless"}))
        request = manager.build_request(redundant_bytes)
        assert request.mode is CompressionMode.LOSSLESS
        assert request.media_kind is MediaKind.GENERIC

    def test_advanced_uses_default_budget(self, redundant_bytes):
        manager = CompressionManager(PluginConfig({}))
        request = manager.build_request(redundant_bytes, CompressionMode.ADVANCED)
        assert request.target_budget == TargetBudget(2, SizeUnit.MB)

    def test_advanced_without_any_budget_rejected(self, redundant_bytes):
        manager = CompressionManager(PluginConfig({"default_target_amount": 0}))
        with pytest.raises(InvalidRequestError):
            manager.build_request(redundant_bytes, "advanced")

    @pytest.mark.asyncio
    async def test_compress_file_generic(self, redundant_bytes):
        manager = CompressionManager(PluginConfig({}))
        result = await manager.compress_file(redundant_bytes, CompressionMode.MAX)
        assert result.accepted
        assert gzip.decompress(result.output_bytes) == redundant_bytes

    @pytest.mark.asyncio
    async def test_compress_file_image(self, noise_png):
        manager = CompressionManager(PluginConfig({}))
        result = await manager.compress_file(noise_png, CompressionMode.MAX, filename="n.png")
        assert result.accepted
        with Image.open(io.BytesIO(result.output_bytes)) as img:
            assert img.format == "JPEG"

    @pytest.mark.asyncio
    async def test_image_encoder_disabled(self, noise_png):
        manager = CompressionManager(PluginConfig({"enable_image_encoder": False}))
        request = manager.build_request(noise_png, CompressionMode.MAX)
        result = await manager.compress(request)
        # PNG of noise does not shrink under gzip
        assert result.outcome is Outcome.NO_IMPROVEMENT
        assert result.output_bytes == noise_png

    @pytest.mark.asyncio
    async def test_compress_many_preserves_order(self, redundant_bytes):
        manager = CompressionManager(PluginConfig({"max_concurrency": 2}))
        contents = [redundant_bytes, os.urandom(32), b"B" * 50_000]
        requests = [
            CompressionRequest(c, mode=CompressionMode.QUALITY) for c in contents
        ]
        results = await manager.compress_many(requests)
        assert [r.original_size for r in results] == [len(c) for c in contents]
        assert results[0].accepted
        assert results[1].output_bytes == contents[1]
        assert gzip.decompress(results[2].output_bytes) == contents[2]

    @pytest.mark.asyncio
    async def test_compress_many_respects_concurrency(self):
        active = 0
        peak = 0

        class SlowPolicy(SizeConstraintPolicy):
            async def compress(self, request):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1
                return self.compress_sync(request)

        manager = CompressionManager(
            PluginConfig({"max_concurrency": 2}), policy=SlowPolicy()
        )
        requests = [CompressionRequest(b"A" * 1000, mode="max") for _ in range(6)]
        await manager.compress_many(requests)
        assert peak <= 2

    def test_extension_for(self, redundant_bytes, noise_png):
        manager = CompressionManager(PluginConfig({}))
        generic = manager.build_request(redundant_bytes, CompressionMode.MAX)
        image = manager.build_request(noise_png, CompressionMode.MAX)
        accepted = manager.policy.compress_sync(generic)
        assert manager.extension_for(generic, accepted) == "gz"
        assert manager.extension_for(image, manager.policy.compress_sync(image)) == "jpg"

        class Tiny(CompressionStrategy):
            def encode(self, request):
                return request.content + b"!"

        manager.policy.generic_strategy = Tiny()
        rejected = manager.policy.compress_sync(generic)
        assert manager.extension_for(generic, rejected) is None
