"""
pytest test suite for imgtoolbox.models.images.
"""

from __future__ import annotations

import base64

import pytest

from imgtoolbox.models.images import CompressionResult, ImageBuffer


class TestImageBuffer:
    @pytest.mark.parametrize(
        "mime_type, tag",
        [
            ("image/png", "png"),
            ("image/webp", "webp"),
            ("image/jpeg", "jpeg"),
            ("image/jpg", "jpeg"),
            ("IMAGE/PNG", "png"),
            ("image/gif", "jpeg"),
            (None, "jpeg"),
        ],
    )
    def test_format_tag(self, mime_type, tag):
        assert ImageBuffer(data=b"x", mime_type=mime_type).format_tag == tag

    def test_data_url(self):
        buffer = ImageBuffer(data=b"abc", mime_type="image/webp")
        assert buffer.to_data_url() == "data:image/webp;base64," + base64.b64encode(b"abc").decode()
        assert buffer.byte_length == 3


class TestCompressionResultDerived:
    def test_saved_percent_zero_original(self):
        result = CompressionResult(data=b"1234", width=1, height=1, quality=80, original_size=0)
        assert result.saved_percent == 0.0

    def test_saved_percent_negative_when_larger(self):
        result = CompressionResult(data=b"12345678", width=1, height=1, quality=80, original_size=4)
        assert result.saved_percent == -100.0
