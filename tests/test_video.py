"""Tests for video URL parsing."""

import pytest

from src.models import VideoProvider
from src.views import is_valid_video_url, parse_video_url, video_embed_url, video_thumbnail_url


class TestParseVideoUrl:

    def test_youtube_short_link(self):
        info = parse_video_url("https://youtu.be/dQw4w9WgXcQ")

        assert info.provider == VideoProvider.YOUTUBE
        assert info.video_id == "dQw4w9WgXcQ"
        assert info.embed_url == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        assert info.thumbnail_url == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://youtube.com/shorts/dQw4w9WgXcQ",
    ])
    def test_youtube_variants(self, url):
        info = parse_video_url(url)
        assert info.provider == VideoProvider.YOUTUBE
        assert info.video_id == "dQw4w9WgXcQ"

    def test_vimeo_has_no_thumbnail(self):
        info = parse_video_url("https://vimeo.com/12345")

        assert info.provider == VideoProvider.VIMEO
        assert info.video_id == "12345"
        assert info.embed_url == "https://player.vimeo.com/video/12345"
        assert info.thumbnail_url is None

    def test_vimeo_player_url(self):
        assert parse_video_url("https://player.vimeo.com/video/987").video_id == "987"

    @pytest.mark.parametrize("url", ["https://example.com/video", "", None])
    def test_unrecognized(self, url):
        info = parse_video_url(url)

        assert info.provider is None
        assert info.embed_url is None
        assert info.thumbnail_url is None
        assert not info.embeddable


class TestHelpers:

    def test_helpers_agree_with_parser(self):
        url = "https://youtu.be/dQw4w9WgXcQ"
        assert video_embed_url(url) == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        assert video_thumbnail_url(url).endswith("/hqdefault.jpg")
        assert is_valid_video_url(url)
        assert not is_valid_video_url("https://example.com/video")
