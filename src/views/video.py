"""YouTube / Vimeo URL parsing for project video embeds."""

import re
from typing import Optional
from pydantic import BaseModel

from src.models import VideoProvider

_YOUTUBE_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
]

_VIMEO_PATTERNS = [
    re.compile(r"vimeo\.com/(\d+)"),
    re.compile(r"player\.vimeo\.com/video/(\d+)"),
]


class VideoInfo(BaseModel):
    """Classification of a video URL; every field is None when unrecognized."""
    provider: Optional[VideoProvider] = None
    video_id: Optional[str] = None
    embed_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @property
    def embeddable(self) -> bool:
        return self.embed_url is not None


def parse_video_url(url: Optional[str]) -> VideoInfo:
    """Classify a URL as YouTube, Vimeo or nothing."""
    if not url:
        return VideoInfo()

    for pattern in _YOUTUBE_PATTERNS:
        match = pattern.search(url)
        if match:
            video_id = match.group(1)
            return VideoInfo(
                provider=VideoProvider.YOUTUBE,
                video_id=video_id,
                embed_url=f"https://www.youtube.com/embed/{video_id}",
                thumbnail_url=f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg",
            )

    for pattern in _VIMEO_PATTERNS:
        match = pattern.search(url)
        if match:
            video_id = match.group(1)
            # Vimeo thumbnails need a metadata API call.
            return VideoInfo(
                provider=VideoProvider.VIMEO,
                video_id=video_id,
                embed_url=f"https://player.vimeo.com/video/{video_id}",
            )

    return VideoInfo()


def video_embed_url(url: Optional[str]) -> Optional[str]:
    return parse_video_url(url).embed_url


def video_thumbnail_url(url: Optional[str]) -> Optional[str]:
    return parse_video_url(url).thumbnail_url


def is_valid_video_url(url: Optional[str]) -> bool:
    return parse_video_url(url).provider is not None
