from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass
class Attachment:
    """One media file requested by a fetch: where it comes from and where it lands."""
    source_url: str
    local_path: Path


class FetchOutcome(Enum):
    """What a download task reports back to the collector."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class UrlEntity:
    url: str            # shortened link as it appears in the text
    display_url: str    # human-readable form shown instead


@dataclass
class MediaEntity:
    url: str
    display_url: str
    media_url: str = ""  # direct download URL of the image/video


@dataclass
class Status:
    """A timeline entry as delivered by the API client."""
    id: int
    user_id: int
    screen_name: str
    text: str
    urls: list[UrlEntity] = field(default_factory=list)
    media: list[MediaEntity] = field(default_factory=list)
    retweeted_status: Status | None = None
