import logging
import re
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import parse_qs, urlparse

import requests

from vid2blog.errors import ErrorType, ProcessingError, classify_error
from vid2blog.models.schemas import VideoMetadata

logger = logging.getLogger(__name__)

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3/videos"

_VIDEO_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_ISO_DURATION_RE = re.compile(r"P(?:(\d+)D)?T?(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


@dataclass
class UrlValidation:
    is_valid: bool
    video_id: str | None = None
    error: str | None = None


def extract_video_id(url: str) -> str | None:
    """Extract the video ID from watch, short, embed and mobile YouTube URLs."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()
    if host == "youtu.be":
        return parsed.path.lstrip("/").split("/")[0] or None
    if host == "youtube.com" or host.endswith(".youtube.com"):
        if parsed.path == "/watch":
            ids = parse_qs(parsed.query).get("v")
            return ids[0] if ids else None
        for prefix in ("/embed/", "/shorts/", "/live/"):
            if parsed.path.startswith(prefix):
                return parsed.path[len(prefix):].split("/")[0] or None
    return None


def validate_youtube_url(url) -> UrlValidation:
    """Validate URL format and extract an 11-character video ID."""
    if not url or not isinstance(url, str):
        return UrlValidation(False, error="URL is required and must be a string")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return UrlValidation(False, error="Invalid URL format")

    video_id = extract_video_id(url)
    if not video_id:
        return UrlValidation(
            False,
            error=(
                "Not a valid YouTube URL. Please use a URL like "
                "https://www.youtube.com/watch?v=VIDEO_ID or https://youtu.be/VIDEO_ID"
            ),
        )
    if not _VIDEO_ID_RE.match(video_id):
        return UrlValidation(False, error="Invalid YouTube video ID format")

    return UrlValidation(True, video_id=video_id)


def parse_iso_duration(duration: str) -> int:
    """Parse an ISO 8601 duration (e.g. PT1H4M13S) into seconds."""
    match = _ISO_DURATION_RE.fullmatch(duration or "")
    if not match:
        return 0
    days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def format_duration(seconds: int) -> str:
    """Return H:MM:SS or M:SS."""
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _pick_thumbnail(thumbnails: dict) -> str:
    for size in ("maxres", "high", "medium", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


def _parse_publish_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def fetch_video_metadata(
    video_id: str,
    api_key: str,
    timeout: float | None = 10,
) -> VideoMetadata:
    """Fetch metadata from the YouTube Data API v3.

    Raises:
        ProcessingError: If the video is missing, live, or the API rejects the call.
    """
    if not api_key:
        raise ProcessingError(
            ErrorType.API_KEY_INVALID,
            "YouTube API key not configured. Please set YOUTUBE_API_KEY environment variable.",
        )

    try:
        resp = requests.get(
            YOUTUBE_API_URL,
            params={
                "part": "snippet,statistics,contentDetails",
                "id": video_id,
                "key": api_key,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise ProcessingError(ErrorType.NETWORK_ERROR, f"YouTube API request failed: {e}") from e

    try:
        data = resp.json()
    except ValueError:
        data = {}
    if resp.status_code != 200:
        message = (data.get("error") or {}).get("message") or f"HTTP {resp.status_code}"
        logger.warning("YouTube API error for %s: %s", video_id, message)
        raise ProcessingError(classify_error(message), message)

    items = data.get("items") or []
    if not items:
        raise ProcessingError(ErrorType.VIDEO_NOT_FOUND)

    video = items[0]
    snippet = video.get("snippet") or {}
    statistics = video.get("statistics") or {}
    content_details = video.get("contentDetails") or {}

    if snippet.get("liveBroadcastContent") == "live":
        raise ProcessingError(ErrorType.LIVE_STREAM)

    return VideoMetadata(
        id=video_id,
        title=snippet.get("title", ""),
        description=snippet.get("description") or "",
        duration=parse_iso_duration(content_details.get("duration", "")),
        thumbnail_url=_pick_thumbnail(snippet.get("thumbnails") or {}),
        channel_name=snippet.get("channelTitle", ""),
        publish_date=_parse_publish_date(snippet.get("publishedAt")),
        view_count=int(statistics.get("viewCount") or 0),
    )


def check_duration_limits(metadata: VideoMetadata, min_seconds: int, max_seconds: int) -> None:
    """Raise ProcessingError when the video is outside the supported duration window."""
    if metadata.duration > max_seconds:
        raise ProcessingError(
            ErrorType.VIDEO_TOO_LONG,
            f"Video is too long ({round(metadata.duration / 60)} minutes). "
            f"Maximum supported duration is {format_duration(max_seconds)}.",
        )
    if metadata.duration < min_seconds:
        raise ProcessingError(
            ErrorType.VIDEO_TOO_SHORT,
            f"Video is too short. Minimum supported duration is {format_duration(min_seconds)}.",
        )
