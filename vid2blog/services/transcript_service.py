import html
import logging
import re

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from vid2blog.errors import ErrorType, ProcessingError, classify_error
from vid2blog.models.schemas import Transcript, TranscriptSegment

logger = logging.getLogger(__name__)


def clean_caption_text(raw_text: str) -> str:
    """Unescape HTML entities and collapse whitespace inside one caption line."""
    text = html.unescape(html.unescape(raw_text))
    return re.sub(r"\s+", " ", text).strip()


def fetch_transcript(
    video_id: str,
    languages: list[str] | tuple[str, ...] = ("en",),
    api: YouTubeTranscriptApi | None = None,
) -> Transcript:
    """Fetch captions for a video and convert them to a Transcript.

    Args:
        video_id: 11-character YouTube video ID.
        languages: Language codes in order of preference.
        api: Injected client (tests); a fresh one is created otherwise.

    Raises:
        ProcessingError: If the video has no usable captions.
    """
    api = api or YouTubeTranscriptApi()
    try:
        fetched = api.fetch(video_id, languages=list(languages))
    except TranscriptsDisabled as e:
        raise ProcessingError(ErrorType.TRANSCRIPT_DISABLED) from e
    except NoTranscriptFound as e:
        raise ProcessingError(
            ErrorType.NO_TRANSCRIPT,
            f"No transcript found for languages: {', '.join(languages)}",
        ) from e
    except VideoUnavailable as e:
        raise ProcessingError(ErrorType.PRIVATE_VIDEO) from e
    except CouldNotRetrieveTranscript as e:
        cause = (e.cause or str(e)).strip().split("\n", 1)[0]
        raise ProcessingError(classify_error(cause), cause or None) from e

    segments = []
    for snippet in fetched:
        text = clean_caption_text(snippet.text)
        if not text:
            continue
        segments.append(TranscriptSegment(
            text=text,
            start_time=snippet.start,
            duration=snippet.duration,
        ))

    language = getattr(fetched, "language_code", None) or languages[0]
    logger.info(
        "Transcript for %s: %d segments (%s)", video_id, len(segments), language,
    )
    return Transcript(segments=segments, language=language)


def list_captions(video_id: str, api: YouTubeTranscriptApi | None = None) -> list[dict]:
    """Caption tracks published for a video, manual and auto-generated."""
    api = api or YouTubeTranscriptApi()
    return [
        {
            "languageCode": track.language_code,
            "language": track.language,
            "isGenerated": track.is_generated,
        }
        for track in api.list(video_id)
    ]
