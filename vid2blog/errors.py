"""Error taxonomy shared by the API routes: user-facing messages, hints, retryability."""

import enum
from dataclasses import dataclass, field


class ErrorType(str, enum.Enum):
    # URL / video
    INVALID_URL = "INVALID_URL"
    VIDEO_NOT_FOUND = "VIDEO_NOT_FOUND"
    PRIVATE_VIDEO = "PRIVATE_VIDEO"
    LIVE_STREAM = "LIVE_STREAM"
    VIDEO_TOO_LONG = "VIDEO_TOO_LONG"
    VIDEO_TOO_SHORT = "VIDEO_TOO_SHORT"

    # Transcript
    NO_TRANSCRIPT = "NO_TRANSCRIPT"
    TRANSCRIPT_DISABLED = "TRANSCRIPT_DISABLED"
    TRANSCRIPT_LANGUAGE_UNAVAILABLE = "TRANSCRIPT_LANGUAGE_UNAVAILABLE"

    # Upstream services
    API_QUOTA_EXCEEDED = "API_QUOTA_EXCEEDED"
    API_KEY_INVALID = "API_KEY_INVALID"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    NETWORK_ERROR = "NETWORK_ERROR"

    # Processing
    PROCESSING_FAILED = "PROCESSING_FAILED"
    CONTENT_ANALYSIS_FAILED = "CONTENT_ANALYSIS_FAILED"
    ARTICLE_GENERATION_FAILED = "ARTICLE_GENERATION_FAILED"

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass(frozen=True)
class ErrorInfo:
    user_message: str
    suggestions: list[str] = field(default_factory=list)
    retryable: bool = False
    http_status: int = 500


ERROR_DEFINITIONS: dict[ErrorType, ErrorInfo] = {
    ErrorType.INVALID_URL: ErrorInfo(
        "Please enter a valid YouTube URL",
        [
            "Make sure the URL starts with https://www.youtube.com/watch?v= or https://youtu.be/",
            "Copy the URL directly from your browser's address bar",
        ],
        http_status=400,
    ),
    ErrorType.VIDEO_NOT_FOUND: ErrorInfo(
        "Video not found. It may be private, deleted, or restricted.",
        ["Check that the URL is correct", "Try a different video URL"],
        http_status=404,
    ),
    ErrorType.PRIVATE_VIDEO: ErrorInfo(
        "This video is private and cannot be processed",
        ["Only public videos can be processed"],
        http_status=403,
    ),
    ErrorType.LIVE_STREAM: ErrorInfo(
        "Live streams are not supported. Please wait until the stream ends.",
        ["Try again once the stream has finished"],
        http_status=400,
    ),
    ErrorType.VIDEO_TOO_LONG: ErrorInfo(
        "This video is too long to process",
        ["Videos must be 3 hours or shorter"],
        http_status=400,
    ),
    ErrorType.VIDEO_TOO_SHORT: ErrorInfo(
        "This video is too short to process",
        ["Videos must be at least 1 minute long"],
        http_status=400,
    ),
    ErrorType.NO_TRANSCRIPT: ErrorInfo(
        "No transcript is available for this video",
        ["Try a video with captions enabled"],
        http_status=404,
    ),
    ErrorType.TRANSCRIPT_DISABLED: ErrorInfo(
        "Captions are disabled for this video",
        ["Try a video with captions enabled"],
        http_status=404,
    ),
    ErrorType.TRANSCRIPT_LANGUAGE_UNAVAILABLE: ErrorInfo(
        "No transcript is available in the requested language",
        ["Try another language code"],
        http_status=400,
    ),
    ErrorType.API_QUOTA_EXCEEDED: ErrorInfo(
        "Service temporarily unavailable due to API limits. Please try again later.",
        ["Wait a few minutes before trying again"],
        retryable=True,
        http_status=429,
    ),
    ErrorType.API_KEY_INVALID: ErrorInfo(
        "The service is not configured correctly",
        ["Check the configured API keys"],
        http_status=500,
    ),
    ErrorType.SERVICE_UNAVAILABLE: ErrorInfo(
        "A required service is temporarily unavailable",
        ["Try again in a few minutes"],
        retryable=True,
        http_status=503,
    ),
    ErrorType.NETWORK_ERROR: ErrorInfo(
        "A network error occurred",
        ["Check your connection and try again"],
        retryable=True,
        http_status=502,
    ),
    ErrorType.PROCESSING_FAILED: ErrorInfo(
        "Processing failed",
        ["Try again", "Try a different video"],
        retryable=True,
    ),
    ErrorType.CONTENT_ANALYSIS_FAILED: ErrorInfo(
        "Failed to analyze content",
        ["Try again"],
        retryable=True,
    ),
    ErrorType.ARTICLE_GENERATION_FAILED: ErrorInfo(
        "Failed to generate article",
        ["Try again", "Try a shorter article length"],
        retryable=True,
    ),
    ErrorType.VALIDATION_ERROR: ErrorInfo(
        "The request is invalid",
        ["Check the request parameters"],
        http_status=400,
    ),
    ErrorType.UNKNOWN_ERROR: ErrorInfo(
        "An unexpected error occurred",
        ["Try again"],
        retryable=True,
    ),
}


class ProcessingError(Exception):
    """An error with a known type, raised by services and translated by routes."""

    def __init__(self, error_type: ErrorType, message: str | None = None):
        self.error_type = error_type
        self.info = ERROR_DEFINITIONS[error_type]
        super().__init__(message or self.info.user_message)

    @property
    def http_status(self) -> int:
        return self.info.http_status

    def to_dict(self) -> dict:
        return {
            "error": str(self),
            "type": self.error_type.value,
            "suggestions": list(self.info.suggestions),
            "retryable": self.info.retryable,
        }


# Ordered: first match wins
_MESSAGE_RULES: list[tuple[tuple[str, ...], ErrorType]] = [
    (("transcript is disabled", "subtitles are disabled"), ErrorType.TRANSCRIPT_DISABLED),
    (("no transcript found", "could not retrieve a transcript"), ErrorType.NO_TRANSCRIPT),
    (("private video", "video unavailable"), ErrorType.PRIVATE_VIDEO),
    (("not found", "deleted"), ErrorType.VIDEO_NOT_FOUND),
    (("live",), ErrorType.LIVE_STREAM),
    (("quota", "rate limit", "too many requests"), ErrorType.API_QUOTA_EXCEEDED),
    (("api key",), ErrorType.API_KEY_INVALID),
    (("connection", "network"), ErrorType.NETWORK_ERROR),
]


def classify_error(message: str) -> ErrorType:
    """Map a raw upstream error message to an ErrorType."""
    lowered = message.lower()
    if "language" in lowered and "unavailable" in lowered:
        return ErrorType.TRANSCRIPT_LANGUAGE_UNAVAILABLE
    for needles, error_type in _MESSAGE_RULES:
        if any(n in lowered for n in needles):
            return error_type
    return ErrorType.PROCESSING_FAILED
