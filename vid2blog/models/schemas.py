from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for JSON payloads: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VideoMetadata(WireModel):
    """Descriptive fields for a single YouTube video."""

    id: str
    title: str
    description: str = ""
    duration: int = 0  # seconds
    thumbnail_url: str = ""
    channel_name: str = ""
    publish_date: datetime | None = None
    view_count: int = 0


class TranscriptSegment(WireModel):
    text: str
    start_time: float
    duration: float = 0.0
    speaker: str | None = None
    confidence: float = 1.0

    @computed_field(alias="endTime")
    @property
    def end_time(self) -> float:
        return round(self.start_time + self.duration, 3)


class Transcript(WireModel):
    """Ordered caption segments for one video."""

    segments: list[TranscriptSegment] = Field(default_factory=list)
    language: str = "en"
    confidence: float = 1.0
    duration: float | None = None

    @model_validator(mode="after")
    def _fill_duration(self) -> "Transcript":
        if self.duration is None:
            self.duration = self.segments[-1].end_time if self.segments else 0.0
        return self

    @property
    def text(self) -> str:
        return " ".join(s.text.strip() for s in self.segments if s.text.strip())

    @property
    def word_count(self) -> int:
        return len(self.text.split())


class TimeRange(WireModel):
    start: float
    end: float


class Topic(WireModel):
    name: str
    relevance: float = 0.0
    time_ranges: list[TimeRange] = Field(default_factory=list)


class KeyPoint(WireModel):
    text: str
    importance: float = 0.0
    timestamp: float = 0.0
    category: str = "general"


class ArticleSection(WireModel):
    heading: str
    content: str = ""
    subsections: list["ArticleSection"] | None = None


class ContentAnalysis(WireModel):
    """Insights derived from a transcript; input to article generation."""

    topics: list[Topic] = Field(default_factory=list)
    key_points: list[KeyPoint] = Field(default_factory=list)
    summary: str = ""
    suggested_structure: list[ArticleSection] = Field(default_factory=list)
    sentiment: Literal["positive", "neutral", "negative"] = "neutral"


class ArticleMetadata(WireModel):
    word_count: int
    reading_time: int  # minutes
    seo_title: str
    meta_description: str
    source_video: VideoMetadata


class Article(WireModel):
    title: str
    introduction: str
    sections: list[ArticleSection]
    conclusion: str
    metadata: ArticleMetadata
    tags: list[str] = Field(default_factory=list)


class GenerationOptions(WireModel):
    length: Literal["short", "medium", "long"] = "medium"
    tone: Literal["professional", "casual", "technical"] = "professional"
    format: Literal["markdown", "html", "plain"] = "markdown"
    include_timestamps: bool = False
    custom_template: str | None = None


Stage = Literal[
    "validation", "metadata", "transcription", "analysis",
    "generation", "complete", "error",
]


class ProcessingStatus(WireModel):
    """One progress notification. Never persisted."""

    stage: Stage
    progress: int = Field(ge=0, le=100)
    message: str
    estimated_time_remaining: float | None = None  # seconds
