"""Pipeline orchestration: metadata -> transcript -> analysis -> article, with progress."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from pydantic import BaseModel, ValidationError

from vid2blog.config import Settings
from vid2blog.models.schemas import (
    Article,
    ContentAnalysis,
    GenerationOptions,
    ProcessingStatus,
    Transcript,
    VideoMetadata,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProcessingStatus], None]

NO_TRANSCRIPT_ERROR = "No transcript data available for analysis"
MISSING_DATA_ERROR = "Missing required data for article generation"


@dataclass
class StageResult:
    """Outcome of one outbound stage call. duration_ms covers that call only."""

    success: bool
    data: Any = None
    error: str | None = None
    duration_ms: int = 0


@dataclass
class PipelineResult:
    """Everything one run produced; on failure only the artifacts made before it."""

    success: bool = False
    video_metadata: VideoMetadata | None = None
    transcript: Transcript | None = None
    analysis: ContentAnalysis | None = None
    article: Article | None = None
    error: str | None = None
    processing_time_ms: int = 0

    def to_dict(self) -> dict:
        data: dict = {"success": self.success}
        artifacts = {
            "videoMetadata": self.video_metadata,
            "transcript": self.transcript,
            "analysis": self.analysis,
            "article": self.article,
        }
        for key, value in artifacts.items():
            if value is not None:
                data[key] = value.to_wire()
        if self.error is not None:
            data["error"] = self.error
        data["processingTime"] = self.processing_time_ms
        return data


def _elapsed_ms(t0: float) -> int:
    return int((time.monotonic() - t0) * 1000)


def estimate_remaining_time(progress: int, elapsed_seconds: float) -> float:
    """Linear extrapolation of seconds left from progress so far."""
    if progress <= 0:
        return 0.0
    total = elapsed_seconds / progress * 100
    return max(0.0, round(total - elapsed_seconds, 1))


def coerce_options(options: GenerationOptions | dict | None) -> GenerationOptions | None:
    if options is None or isinstance(options, GenerationOptions):
        return options
    return GenerationOptions.model_validate(options)


class ProcessingPipeline:
    """Runs the four stages against the service's own API routes, strictly in order.

    One instance per run: no state is shared between concurrent runs.
    """

    def __init__(
        self,
        base_url: str = "",
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProcessingPipeline":
        return cls(settings.base_url, timeout=settings.stage_timeout_seconds)

    def close(self) -> None:
        self.session.close()

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def process_video(
        self,
        url: str,
        generation_options: GenerationOptions | dict | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        """Process a YouTube video through the complete pipeline.

        Every failure is terminal for the run; the returned result carries the
        artifacts produced before the failing stage.
        """
        t0 = time.monotonic()
        result = PipelineResult()

        def emit(stage: str, progress: int, message: str) -> None:
            if on_progress is None:
                return
            eta = None
            if 0 < progress < 100:
                eta = estimate_remaining_time(progress, time.monotonic() - t0)
            on_progress(ProcessingStatus(
                stage=stage, progress=progress, message=message,
                estimated_time_remaining=eta,
            ))

        def finish(error: str | None = None) -> PipelineResult:
            result.success = error is None
            result.error = error
            result.processing_time_ms = _elapsed_ms(t0)
            logger.info(
                "Pipeline %s: %s (%d ms)%s",
                "OK" if result.success else "FAILED", url,
                result.processing_time_ms, f" - {error}" if error else "",
            )
            return result

        logger.info("Pipeline start: %s", url)
        try:
            options = coerce_options(generation_options)

            emit("validation", 0, "Validating YouTube URL...")
            stage = self.fetch_metadata(url)
            if not stage.success:
                return finish(stage.error)
            result.video_metadata = stage.data
            emit("metadata", 20, "Video metadata extracted successfully")

            emit("transcription", 25, "Extracting video transcript...")
            stage = self.fetch_transcript(url)
            if not stage.success:
                return finish(stage.error)
            result.transcript = stage.data
            emit("transcription", 50, "Transcript extracted successfully")

            emit("analysis", 55, "Analyzing video content...")
            if result.transcript is None or not result.transcript.segments:
                return finish(NO_TRANSCRIPT_ERROR)
            stage = self.analyze_content(result.transcript)
            if not stage.success:
                return finish(stage.error)
            result.analysis = stage.data
            emit("analysis", 75, "Content analysis completed")

            emit("generation", 80, "Generating blog article...")
            if None in (result.analysis, result.video_metadata, result.transcript):
                return finish(MISSING_DATA_ERROR)
            stage = self.generate_article(
                result.analysis, result.video_metadata, result.transcript, options,
            )
            if not stage.success:
                return finish(stage.error)
            result.article = stage.data
            emit("complete", 100, "Article generated successfully!")

            return finish()

        except Exception as e:
            logger.exception("Pipeline crashed for %s", url)
            message = str(e) or "Unknown pipeline error"
            emit("error", 0, f"Pipeline failed: {message}")
            return finish(message)

    # ------------------------------------------------------------------
    # Stage fetchers
    # ------------------------------------------------------------------

    def fetch_metadata(self, url: str) -> StageResult:
        return self._call(
            "metadata", "POST", "api/youtube/metadata",
            payload_key="metadata", model=VideoMetadata,
            default_error="Failed to extract metadata",
            json={"url": url},
        )

    def fetch_transcript(self, url: str) -> StageResult:
        return self._call(
            "transcript", "GET", "api/youtube/transcript",
            payload_key="data", model=Transcript,
            default_error="Failed to extract transcript",
            params={"url": url},
        )

    def analyze_content(self, transcript: Transcript) -> StageResult:
        return self._call(
            "analysis", "POST", "api/content/analyze",
            payload_key="analysis", model=ContentAnalysis,
            default_error="Failed to analyze content",
            json={"transcript": transcript.to_wire()},
        )

    def generate_article(
        self,
        analysis: ContentAnalysis,
        video_metadata: VideoMetadata,
        transcript: Transcript,
        options: GenerationOptions | None = None,
    ) -> StageResult:
        body = {
            "analysis": analysis.to_wire(),
            "videoMetadata": video_metadata.to_wire(),
            "transcript": transcript.to_wire(),
        }
        if options is not None:
            body["options"] = options.to_wire()
        return self._call(
            "generation", "POST", "api/content/generate",
            payload_key="article", model=Article,
            default_error="Failed to generate article",
            json=body,
        )

    def _call(
        self,
        stage_name: str,
        method: str,
        path: str,
        payload_key: str,
        model: type[BaseModel],
        default_error: str,
        **kwargs,
    ) -> StageResult:
        """One outbound JSON call. Transport and remote failures both become a message."""
        t0 = time.monotonic()
        try:
            resp = self.session.request(
                method, urljoin(self.base_url, path), timeout=self.timeout, **kwargs,
            )
            body = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("  Stage %s transport error: %s", stage_name, e)
            return StageResult(
                False, error=str(e) or f"Network error during {stage_name}",
                duration_ms=_elapsed_ms(t0),
            )

        if not resp.ok:
            error = (body.get("error") if isinstance(body, dict) else None) or default_error
            logger.error("  Stage %s failed (HTTP %d): %s", stage_name, resp.status_code, error)
            return StageResult(False, error=error, duration_ms=_elapsed_ms(t0))

        raw = body.get(payload_key) if isinstance(body, dict) else None
        try:
            data = model.model_validate(raw) if raw is not None else None
        except ValidationError as e:
            logger.error("  Stage %s returned malformed %s: %s", stage_name, payload_key, e)
            return StageResult(
                False, error=f"Invalid {payload_key} in {stage_name} response",
                duration_ms=_elapsed_ms(t0),
            )

        duration_ms = _elapsed_ms(t0)
        logger.info("  Stage %s: ok (%d ms)", stage_name, duration_ms)
        return StageResult(True, data=data, duration_ms=duration_ms)
