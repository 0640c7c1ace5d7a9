"""JSON API: the four stage routes, the pipeline endpoints and health checks."""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from vid2blog import __version__
from vid2blog.core.analyzer import AnalysisOptions, analyze_content
from vid2blog.core.generator import generate_article
from vid2blog.core.pipeline import ProcessingPipeline
from vid2blog.errors import ERROR_DEFINITIONS, ErrorType, ProcessingError
from vid2blog.models.schemas import (
    ContentAnalysis,
    GenerationOptions,
    Transcript,
    VideoMetadata,
)
from vid2blog.prompts.article import LENGTH_INSTRUCTIONS, TONE_INSTRUCTIONS
from vid2blog.services.claude_service import call_claude
from vid2blog.services.transcript_service import fetch_transcript, list_captions
from vid2blog.services.youtube_service import (
    check_duration_limits,
    extract_video_id,
    fetch_video_metadata,
    validate_youtube_url,
)
from vid2blog.web.stream import SSE_HEADERS

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _settings():
    return current_app.config["settings"]


def _json_body() -> dict | None:
    """Request body as a dict; None when it is not valid JSON."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else None


def _invalid_json():
    return jsonify({"error": "Request body must be a JSON object"}), 400


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@api_bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "message": "vid2blog API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    })


@api_bp.get("/ai/test")
def ai_test():
    try:
        response = call_claude(
            "Reply briefly.",
            'Test message: Please respond with "Connection successful"',
            _settings(),
            max_tokens=20,
        )
    except Exception as e:
        logger.warning("Language model connection test failed: %s", e)
        return jsonify({
            "success": False,
            "connected": False,
            "error": str(e),
            "message": "Failed to test language model connection",
        }), 500

    text = response.text.lower()
    connected = "connection" in text or "successful" in text
    return jsonify({
        "success": True,
        "connected": connected,
        "message": "Language model is working" if connected else "Unexpected language model reply",
    })


# ---------------------------------------------------------------------------
# Stage routes
# ---------------------------------------------------------------------------

@api_bp.post("/youtube/metadata")
def youtube_metadata():
    body = _json_body()
    if body is None:
        return _invalid_json()

    validation = validate_youtube_url(body.get("url"))
    if not validation.is_valid:
        return jsonify({"error": validation.error}), 400

    settings = _settings()
    try:
        metadata = fetch_video_metadata(validation.video_id, settings.youtube_api_key)
        check_duration_limits(
            metadata, settings.min_video_duration, settings.max_video_duration,
        )
    except ProcessingError as e:
        logger.warning("Metadata lookup failed for %s: %s", validation.video_id, e)
        error, status = _metadata_error(e, key_configured=bool(settings.youtube_api_key))
        return jsonify({"error": error}), status

    return jsonify({"success": True, "metadata": metadata.to_wire()})


def _metadata_error(e: ProcessingError, key_configured: bool) -> tuple[str, int]:
    """Message and status for a failed metadata lookup."""
    # private videos look the same as missing ones from the Data API
    if e.error_type in (ErrorType.VIDEO_NOT_FOUND, ErrorType.PRIVATE_VIDEO):
        return ERROR_DEFINITIONS[ErrorType.VIDEO_NOT_FOUND].user_message, 404
    if e.error_type in (ErrorType.LIVE_STREAM, ErrorType.API_QUOTA_EXCEEDED):
        return e.info.user_message, e.http_status
    if e.error_type in (ErrorType.VIDEO_TOO_LONG, ErrorType.VIDEO_TOO_SHORT):
        return str(e), 400
    if e.error_type == ErrorType.API_KEY_INVALID and not key_configured:
        return str(e), 500
    return f"Failed to fetch video information: {e}", 400


@api_bp.get("/youtube/metadata")
def youtube_metadata_docs():
    return jsonify({
        "message": "YouTube Metadata API",
        "usage": 'POST with { "url": "youtube_url" }',
        "example": {"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"},
    })


@api_bp.get("/youtube/transcript")
def youtube_transcript():
    url = request.args.get("url")
    video_id = request.args.get("videoId")
    lang = request.args.get("lang")

    if url:
        video_id = extract_video_id(url)
        if not video_id:
            return jsonify(ProcessingError(ErrorType.INVALID_URL).to_dict()), 400
    elif not video_id:
        error = ProcessingError(
            ErrorType.VALIDATION_ERROR, "Either url or videoId parameter is required",
        )
        return jsonify(error.to_dict()), 400

    languages = [lang] if lang else _settings().transcript_languages
    try:
        transcript = fetch_transcript(video_id, languages)
    except ProcessingError as e:
        logger.warning("Transcript extraction failed for %s: %s", video_id, e)
        return jsonify(e.to_dict()), e.http_status

    return jsonify({"success": True, "data": transcript.to_wire()})


@api_bp.get("/youtube/captions")
def youtube_captions():
    url = request.args.get("url")
    video_id = request.args.get("videoId")

    if url:
        video_id = extract_video_id(url)
        if not video_id:
            return jsonify({"error": "Invalid YouTube URL format"}), 400
    elif not video_id:
        return jsonify({"error": "Either url or videoId parameter is required"}), 400

    try:
        captions = list_captions(video_id)
    except Exception as e:
        logger.warning("Caption listing failed for %s: %s", video_id, e)
        return jsonify({"error": "Failed to check available captions", "details": str(e)}), 500

    return jsonify({
        "success": True,
        "data": {"videoId": video_id, "availableCaptions": captions},
    })


@api_bp.post("/content/analyze")
def content_analyze():
    body = _json_body()
    if body is None:
        return _invalid_json()

    transcript_data = body.get("transcript")
    if not transcript_data:
        return jsonify({"error": "Transcript is required"}), 400
    if not isinstance(transcript_data, dict) or not isinstance(transcript_data.get("segments"), list):
        return jsonify({"error": "Transcript must contain segments array"}), 400

    raw_options = body.get("options") or {}
    if not isinstance(raw_options, dict):
        return jsonify({"error": "Invalid analysis options"}), 400
    try:
        options = AnalysisOptions(
            max_topics=int(raw_options.get("maxTopics", AnalysisOptions.max_topics)),
            max_key_points=int(raw_options.get("maxKeyPoints", AnalysisOptions.max_key_points)),
        )
    except (TypeError, ValueError):
        return jsonify({"error": "Invalid analysis options"}), 400

    try:
        transcript = Transcript.model_validate(transcript_data)
        analysis = analyze_content(transcript, _settings(), options)
    except Exception as e:
        logger.exception("Content analysis failed")
        return jsonify({"error": "Failed to analyze content", "details": str(e)}), 500

    return jsonify({"success": True, "analysis": analysis.to_wire()})


@api_bp.post("/content/generate")
def content_generate():
    t0 = time.monotonic()

    def fail(message: str, status: int):
        return jsonify({
            "success": False,
            "error": message,
            "processingTime": int((time.monotonic() - t0) * 1000),
        }), status

    body = _json_body()
    if body is None:
        return _invalid_json()

    analysis_data = body.get("analysis")
    if not analysis_data:
        return fail("Content analysis is required", 400)
    if not body.get("videoMetadata"):
        return fail("Video metadata is required", 400)
    if not body.get("transcript"):
        return fail("Transcript is required", 400)
    if not isinstance(analysis_data, dict) or not isinstance(analysis_data.get("topics"), list):
        return fail("Invalid analysis: topics array is required", 400)
    if not isinstance(analysis_data.get("keyPoints"), list):
        return fail("Invalid analysis: keyPoints array is required", 400)

    try:
        analysis = ContentAnalysis.model_validate(analysis_data)
        video = VideoMetadata.model_validate(body["videoMetadata"])
        transcript = Transcript.model_validate(body["transcript"])
        options = GenerationOptions.model_validate(body.get("options") or {})
    except ValidationError as e:
        return fail(f"Invalid request: {e.error_count()} validation error(s)", 400)

    try:
        article = generate_article(analysis, video, transcript, options, _settings())
    except Exception as e:
        logger.exception("Article generation failed")
        return fail(str(e) or "Failed to generate article", 500)

    return jsonify({
        "success": True,
        "article": article.to_wire(),
        "processingTime": int((time.monotonic() - t0) * 1000),
    })


@api_bp.get("/content/generate")
def content_generate_options():
    return jsonify({
        "success": True,
        "lengths": list(LENGTH_INSTRUCTIONS),
        "tones": list(TONE_INSTRUCTIONS),
        "formats": ["markdown", "html", "plain"],
    })


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

@api_bp.post("/process")
def process():
    body = _json_body()
    if body is None:
        return _invalid_json()

    url = body.get("url")
    if not url:
        return jsonify({"success": False, "error": "YouTube URL is required"}), 400
    validation = validate_youtube_url(url)
    if not validation.is_valid:
        return jsonify({"success": False, "error": validation.error}), 400

    pipeline = ProcessingPipeline.from_settings(_settings())
    try:
        result = pipeline.process_video(url, body.get("options"))
    finally:
        pipeline.close()

    return jsonify(result.to_dict()), 200 if result.success else 422


def _start_stream():
    body = _json_body()
    if body is None:
        return _invalid_json()

    url = body.get("url")
    if not url:
        return jsonify({"error": "YouTube URL is required"}), 400

    options = body.get("options")
    pipeline = ProcessingPipeline.from_settings(_settings())

    def run(on_progress):
        try:
            return pipeline.process_video(url, options, on_progress=on_progress)
        finally:
            pipeline.close()

    frames = current_app.config["stream_runner"].stream(run)
    return Response(
        frames,
        mimetype="text/event-stream",
        headers=SSE_HEADERS,
    )


@api_bp.route("/process/stream", methods=["GET", "POST", "OPTIONS"])
def process_stream():
    if request.method == "POST":
        return _start_stream()
    if request.method == "OPTIONS":
        return Response(status=204, headers=SSE_HEADERS)
    return _stream_docs()


def _stream_docs():
    return jsonify({
        "message": "Streaming Video Processing Pipeline API",
        "description": (
            "Process YouTube videos with real-time progress updates "
            "using Server-Sent Events"
        ),
        "usage": {
            "method": "POST",
            "contentType": "application/json",
            "body": {"url": "YouTube video URL", "options": "Optional generation options"},
        },
        "response": {
            "type": "text/event-stream",
            "events": [
                {
                    "type": "progress",
                    "description": "Progress updates during processing",
                    "data": {
                        "stage": "Current processing stage",
                        "progress": "Progress percentage (0-100)",
                        "message": "Human-readable status message",
                        "estimatedTimeRemaining": "Estimated seconds remaining (optional)",
                    },
                },
                {
                    "type": "result",
                    "description": "Final processing result",
                    "data": {
                        "success": "Boolean indicating success/failure",
                        "videoMetadata": "Video metadata object",
                        "transcript": "Extracted transcript",
                        "analysis": "Content analysis results",
                        "article": "Generated article",
                        "error": "Error message if failed",
                        "processingTime": "Total processing time in milliseconds",
                    },
                },
                {
                    "type": "error",
                    "description": "Error during processing",
                    "data": {"error": "Error message"},
                },
            ],
        },
    })
