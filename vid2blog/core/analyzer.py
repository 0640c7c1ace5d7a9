"""Content analysis: transcript -> topics, key points, summary via Claude."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from vid2blog.config import Settings
from vid2blog.models.schemas import ContentAnalysis, Transcript
from vid2blog.prompts.analysis import build_user_prompt, format_transcript_for_prompt
from vid2blog.prompts.system import SYSTEM_PROMPT
from vid2blog.services.claude_service import call_claude, extract_json

logger = logging.getLogger(__name__)


@dataclass
class AnalysisOptions:
    max_topics: int = 8
    max_key_points: int = 12


def analyze_content(
    transcript: Transcript,
    settings: Settings,
    options: AnalysisOptions | None = None,
) -> ContentAnalysis:
    """Ask the language model for a structured analysis of a transcript.

    Raises:
        ValueError: If the transcript is empty or the reply is not a valid analysis.
    """
    options = options or AnalysisOptions()
    if not transcript.segments:
        raise ValueError("Transcript has no segments to analyze")

    user_prompt = build_user_prompt(
        format_transcript_for_prompt(transcript.segments),
        transcript.language,
        options.max_topics,
        options.max_key_points,
    )
    response = call_claude(SYSTEM_PROMPT, user_prompt, settings)

    try:
        analysis = ContentAnalysis.model_validate(extract_json(response.text))
    except ValidationError as e:
        raise ValueError(f"Invalid analysis in model response: {e.error_count()} error(s)") from e

    analysis.topics = sorted(analysis.topics, key=lambda t: t.relevance, reverse=True)[
        : options.max_topics
    ]
    analysis.key_points = sorted(
        analysis.key_points, key=lambda kp: kp.importance, reverse=True,
    )[: options.max_key_points]

    logger.info(
        "Analysis: %d topics, %d key points, sentiment=%s",
        len(analysis.topics), len(analysis.key_points), analysis.sentiment,
    )
    return analysis
