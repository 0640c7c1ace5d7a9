"""Article generation: analysis + metadata -> Claude draft -> Article."""

import logging
import math
import re

from vid2blog.config import Settings
from vid2blog.models.schemas import (
    Article,
    ArticleMetadata,
    ArticleSection,
    ContentAnalysis,
    GenerationOptions,
    Transcript,
    VideoMetadata,
)
from vid2blog.prompts.article import MAX_TOKENS, build_user_prompt
from vid2blog.prompts.system import SYSTEM_PROMPT
from vid2blog.services.claude_service import call_claude, extract_json

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "introduction", "sections", "conclusion")
WORDS_PER_MINUTE = 200
SEO_TITLE_MAX = 60
META_DESCRIPTION_MAX = 160
MAX_TAGS = 8


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _timestamp(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def build_metadata(
    title: str,
    introduction: str,
    sections: list[ArticleSection],
    conclusion: str,
    video: VideoMetadata,
) -> ArticleMetadata:
    """Compute word count, reading time and SEO fields for a drafted article."""
    parts = [title, introduction]
    for s in sections:
        parts.extend([s.heading, s.content])
        for sub in s.subsections or []:
            parts.extend([sub.heading, sub.content])
    parts.append(conclusion)
    word_count = len(" ".join(parts).split())

    return ArticleMetadata(
        word_count=word_count,
        reading_time=max(1, math.ceil(word_count / WORDS_PER_MINUTE)),
        seo_title=_truncate(title, SEO_TITLE_MAX),
        meta_description=_truncate(introduction, META_DESCRIPTION_MAX),
        source_video=video,
    )


def fallback_tags(analysis: ContentAnalysis, video: VideoMetadata) -> list[str]:
    """Derive tags from topics, key-point categories and the channel name."""
    tags = [t.name.lower() for t in analysis.topics[:5]]
    tags.extend(kp.category.lower() for kp in analysis.key_points)
    if video.channel_name:
        tags.append(re.sub(r"\s+", "-", video.channel_name.strip().lower()))
    tags.extend(["video-summary", "ai-generated"])
    return list(dict.fromkeys(tags))[:MAX_TAGS]


def _parse_section(data: dict) -> ArticleSection:
    subsections = [
        _parse_section(sub) for sub in data.get("subsections") or [] if isinstance(sub, dict)
    ]
    return ArticleSection(
        heading=data.get("heading", ""),
        content=data.get("content", ""),
        subsections=subsections or None,
    )


def parse_article_response(
    text: str,
    video: VideoMetadata,
    analysis: ContentAnalysis,
) -> Article:
    """Turn a model reply into an Article.

    Raises:
        ValueError: If JSON is missing or required fields are empty.
    """
    data = extract_json(text)
    missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
    if missing:
        raise ValueError(f"Missing required fields in AI response: {', '.join(missing)}")

    sections = [_parse_section(s) for s in data["sections"] if isinstance(s, dict)]
    tags = [str(t) for t in data.get("tags") or []][:MAX_TAGS] or fallback_tags(analysis, video)

    return Article(
        title=data["title"],
        introduction=data["introduction"],
        sections=sections,
        conclusion=data["conclusion"],
        metadata=build_metadata(
            data["title"], data["introduction"], sections, data["conclusion"], video,
        ),
        tags=tags,
    )


def generate_article(
    analysis: ContentAnalysis,
    video: VideoMetadata,
    transcript: Transcript,
    options: GenerationOptions,
    settings: Settings,
) -> Article:
    """Draft a blog article with Claude.

    Returns:
        Article with locally computed metadata.

    Raises:
        ValueError: If the model reply cannot be parsed into an article.
    """
    key_points = []
    for kp in analysis.key_points[:10]:
        line = f"{kp.category}: {kp.text}"
        if options.include_timestamps:
            line = f"[{_timestamp(kp.timestamp)}] {line}"
        key_points.append(line)

    user_prompt = build_user_prompt(
        video_title=video.title,
        channel_name=video.channel_name,
        summary=analysis.summary,
        topics=[t.name for t in analysis.topics[:5]],
        key_points=key_points,
        structure=[s.heading for s in analysis.suggested_structure],
        length=options.length,
        tone=options.tone,
        output_format=options.format,
        custom_template=options.custom_template,
    )

    response = call_claude(
        SYSTEM_PROMPT, user_prompt, settings,
        max_tokens=MAX_TOKENS[options.length],
    )
    article = parse_article_response(response.text, video, analysis)

    logger.info(
        "Article for %s: %d sections, %d words (transcript %d words, $%.4f)",
        video.id, len(article.sections), article.metadata.word_count,
        transcript.word_count, response.cost_usd,
    )
    return article
