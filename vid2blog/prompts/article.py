"""Blog article prompt template."""

LENGTH_INSTRUCTIONS = {
    "short": "Write a concise article (300-500 words)",
    "medium": "Write a comprehensive article (600-1000 words)",
    "long": "Write a detailed, in-depth article (1000-1500 words)",
}

TONE_INSTRUCTIONS = {
    "professional": "Use a professional, informative tone suitable for business or educational content",
    "casual": "Use a conversational, friendly tone that feels approachable and easy to read",
    "technical": "Use precise, technical language appropriate for expert audiences",
}

FORMAT_INSTRUCTIONS = {
    "markdown": "Section content may use Markdown (lists, bold, links) but no headings",
    "html": "Section content may use inline HTML (<p>, <ul>, <strong>) but no headings",
    "plain": "Section content is plain text paragraphs without markup",
}

# Output token budget per article length
MAX_TOKENS = {"short": 1500, "medium": 2500, "long": 4000}


def build_user_prompt(
    video_title: str,
    channel_name: str,
    summary: str,
    topics: list[str],
    key_points: list[str],
    structure: list[str],
    length: str,
    tone: str,
    output_format: str,
    custom_template: str | None = None,
) -> str:
    """Build user prompt for article drafting.

    Args:
        video_title: Source video title.
        channel_name: Source channel.
        summary: Summary from content analysis.
        topics: Topic names, most relevant first.
        key_points: Pre-formatted key point lines.
        structure: Suggested section headings.
        length: short | medium | long.
        tone: professional | casual | technical.
        output_format: markdown | html | plain.
        custom_template: Optional extra instructions from the user.

    Returns:
        User prompt string.
    """
    key_points_text = "\n".join(f"- {kp}" for kp in key_points) or "- (none)"
    structure_text = "\n".join(f"- {h}" for h in structure) or "- (choose your own)"
    custom = f"\n### ADDITIONAL INSTRUCTIONS:\n{custom_template}\n" if custom_template else ""

    return f"""\
## TASK: Write a blog article based on a YouTube video

### VIDEO: "{video_title}" by {channel_name or "unknown channel"}

### SUMMARY:
{summary or "(no summary)"}

### MAIN TOPICS: {", ".join(topics) or "(none)"}

### KEY POINTS:
{key_points_text}

### SUGGESTED SECTIONS:
{structure_text}

### STYLE:
{LENGTH_INSTRUCTIONS[length]}. {TONE_INSTRUCTIONS[tone]}. {FORMAT_INSTRUCTIONS[output_format]}.
{custom}
### OUTPUT FORMAT (JSON only):
{{
  "title": "Your article title here",
  "introduction": "Introduction paragraph",
  "sections": [
    {{"heading": "Section 1", "content": "Content for section 1"}},
    {{"heading": "Section 2", "content": "Content for section 2"}}
  ],
  "conclusion": "Conclusion paragraph",
  "tags": ["tag1", "tag2", "tag3"]
}}
"""
