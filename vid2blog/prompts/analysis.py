"""Content analysis prompt template."""

# Transcript characters sent to the model; longer transcripts are truncated
MAX_TRANSCRIPT_CHARS = 60_000


def format_transcript_for_prompt(segments: list, max_chars: int = MAX_TRANSCRIPT_CHARS) -> str:
    """Render segments as '[mm:ss] text' lines, truncated to max_chars."""
    lines = []
    total = 0
    for seg in segments:
        minutes, seconds = divmod(int(seg.start_time), 60)
        line = f"[{minutes:02d}:{seconds:02d}] {seg.text}"
        total += len(line) + 1
        if total > max_chars:
            lines.append("[... transcript truncated ...]")
            break
        lines.append(line)
    return "\n".join(lines)


def build_user_prompt(transcript_text: str, language: str, max_topics: int, max_key_points: int) -> str:
    """Build user prompt for transcript analysis."""
    return f"""\
## TASK: Analyze a video transcript

Language of the transcript: {language}

### TRANSCRIPT (timestamps in [mm:ss]):
{transcript_text}

### OUTPUT FORMAT (JSON only):
{{
  "topics": [
    {{"name": "Topic name", "relevance": 0.9,
      "timeRanges": [{{"start": 0, "end": 120}}]}}
  ],
  "keyPoints": [
    {{"text": "One key insight", "importance": 0.8, "timestamp": 45,
      "category": "insight"}}
  ],
  "summary": "Three to five sentence summary of the whole video",
  "suggestedStructure": [
    {{"heading": "Section heading", "content": "What this section should cover"}}
  ],
  "sentiment": "positive | neutral | negative"
}}

### REMINDERS:
- At most {max_topics} topics and {max_key_points} key points, most important first
- relevance and importance are numbers between 0 and 1
- timestamps and time ranges are in seconds from the start of the video
- category is one short lowercase word (e.g. insight, definition, example, tip, statistic)
"""
