"""Render a generated Article as Markdown, HTML or plain text."""

import re
from dataclasses import dataclass

from jinja2 import DictLoader, Environment, StrictUndefined

from vid2blog.models.schemas import Article

EXTENSIONS = {"markdown": "md", "html": "html", "plain": "txt"}
MIME_TYPES = {"markdown": "text/markdown", "html": "text/html", "plain": "text/plain"}

_MARKDOWN_SECTIONS = """\
{% for section in article.sections %}
## {{ section.heading }}

{{ section.content }}
{% for sub in section.subsections or [] %}
### {{ sub.heading }}

{{ sub.content }}
{% endfor %}
{% endfor %}"""

_HTML_SECTIONS = """\
{%- for section in article.sections %}
    <h2>{{ section.heading }}</h2>
    <p>{{ section.content }}</p>
    {%- for sub in section.subsections or [] %}
    <h3>{{ sub.heading }}</h3>
    <p>{{ sub.content }}</p>
    {%- endfor %}
{%- endfor %}"""

_HTML_HEAD = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ article.title }}</title>
    <meta name="description" content="{{ article.metadata.meta_description }}">
</head>"""

TEMPLATES = {
    "markdown/default": """\
# {{ article.title }}
{% if include_metadata %}
**Source:** {{ video.title }}
**Channel:** {{ video.channel_name }}
**Word Count:** {{ article.metadata.word_count }}
**Reading Time:** {{ article.metadata.reading_time }} minutes
**Tags:** {{ article.tags | join(", ") }}

---
{% endif %}
## Introduction

{{ article.introduction }}

""" + _MARKDOWN_SECTIONS + """
## Conclusion

{{ article.conclusion }}
""",
    "markdown/blog": """\
# {{ article.title }}

{{ article.introduction }}

""" + _MARKDOWN_SECTIONS + """
## Conclusion

{{ article.conclusion }}
{% if include_metadata %}
---

*This article was generated from the YouTube video \
"[{{ video.title }}](https://youtube.com/watch?v={{ video.id }})" by {{ video.channel_name }}.*

**Tags:** {{ article.tags | join(", ") }}
{% endif %}""",
    "markdown/minimal": """\
# {{ article.title }}

{{ article.introduction }}

{% for section in article.sections %}
## {{ section.heading }}

{{ section.content }}
{% endfor %}
{{ article.conclusion }}
""",
    "html/default": _HTML_HEAD + """
<body>
    <h1>{{ article.title }}</h1>
    {%- if include_metadata %}
    <div class="metadata">
        <strong>Source:</strong> {{ video.title }}<br>
        <strong>Channel:</strong> {{ video.channel_name }}<br>
        <strong>Word Count:</strong> {{ article.metadata.word_count }}<br>
        <strong>Reading Time:</strong> {{ article.metadata.reading_time }} minutes
        <div class="tags">
            {%- for tag in article.tags %}
            <span class="tag">{{ tag }}</span>
            {%- endfor %}
        </div>
    </div>
    {%- endif %}
    <h2>Introduction</h2>
    <p>{{ article.introduction }}</p>
""" + _HTML_SECTIONS + """
    <h2>Conclusion</h2>
    <p>{{ article.conclusion }}</p>
</body>
</html>
""",
    "html/article": _HTML_HEAD + """
<body>
    <article>
    <h1>{{ article.title }}</h1>
    {%- if include_metadata %}
    <div class="metadata">Based on "{{ video.title }}" by {{ video.channel_name }}</div>
    {%- endif %}
    <div class="intro">{{ article.introduction }}</div>
""" + _HTML_SECTIONS + """
    <h2>Conclusion</h2>
    <p>{{ article.conclusion }}</p>
    </article>
</body>
</html>
""",
    "plain/default": """\
{{ article.title | upper }}
{% if include_metadata %}
Source: {{ video.title }} ({{ video.channel_name }})
Reading time: {{ article.metadata.reading_time }} minutes
{% endif %}
{{ article.introduction }}
{% for section in article.sections %}
{{ section.heading | upper }}

{{ section.content }}
{% for sub in section.subsections or [] %}
{{ sub.heading }}

{{ sub.content }}
{% endfor %}
{%- endfor %}
{{ article.conclusion }}
""",
}

_env = Environment(
    loader=DictLoader(TEMPLATES),
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)
# HTML templates escape; Markdown/plain pass text through untouched
_html_env = _env.overlay(autoescape=True)


@dataclass
class ExportResult:
    content: str
    filename: str
    mime_type: str


def slugify(text: str, max_length: int = 80) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "article"


def available_templates(fmt: str) -> list[str]:
    if fmt not in EXTENSIONS:
        raise ValueError(f"Unknown export format: {fmt}")
    prefix = f"{fmt}/"
    return [name[len(prefix):] for name in TEMPLATES if name.startswith(prefix)]


def export_article(
    article: Article,
    fmt: str = "markdown",
    template: str = "default",
    include_metadata: bool = True,
) -> ExportResult:
    """Render an article with one of the built-in templates.

    Raises:
        ValueError: If the format or template is unknown.
    """
    if template not in available_templates(fmt):
        raise ValueError(f"Unknown {fmt} template: {template}")

    env = _html_env if fmt == "html" else _env
    content = env.get_template(f"{fmt}/{template}").render(
        article=article,
        video=article.metadata.source_video,
        include_metadata=include_metadata,
    )
    if fmt != "html":
        # Collapse blank-line runs left by template blocks
        content = re.sub(r"\n{3,}", "\n\n", content)
    return ExportResult(
        content=content,
        filename=f"{slugify(article.title)}.{EXTENSIONS[fmt]}",
        mime_type=MIME_TYPES[fmt],
    )
