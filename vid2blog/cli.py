import json
import logging
import sys
from pathlib import Path

import click

from vid2blog.config import get_settings


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """vid2blog - YouTube video to blog article pipeline"""
    ctx.ensure_object(dict)
    settings = get_settings()
    ctx.obj["settings"] = settings
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOST setting).")
@click.option("--port", type=int, default=None, help="Port (default: PORT setting).")
@click.option("--debug", is_flag=True, default=False, help="Enable Flask debug mode.")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, debug: bool) -> None:
    """Run the HTTP API (stage routes + streaming pipeline endpoint)."""
    from vid2blog.web.app import create_app

    settings = ctx.obj["settings"]
    app = create_app(settings)
    # threaded: the pipeline calls back into this same server
    app.run(
        host=host or settings.host,
        port=port or settings.port,
        debug=debug,
        threaded=True,
    )


@cli.command()
@click.argument("url")
@click.option("--length", type=click.Choice(["short", "medium", "long"]), default="medium")
@click.option("--tone", type=click.Choice(["professional", "casual", "technical"]), default="professional")
@click.option("--format", "fmt", type=click.Choice(["markdown", "html", "plain"]), default="markdown")
@click.option("--timestamps", is_flag=True, default=False, help="Reference video timestamps.")
@click.option("--base-url", default=None, help="Running vid2blog service (default: PIPELINE_BASE_URL).")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Article file (default: OUTPUTS_DIR/<title>.<ext>).")
@click.option("--save-result", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write the full pipeline result as JSON.")
@click.pass_context
def process(
    ctx: click.Context,
    url: str,
    length: str,
    tone: str,
    fmt: str,
    timestamps: bool,
    base_url: str | None,
    output: Path | None,
    save_result: Path | None,
) -> None:
    """Turn a YouTube video into a blog article."""
    from vid2blog.core.exporter import export_article
    from vid2blog.core.pipeline import ProcessingPipeline
    from vid2blog.models.schemas import GenerationOptions

    settings = ctx.obj["settings"]
    pipeline = ProcessingPipeline(
        base_url or settings.base_url, timeout=settings.stage_timeout_seconds,
    )
    options = GenerationOptions(
        length=length, tone=tone, format=fmt, include_timestamps=timestamps,
    )

    def on_progress(status):
        click.echo(f"  [{status.progress:>3}%] {status.stage:<13} {status.message}")

    try:
        result = pipeline.process_video(url, options, on_progress=on_progress)
    finally:
        pipeline.close()

    if save_result:
        save_result.parent.mkdir(parents=True, exist_ok=True)
        save_result.write_text(
            json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8",
        )
        click.echo(f"Result written: {save_result}")

    if not result.success:
        click.echo(f"-> FAILED: {result.error} ({result.processing_time_ms / 1000:.1f}s)", err=True)
        sys.exit(1)

    exported = export_article(result.article, fmt)
    path = output or Path(settings.outputs_dir) / exported.filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(exported.content, encoding="utf-8")

    meta = result.article.metadata
    click.echo(
        f"-> OK: {result.article.title} ({meta.word_count} words, "
        f"{meta.reading_time} min read, {result.processing_time_ms / 1000:.1f}s)"
    )
    click.echo(f"Article written: {path}")


@cli.command()
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", type=click.Choice(["markdown", "html", "plain"]), default="markdown")
@click.option("--template", default="default", help="Template name (see --list-templates).")
@click.option("--no-metadata", is_flag=True, default=False, help="Omit source video details.")
@click.option("--list-templates", is_flag=True, default=False, help="List templates for --format and exit.")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
def export(
    result_file: Path,
    fmt: str,
    template: str,
    no_metadata: bool,
    list_templates: bool,
    output: Path | None,
) -> None:
    """Export the article from a saved pipeline result JSON."""
    from vid2blog.core.exporter import available_templates, export_article
    from vid2blog.models.schemas import Article

    if list_templates:
        for name in available_templates(fmt):
            click.echo(name)
        return

    data = json.loads(result_file.read_text(encoding="utf-8"))
    if not data.get("article"):
        click.echo(f"[FAIL] No article in {result_file}: {data.get('error', 'unknown error')}", err=True)
        sys.exit(1)

    try:
        exported = export_article(
            Article.model_validate(data["article"]), fmt,
            template=template, include_metadata=not no_metadata,
        )
    except ValueError as e:
        click.echo(f"[FAIL] {e}", err=True)
        sys.exit(1)

    if output is None:
        click.echo(exported.content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(exported.content, encoding="utf-8")
    click.echo(f"[OK] {output}")


@cli.command(name="test-ai")
@click.pass_context
def test_ai(ctx: click.Context) -> None:
    """Check that the language model is reachable."""
    from vid2blog.services.claude_service import call_claude

    settings = ctx.obj["settings"]
    try:
        response = call_claude(
            "Reply briefly.",
            'Test message: Please respond with "Connection successful"',
            settings,
            max_tokens=20,
        )
    except Exception as e:
        click.echo(f"[FAIL] {settings.claude_model}: {e}", err=True)
        sys.exit(1)
    click.echo(f"[OK] {settings.claude_model}: {response.text.strip()}")
