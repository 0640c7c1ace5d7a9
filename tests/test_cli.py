import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from vid2blog.cli import cli
from vid2blog.core.pipeline import PipelineResult
from vid2blog.models.schemas import ProcessingStatus

VIDEO_URL = "https://youtu.be/dQw4w9WgXcQ"


@pytest.fixture
def runner(settings):
    with patch("vid2blog.cli.get_settings", return_value=settings):
        yield CliRunner()


class TestProcessCommand:
    @patch("vid2blog.core.pipeline.ProcessingPipeline")
    def test_writes_article(self, mock_cls, runner, article, tmp_path):
        def fake_process(url, options, on_progress=None):
            on_progress(ProcessingStatus(stage="complete", progress=100, message="Article generated successfully!"))
            return PipelineResult(success=True, article=article, processing_time_ms=1500)

        mock_cls.return_value.process_video.side_effect = fake_process
        out = tmp_path / "article.md"
        saved = tmp_path / "result.json"

        result = runner.invoke(cli, [
            "process", VIDEO_URL, "--length", "short",
            "--output", str(out), "--save-result", str(saved),
        ])

        assert result.exit_code == 0, result.output
        assert "[100%] complete" in result.output
        assert out.read_text().startswith("# Lightning Payments, Explained")
        assert json.loads(saved.read_text())["success"] is True
        options = mock_cls.return_value.process_video.call_args.args[1]
        assert options.length == "short"
        mock_cls.return_value.close.assert_called_once()

    @patch("vid2blog.core.pipeline.ProcessingPipeline")
    def test_failure_exits_nonzero(self, mock_cls, runner):
        mock_cls.return_value.process_video.return_value = PipelineResult(
            success=False, error="Video not found", processing_time_ms=10,
        )
        result = runner.invoke(cli, ["process", VIDEO_URL])
        assert result.exit_code == 1
        assert "Video not found" in result.output


class TestExportCommand:
    def test_exports_saved_result(self, runner, article, tmp_path):
        saved = tmp_path / "result.json"
        saved.write_text(json.dumps(PipelineResult(success=True, article=article).to_dict()))
        out = tmp_path / "article.html"

        result = runner.invoke(cli, ["export", str(saved), "--format", "html", "--output", str(out)])

        assert result.exit_code == 0, result.output
        assert "<h1>Lightning Payments, Explained</h1>" in out.read_text()

    def test_prints_to_stdout(self, runner, article, tmp_path):
        saved = tmp_path / "result.json"
        saved.write_text(json.dumps(PipelineResult(success=True, article=article).to_dict()))
        result = runner.invoke(cli, ["export", str(saved), "--format", "plain", "--no-metadata"])
        assert result.exit_code == 0
        assert "LIGHTNING PAYMENTS, EXPLAINED" in result.output
        assert "Reading time" not in result.output

    def test_result_without_article(self, runner, tmp_path):
        saved = tmp_path / "result.json"
        saved.write_text(json.dumps({"success": False, "error": "boom"}))
        result = runner.invoke(cli, ["export", str(saved)])
        assert result.exit_code == 1

    def test_list_templates(self, runner, tmp_path):
        saved = tmp_path / "result.json"
        saved.write_text("{}")
        result = runner.invoke(cli, ["export", str(saved), "--list-templates"])
        assert result.output.split() == ["default", "blog", "minimal"]


class TestTestAiCommand:
    @patch("vid2blog.services.claude_service.call_claude")
    def test_ok(self, mock_claude, runner):
        mock_claude.return_value = MagicMock(text="Connection successful")
        result = runner.invoke(cli, ["test-ai"])
        assert result.exit_code == 0
        assert "[OK]" in result.output

    @patch("vid2blog.services.claude_service.call_claude")
    def test_fail(self, mock_claude, runner):
        mock_claude.side_effect = ValueError("Anthropic API key not configured")
        result = runner.invoke(cli, ["test-ai"])
        assert result.exit_code == 1
