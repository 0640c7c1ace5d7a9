from vid2blog.config import Settings


class TestSettings:
    def test_default_values(self):
        settings = Settings(_env_file=None)
        assert settings.claude_model == "claude-sonnet-4-20250514"
        assert settings.max_retries == 3
        assert settings.transcript_languages == ["en"]
        assert settings.min_video_duration == 60
        assert settings.max_video_duration == 10800
        assert settings.pipeline_base_url == "http://127.0.0.1:5000"
        assert settings.stage_timeout_seconds is None
        assert settings.max_concurrent_runs == 4
        assert settings.port == 5000
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", "yt-from-env")
        monkeypatch.setenv("STAGE_TIMEOUT_SECONDS", "30")
        monkeypatch.setenv("TRANSCRIPT_LANGUAGES", '["de", "en"]')
        settings = Settings(_env_file=None)
        assert settings.youtube_api_key == "yt-from-env"
        assert settings.stage_timeout_seconds == 30.0
        assert settings.transcript_languages == ["de", "en"]

    def test_base_url_strips_trailing_slash(self):
        settings = Settings(_env_file=None, pipeline_base_url="http://api.local:8080/")
        assert settings.base_url == "http://api.local:8080"
