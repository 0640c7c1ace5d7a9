from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    anthropic_api_key: str = ""
    youtube_api_key: str = ""

    # Language model
    claude_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 4096
    claude_temperature: float = 0.3
    max_retries: int = 3  # Anthropic client only; pipeline stages never retry

    # Transcript provider
    transcript_languages: list[str] = ["en"]

    # Video limits (seconds)
    min_video_duration: int = 60
    max_video_duration: int = 3 * 60 * 60

    # Pipeline
    pipeline_base_url: str = "http://127.0.0.1:5000"
    stage_timeout_seconds: float | None = None  # None = wait indefinitely
    max_concurrent_runs: int = 4

    # Web server
    host: str = "127.0.0.1"
    port: int = 5000

    # Logging / output
    log_level: str = "INFO"
    outputs_dir: str = "data/outputs"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def base_url(self) -> str:
        return self.pipeline_base_url.rstrip("/")


def get_settings() -> Settings:
    return Settings()
