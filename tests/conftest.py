from datetime import datetime, timezone

import pytest

from vid2blog.config import Settings
from vid2blog.models.schemas import (
    Article,
    ArticleMetadata,
    ArticleSection,
    ContentAnalysis,
    KeyPoint,
    TimeRange,
    Topic,
    Transcript,
    TranscriptSegment,
    VideoMetadata,
)

VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"


@pytest.fixture
def settings(tmp_path):
    """Settings with fake keys; never talks to real APIs."""
    return Settings(
        anthropic_api_key="sk-ant-test",
        youtube_api_key="yt-test",
        pipeline_base_url="http://localhost:5000",
        outputs_dir=str(tmp_path / "outputs"),
        max_concurrent_runs=2,
    )


@pytest.fixture
def video_metadata():
    return VideoMetadata(
        id=VIDEO_ID,
        title="How Lightning Payments Work",
        description="A walkthrough of payment channels.",
        duration=754,
        thumbnail_url="https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        channel_name="Protocol Explained",
        publish_date=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        view_count=12345,
    )


@pytest.fixture
def transcript():
    return Transcript(
        segments=[
            TranscriptSegment(text="Welcome to the channel.", start_time=0.0, duration=2.5),
            TranscriptSegment(text="Today we open a payment channel.", start_time=2.5, duration=4.0),
            TranscriptSegment(text="Routing finds a path between peers.", start_time=6.5, duration=3.5),
        ],
        language="en",
    )


@pytest.fixture
def analysis():
    return ContentAnalysis(
        topics=[
            Topic(name="Payment Channels", relevance=0.9, time_ranges=[TimeRange(start=2.5, end=6.5)]),
            Topic(name="Routing", relevance=0.7),
        ],
        key_points=[
            KeyPoint(text="Channels lock funds in a shared output", importance=0.9, timestamp=3.0, category="concept"),
            KeyPoint(text="Routing uses onion packets", importance=0.6, timestamp=70.0, category="technical"),
        ],
        summary="An introduction to payment channels and routing.",
        suggested_structure=[
            ArticleSection(heading="Opening a Channel"),
            ArticleSection(heading="Finding a Route"),
        ],
        sentiment="positive",
    )


@pytest.fixture
def article(video_metadata):
    sections = [
        ArticleSection(
            heading="Opening a Channel",
            content="Two peers lock funds together.",
            subsections=[ArticleSection(heading="Funding", content="The funding output is 2-of-2.")],
        ),
        ArticleSection(heading="Finding a Route", content="Payments hop across <peers> & nodes."),
    ]
    return Article(
        title="Lightning Payments, Explained",
        introduction="Payment channels move value off-chain.",
        sections=sections,
        conclusion="Channels and routing make fast payments possible.",
        metadata=ArticleMetadata(
            word_count=42,
            reading_time=1,
            seo_title="Lightning Payments, Explained",
            meta_description="Payment channels move value off-chain.",
            source_video=video_metadata,
        ),
        tags=["lightning", "payments"],
    )


@pytest.fixture
def app(settings):
    from vid2blog.web.app import create_app

    app = create_app(settings)
    app.config["TESTING"] = True
    yield app
    app.config["stream_runner"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()
