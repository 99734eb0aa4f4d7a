"""
Pytest configuration and shared fixtures.
"""

import random
from datetime import datetime, time
from unittest.mock import AsyncMock

import pytest

from integrations.base import Notifier, QuestionSource
from questions.models import Question
from questions.store import QuestionStore


@pytest.fixture
def sample_questions():
    """Three stored questions, the last one already asked."""
    return [
        Question(text="What is your favorite color?"),
        Question(text="Cats or dogs?"),
        Question(text="What did you have for breakfast?", answered=True),
    ]


@pytest.fixture
def sample_source_text():
    """Raw paste body as served by Pastebin."""
    return (
        "What is your favorite color?\r\n"
        "Cats or dogs?\r\n"
        "\r\n"
        "If you could live anywhere, where would it be?\r\n"
    )


@pytest.fixture
def rng():
    """Seeded randomness source."""
    return random.Random(1234)


@pytest.fixture
def post_at():
    return time(12, 0)


@pytest.fixture
def at_post_time():
    """Clock pinned inside the delivery minute."""
    return lambda: datetime(2024, 5, 1, 12, 0, 42)


@pytest.fixture
def before_post_time():
    """Clock pinned outside the delivery minute."""
    return lambda: datetime(2024, 5, 1, 11, 59, 59)


@pytest.fixture
def mock_store():
    """Create a mock question store that starts empty."""
    store = AsyncMock(spec=QuestionStore)
    store.load.return_value = []
    return store


@pytest.fixture
def mock_source(sample_source_text):
    """Create a mock question source."""
    source = AsyncMock(spec=QuestionSource)
    source.fetch.return_value = sample_source_text
    return source


@pytest.fixture
def mock_notifier():
    """Create a mock notifier that always succeeds."""
    return AsyncMock(spec=Notifier)


# Scheduler-specific fixtures
@pytest.fixture
def scheduler_config(post_at):
    """Create scheduler configuration for testing."""
    from scheduler.models import SchedulerConfig
    return SchedulerConfig(
        post_at=post_at,
        timezone="UTC",
        tick_interval_seconds=60,
        continue_on_error=False
    )
