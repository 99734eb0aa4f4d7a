"""
Test cases specifically for scheduler models and data structures.
"""

import pytest
from datetime import datetime, time
from uuid import uuid4
from pydantic import ValidationError

from scheduler.models import CycleResult, SchedulerConfig


class TestSchedulerConfig:
    """Test cases for SchedulerConfig model."""

    def test_defaults(self):
        """Test default scheduler configuration."""
        config = SchedulerConfig()

        assert config.post_at == time(12, 0)
        assert config.timezone == "UTC"
        assert config.tick_interval_seconds == 60
        assert config.continue_on_error is False

    def test_post_at_from_string(self):
        config = SchedulerConfig(post_at="08:30:00")
        assert config.post_at == time(8, 30)

    def test_invalid_tick_interval(self):
        """Test validation of tick intervals that could skip the delivery minute."""
        with pytest.raises(ValidationError):
            SchedulerConfig(tick_interval_seconds=0)

        with pytest.raises(ValidationError):
            SchedulerConfig(tick_interval_seconds=61)

    def test_edge_case_ticks(self):
        assert SchedulerConfig(tick_interval_seconds=1).tick_interval_seconds == 1
        assert SchedulerConfig(tick_interval_seconds=60).tick_interval_seconds == 60


class TestCycleResult:
    """Test cases for CycleResult model."""

    def test_defaults(self):
        result = CycleResult(cycle_id="abc123")

        assert isinstance(result.started_at, datetime)
        assert result.questions_loaded == 0
        assert result.delivery_due is False
        assert result.delivered_question_id is None
        assert result.duration_seconds == 0.0

    def test_cycle_id_is_required(self):
        with pytest.raises(ValidationError):
            CycleResult()

    def test_json_dump(self):
        question_id = uuid4()
        result = CycleResult(
            cycle_id="abc123",
            started_at=datetime(2024, 5, 1, 12, 0, 0),
            added=2,
            delivery_due=True,
            delivered_question_id=question_id
        )

        data = result.model_dump(mode="json")

        assert data["cycle_id"] == "abc123"
        assert data["started_at"] == "2024-05-01T12:00:00"
        assert data["delivered_question_id"] == str(question_id)
        assert data["added"] == 2

    def test_started_at_is_timezone_aware(self):
        result = CycleResult(cycle_id="abc123")

        assert result.started_at.tzinfo is not None
