"""
Test cases for question models and errors.
"""

from uuid import UUID

import pytest
from pydantic import ValidationError

from questions.errors import (
    FetchError, NotifyError, PersistError, QotdError, ReconcileError, SerializationError
)
from questions.models import Question, QuestionList, ReconcileResult


class TestQuestion:
    """Test cases for the Question model."""

    def test_defaults(self):
        question = Question(text="Cats or dogs?")

        assert isinstance(question.id, UUID)
        assert question.answered is False

    def test_ids_are_unique(self):
        assert Question(text="a").id != Question(text="a").id

    def test_text_is_trimmed(self):
        assert Question(text="  Cats or dogs?\r").text == "Cats or dogs?"

    def test_text_is_required(self):
        with pytest.raises(ValidationError):
            Question()

    def test_json_layout(self):
        question = Question(
            id="0b5c3a0e-8f0e-4d7e-9d55-6c0f3c1c1a11",
            text="Cats or dogs?",
            answered=True
        )

        assert question.model_dump(mode="json") == {
            "id": "0b5c3a0e-8f0e-4d7e-9d55-6c0f3c1c1a11",
            "text": "Cats or dogs?",
            "answered": True,
        }

    def test_question_list_round_trip(self, sample_questions):
        data = QuestionList.dump_python(sample_questions, mode="json")

        assert QuestionList.validate_python(data) == sample_questions


class TestReconcileResult:
    def test_defaults(self):
        result = ReconcileResult()

        assert result.added == result.updated == result.unchanged == 0
        assert result.added_ids == []


class TestErrors:
    """Test cases for the error taxonomy."""

    @pytest.mark.parametrize(
        "error_class",
        [FetchError, ReconcileError, NotifyError, PersistError, SerializationError]
    )
    def test_all_errors_share_a_base(self, error_class):
        assert issubclass(error_class, QotdError)

    def test_serialization_error_is_a_persist_error(self):
        assert issubclass(SerializationError, PersistError)

    def test_original_error_is_kept(self):
        cause = OSError("disk full")
        error = PersistError("Failed to write", original_error=cause)

        assert error.original_error is cause
        assert str(error) == "Failed to write"

    def test_notify_error_status_code(self):
        assert NotifyError("rejected", status_code=404).status_code == 404
        assert NotifyError("timeout").status_code is None
