"""
Pydantic models for question data validation and serialization.

This module defines:
- The Question record that is persisted between runs
- The result of reconciling fetched lines against stored questions
"""

from typing import List
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class Question(BaseModel):
    """A single candidate question of the day."""
    id: UUID = Field(default_factory=uuid4, description="Unique question identifier")
    text: str = Field(..., description="Question text, trimmed")
    answered: bool = Field(default=False, description="Whether the question has been posted")

    @field_validator('text')
    @classmethod
    def strip_text(cls, v):
        return v.strip()


# (De)serializes the whole ordered collection in one call
QuestionList = TypeAdapter(List[Question])


class ReconcileResult(BaseModel):
    """Outcome of merging one block of fetched text into the collection."""
    lines_processed: int = Field(default=0)
    added: int = Field(default=0)
    updated: int = Field(default=0)
    unchanged: int = Field(default=0)
    skipped_blank: int = Field(default=0)

    added_ids: List[UUID] = Field(default_factory=list)
    updated_ids: List[UUID] = Field(default_factory=list)
