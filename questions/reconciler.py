"""
Reconciliation of fetched question lines against stored questions.

A fetched line that is within a few edits of a stored question is treated
as a correction of that question rather than a new one. Matching is
first-match in collection order, not closest-match.
"""

from typing import List, Optional, Tuple

import structlog

from questions.models import Question, ReconcileResult
from questions.similarity import distance

logger = structlog.get_logger(__name__)

# Distances strictly below this mean "the same question"
SIMILARITY_THRESHOLD = 4


def split_lines(raw_text: str) -> List[str]:
    """Split fetched text into trimmed lines, blank lines included."""
    return [line.strip() for line in raw_text.split("\n")]


def find_match(questions: List[Question], text: str) -> Optional[Tuple[Question, int]]:
    """
    Find the first question whose text is within the similarity threshold.

    Args:
        questions: Collection in scan order
        text: Trimmed candidate line

    Returns:
        Tuple of (question, distance) or None when nothing is close enough.
    """
    for question in questions:
        score = distance(question.text, text)
        if score < SIMILARITY_THRESHOLD:
            return question, score
    return None


def reconcile(questions: List[Question], raw_text: str) -> ReconcileResult:
    """
    Merge a block of fetched text into the question collection in place.

    New lines are appended in source order, near matches overwrite the
    matched question's text, exact matches are left alone. Answered flags
    are never touched and nothing is removed.

    Args:
        questions: Question collection, mutated in place
        raw_text: Newline-delimited text from the question source

    Returns:
        ReconcileResult with per-outcome counts.
    """
    result = ReconcileResult()

    for line in split_lines(raw_text):
        if not line:
            result.skipped_blank += 1
            continue

        result.lines_processed += 1
        match = find_match(questions, line)

        if match is None:
            question = Question(text=line)
            questions.append(question)
            result.added += 1
            result.added_ids.append(question.id)
            logger.info("Adding new question", question_id=str(question.id))
            continue

        question, score = match
        if score == 0:
            result.unchanged += 1
            continue

        logger.info(
            "Updating existing question",
            question_id=str(question.id),
            distance=score
        )
        question.text = line
        result.updated += 1
        result.updated_ids.append(question.id)

    return result
