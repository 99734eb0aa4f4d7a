"""
Daily delivery decision and question selection.
"""

import random
from datetime import datetime, time
from typing import List, Optional

import structlog

from integrations.base import Notifier
from questions.errors import NotifyError
from questions.models import Question

logger = structlog.get_logger(__name__)


def is_delivery_due(now: datetime, post_at: time, questions: List[Question]) -> bool:
    """
    Decide whether this tick falls in the daily delivery window.

    The window is the configured minute; seconds are ignored, so a caller
    ticking at least once a minute sees it exactly once a day.
    """
    if not questions:
        return False
    return now.hour == post_at.hour and now.minute == post_at.minute


def unanswered(questions: List[Question]) -> List[Question]:
    return [q for q in questions if not q.answered]


def pick_unanswered(questions: List[Question], rng: random.Random) -> Optional[Question]:
    """
    Pick one unanswered question uniformly at random.

    Args:
        questions: Question collection
        rng: Randomness source, seeded in tests

    Returns:
        The chosen question or None if every question is answered.
    """
    candidates = unanswered(questions)
    if not candidates:
        return None
    return rng.choice(candidates)


async def deliver_question(
    questions: List[Question],
    notifier: Notifier,
    rng: random.Random
) -> Optional[Question]:
    """
    Send one unanswered question and mark it answered.

    The flag is only set after the notifier returns, so a failed delivery
    leaves the question eligible for a later cycle.

    Args:
        questions: Question collection, one entry may be mutated
        notifier: Delivery channel
        rng: Randomness source

    Returns:
        The delivered question, or None when nothing was left to ask.

    Raises:
        NotifyError: If delivery failed.
    """
    question = pick_unanswered(questions, rng)
    if question is None:
        logger.info("No unanswered questions")
        return None

    logger.info("Posting question", question_id=str(question.id), text=question.text)

    try:
        await notifier.send(question.text)
    except NotifyError:
        raise
    except Exception as e:
        raise NotifyError(f"Notifier failed: {e}", original_error=e) from e

    question.answered = True
    return question
