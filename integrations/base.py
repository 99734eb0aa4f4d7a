"""
Interfaces for the bot's external collaborators.
"""

from abc import ABC, abstractmethod


class QuestionSource(ABC):
    """Somewhere newline-delimited question text can be fetched from."""

    @abstractmethod
    async def fetch(self) -> str:
        """
        Fetch the raw question text.

        Raises:
            FetchError: If the source is unreachable or unreadable.
        """


class Notifier(ABC):
    """A channel a question can be delivered to."""

    @abstractmethod
    async def send(self, text: str) -> None:
        """
        Deliver a question.

        Raises:
            NotifyError: If delivery failed.
        """
