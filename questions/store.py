"""
Persistence of the question collection.

Stores always load and save the whole ordered collection; there is no
incremental persistence. Writes replace the previous state atomically.
"""

import asyncio
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

import structlog
from pydantic import ValidationError

from questions.errors import PersistError, SerializationError
from questions.models import Question, QuestionList

logger = structlog.get_logger(__name__)


class QuestionStore(ABC):
    """Repository for the full question collection."""

    @abstractmethod
    async def load(self) -> List[Question]:
        """
        Load the persisted collection, empty if nothing was saved yet.

        Raises:
            PersistError: If the backing storage could not be read.
            SerializationError: If the stored state is malformed.
        """

    @abstractmethod
    async def save(self, questions: List[Question]) -> None:
        """
        Replace the persisted collection with ``questions``.

        Raises:
            PersistError: If the write failed. The previous state is kept.
        """

    async def close(self) -> None:
        """Release any held resources."""


def serialize_questions(questions: List[Question]) -> List[dict]:
    return QuestionList.dump_python(questions, mode="json")


def deserialize_questions(data) -> List[Question]:
    """Validate raw records into questions, in stored order."""
    try:
        return QuestionList.validate_python(data)
    except ValidationError as e:
        raise SerializationError(f"Invalid question records: {e}", original_error=e) from e


class JsonFileStore(QuestionStore):
    """Keeps the collection as a JSON array in a single file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = logger.bind(component="json_store", path=str(self.path))

    async def load(self) -> List[Question]:
        contents = await asyncio.to_thread(self._read)
        if contents is None:
            self.logger.info("No saved questions, starting fresh")
            return []

        if not contents.strip():
            return []

        try:
            data = json.loads(contents)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Malformed JSON in {self.path}: {e}", original_error=e) from e

        questions = deserialize_questions(data)
        self.logger.info("Restored questions", count=len(questions))
        return questions

    async def save(self, questions: List[Question]) -> None:
        data = serialize_questions(questions)
        await asyncio.to_thread(self._write, data)
        self.logger.info("Saved questions", count=len(questions))

    def _read(self) -> Optional[str]:
        """Read the state file, None when it does not exist."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise SerializationError(f"State file {self.path} is not UTF-8: {e}", original_error=e) from e
        except OSError as e:
            raise PersistError(f"Failed to read {self.path}: {e}", original_error=e) from e

    def _write(self, data: List[dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # Write to temporary file first (atomic write pattern)
            fd, temp_path = tempfile.mkstemp(
                suffix=".json",
                prefix=f".{self.path.name}.",
                dir=self.path.parent
            )
        except OSError as e:
            raise PersistError(f"Failed to prepare {self.path}: {e}", original_error=e) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise PersistError(f"Failed to write {self.path}: {e}", original_error=e) from e


def create_store(config) -> QuestionStore:
    """
    Build the store selected by configuration.

    Args:
        config: BotConfig instance

    Returns:
        A JSON file store or a MongoDB store.
    """
    if config.store_backend == "mongodb":
        from questions.database import MongoQuestionStore

        return MongoQuestionStore(
            connection_url=config.mongodb_url,
            database_name=config.mongodb_database,
            collection_name=config.mongodb_collection
        )
    return JsonFileStore(config.get_state_file_path())
