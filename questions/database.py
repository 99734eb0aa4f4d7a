"""
MongoDB storage for the question collection.

The whole collection lives in one document so that every save is a single
atomic document replace.
"""

from typing import List, Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from questions.errors import PersistError, SerializationError
from questions.models import Question
from questions.store import QuestionStore, deserialize_questions, serialize_questions

logger = structlog.get_logger(__name__)

COLLECTION_DOCUMENT_ID = "questions"


class MongoQuestionStore(QuestionStore):
    """
    Async MongoDB store for the question collection.
    Connects lazily on first use.
    """

    def __init__(self, connection_url: str, database_name: str, collection_name: str):
        """
        Initialize MongoDB store.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            collection_name: Name of the collection
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.collection_name = collection_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]
            self.collection = self.database[self.collection_name]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        collection=self.collection_name)

        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise PersistError(f"Failed to connect to MongoDB: {e}", original_error=e) from e

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None
            self.collection = None
            logger.info("Disconnected from MongoDB")

    async def close(self) -> None:
        await self.disconnect()

    async def _ensure_connected(self) -> None:
        if self.collection is None:
            await self.connect()

    async def load(self) -> List[Question]:
        await self._ensure_connected()

        try:
            document = await self.collection.find_one({"_id": COLLECTION_DOCUMENT_ID})
        except PyMongoError as e:
            logger.error("Failed to load questions", error=str(e))
            raise PersistError(f"Failed to load questions: {e}", original_error=e) from e

        if not document:
            logger.info("No saved questions, starting fresh")
            return []

        records = document.get("questions")
        if not isinstance(records, list):
            raise SerializationError("Stored question document has no question list")

        questions = deserialize_questions(records)
        logger.info("Restored questions", count=len(questions))
        return questions

    async def save(self, questions: List[Question]) -> None:
        await self._ensure_connected()

        document = {
            "_id": COLLECTION_DOCUMENT_ID,
            "questions": serialize_questions(questions),
        }

        try:
            await self.collection.replace_one(
                {"_id": COLLECTION_DOCUMENT_ID},
                document,
                upsert=True
            )
        except PyMongoError as e:
            logger.error("Failed to save questions", error=str(e))
            raise PersistError(f"Failed to save questions: {e}", original_error=e) from e

        logger.info("Saved questions", count=len(questions))
