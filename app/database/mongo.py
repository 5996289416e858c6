import asyncio
import logging

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from app.config import settings
from app.services.errors import DatabaseUnavailableError

logger = logging.getLogger(__name__)


class MongoConnector:
    """
    Lazily opens one MongoDB client per process and hands out the database.

    Only success is remembered: when connecting fails the error propagates and
    the next call to connect() tries again.
    """

    def __init__(self, uri: str, db_name: str, client_factory=AsyncMongoClient):
        self.uri = uri
        self.db_name = db_name
        self._client_factory = client_factory
        self._client = None
        self._db = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    async def connect(self):
        if self._db is not None:
            return self._db

        async with self._lock:
            # another request may have finished connecting while we waited
            if self._db is not None:
                return self._db

            client = None
            try:
                client = self._client_factory(
                    self.uri,
                    server_api=ServerApi("1", strict=True, deprecation_errors=True),
                )
                await client.admin.command("ping")
            except PyMongoError as e:
                logger.exception("MongoDB connection error: %s", e)
                if client is not None:
                    await client.close()
                raise DatabaseUnavailableError() from e

            self._client = client
            self._db = client[self.db_name]
            logger.info(f"Successfully connected to MongoDB (database: {self.db_name})")
            return self._db

    def collection(self, name: str):
        if self._db is None:
            raise DatabaseUnavailableError()
        return self._db[name]

    async def close(self):
        if self._client is not None:
            await self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._db = None


connector = MongoConnector(settings.MONGO_URI, settings.MONGO_DB)
