"""
MongoDB connection manager using the Motor async driver.

Services receive the AsyncIOMotorDatabase from `MongoDB.db` and work on
raw collections (`db["progress"]`, `db["lessons"]`, ...).

Example:
    from common.database import MongoDB

    mongo = MongoDB()
    await mongo.connect(
        uri="mongodb://localhost:27017",
        database_name="studyhub",
    )
    progress = mongo.db["progress"]
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


def mask_uri(uri: str) -> str:
    """Drop credentials from a connection string for logging."""
    return uri.split("@")[-1] if "@" in uri else uri


class MongoDB:
    """Owns one Motor client and the database the app works in."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None

    async def connect(
        self,
        uri: str,
        database_name: str,
        ping: bool = True,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        """
        Connect to MongoDB.

        Datetimes come back timezone-aware (UTC), matching what services
        write.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use
            ping: Round-trip to the server to fail fast on a bad URI
            server_selection_timeout_ms: How long a request waits for a
                reachable server before raising

        Raises:
            ConnectionError: The server did not answer the ping
        """
        logger.info(f"Connecting to MongoDB: {mask_uri(uri)} (database: {database_name})")

        self._client = AsyncIOMotorClient(
            uri,
            tz_aware=True,
            serverSelectionTimeoutMS=server_selection_timeout_ms,
        )
        self._database_name = database_name

        if ping and not await self.ping():
            await self.disconnect()
            raise ConnectionError(f"MongoDB at {mask_uri(uri)} did not answer ping")

        logger.info(f"Connected to MongoDB database: {database_name}")

    async def ping(self) -> bool:
        """True if the server answers; used by startup and /health."""
        if not self._client:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {e}")
            return False

    async def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
            self._client.close()
            self._client = None
            self._database_name = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """The Motor database services read and write."""
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]
