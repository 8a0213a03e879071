"""MongoDB database connection using Motor (async driver)."""
import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING


logger = logging.getLogger(__name__)


class Database:
    """
    MongoDB database connection manager.

    One instance is created per running application (see ``app.main``) and
    handed to request handlers through the ``get_database`` dependency.
    """

    def __init__(self, url: str, db_name: str):
        self.url = url
        self.db_name = db_name
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure indexes exist."""
        self.client = AsyncIOMotorClient(self.url)
        self.db = self.client[self.db_name]
        await self.ensure_indexes()
        logger.info("Connected to MongoDB", extra={"db_name": self.db_name})

    async def ensure_indexes(self) -> None:
        """Create the indexes the services rely on."""
        completed_dates = self.get_collection("completed_dates")
        # One engagement record per goal per calendar day
        await completed_dates.create_index(
            [("goal_id", ASCENDING), ("completed_date", ASCENDING)],
            unique=True,
        )
        await self.get_collection("action_steps").create_index("goal_id")
        await self.get_collection("goals").create_index("user_id")

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        if self.db is None:
            raise RuntimeError("Database not connected")
        return self.db[name]


async def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Dependency to get the database handle owned by the running app."""
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None or database.db is None:
        raise RuntimeError("Database not connected")
    return database.db
