from motor.motor_asyncio import AsyncIOMotorClient
from app.config.setting import settings
import logging

logger = logging.getLogger(__name__)


class MongoDB:
    def __init__(self, uri: str, db_name: str):
        self.uri = uri
        self.client = None
        self.db = None
        self.db_name = db_name

    async def init_db(self):
        self.client = AsyncIOMotorClient(self.uri)
        self.db = self.client[self.db_name]
        # Fail fast if the server is unreachable
        await self.db.command("ping")
        logger.info(f"MongoDB connected, using database '{self.db_name}'")

    def get_db(self):
        if self.db is None:
            raise RuntimeError("MongoDB is not initialized")
        return self.db

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None


mongodb = MongoDB(uri=settings.mongo_uri, db_name=settings.mongo_db_name)
