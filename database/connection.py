from motor.motor_asyncio import AsyncIOMotorClient

from config import settings


def get_client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.MONGODB_URL)


def get_database(client: AsyncIOMotorClient):
    return client[settings.DATABASE_NAME]
