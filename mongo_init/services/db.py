from pymongo.mongo_client import MongoClient

from mongo_init.services.config import load_settings
from mongo_init.services.logger import get_logger

logger = get_logger(__name__)


def get_client(settings=None) -> MongoClient:
    if settings is None:
        settings = load_settings()

    client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.timeout_ms)
    # Fail fast when the server is unreachable or the credentials are rejected
    client.admin.command("ping")
    logger.info("mongodb_connected", extra={"extra": {"db": settings.mongo_db}})
    return client
