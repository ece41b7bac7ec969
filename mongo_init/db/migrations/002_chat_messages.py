"""
Migration 002 - chat_messages collection and indexes.

Messages are read per room in reverse chronological order and per sender,
and expire CHAT_MESSAGES_TTL_SECONDS (30 days by default) after createdAt.
Repeatable, so a changed TTL is applied on the next run.

It must define a function "run(db, settings)" that the migration runner will call.
"""

from mongo_init.db import schema
from mongo_init.db.indexes import ensure_indexes
from mongo_init.db.utils import ensure_collection
from mongo_init.services.logger import get_logger

REPEATABLE = True

logger = get_logger("migrations.002_chat_messages")


def run(db, settings):
    if ensure_collection(db, schema.CHAT_MESSAGES):
        logger.info("collection_created", extra={"extra": {"collection": schema.CHAT_MESSAGES}})

    created = ensure_indexes(
        db[schema.CHAT_MESSAGES],
        schema.chat_message_indexes(settings.chat_messages_ttl_seconds),
    )
    logger.info("migration_002_done", extra={"extra": {"created_indexes": created}})
