"""
Migration 003 - audit_logs collection and indexes.

It must define a function "run(db, settings)" that the migration runner will call.
"""

from mongo_init.db import schema
from mongo_init.db.indexes import ensure_indexes
from mongo_init.db.utils import ensure_collection
from mongo_init.services.logger import get_logger

REPEATABLE = True

logger = get_logger("migrations.003_audit_logs")


def run(db, settings):
    if ensure_collection(db, schema.AUDIT_LOGS):
        logger.info("collection_created", extra={"extra": {"collection": schema.AUDIT_LOGS}})

    # TTL is on createdAt, timestamp only drives the query indexes
    created = ensure_indexes(
        db[schema.AUDIT_LOGS],
        schema.audit_log_indexes(settings.audit_logs_ttl_seconds),
    )
    logger.info("migration_003_done", extra={"extra": {"created_indexes": created}})
