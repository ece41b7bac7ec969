"""
Migration 001 - application user.

Creates the application user on the target database with a single readWrite
role, or resets an existing one to the configured password and role.
Repeatable, so a rotated MONGO_APP_PASSWORD is applied on the next run.

It must define a function "run(db, settings)" that the migration runner will call.
"""

from mongo_init.db.users import ensure_app_user
from mongo_init.services.logger import get_logger

REPEATABLE = True

logger = get_logger("migrations.001_app_user")


def run(db, settings):
    outcome = ensure_app_user(db, settings.app_user, settings.app_password)
    logger.info("migration_001_done", extra={"extra": {"user": settings.app_user, "outcome": outcome}})
