"""
Declared state of the application database.

Index names are left to the driver so they match the server defaults
(e.g. ``roomId_1_createdAt_-1``).
"""

from pymongo import ASCENDING, DESCENDING, IndexModel

CHAT_MESSAGES = "chat_messages"
AUDIT_LOGS = "audit_logs"
MIGRATIONS = "migrations"

CHAT_MESSAGES_TTL_SECONDS = 30 * 24 * 60 * 60  # 2592000, 30 days
AUDIT_LOGS_TTL_SECONDS = 90 * 24 * 60 * 60  # 7776000, 90 days

APP_USER_ROLE = "readWrite"


def app_user_roles(db_name: str) -> list:
    return [{"role": APP_USER_ROLE, "db": db_name}]


def chat_message_indexes(ttl_seconds: int = CHAT_MESSAGES_TTL_SECONDS) -> list:
    return [
        # per-room history, newest first
        IndexModel([("roomId", ASCENDING), ("createdAt", DESCENDING)]),
        IndexModel([("senderId", ASCENDING)]),
        IndexModel([("createdAt", ASCENDING)], expireAfterSeconds=ttl_seconds),
    ]


def audit_log_indexes(ttl_seconds: int = AUDIT_LOGS_TTL_SECONDS) -> list:
    return [
        IndexModel([("timestamp", DESCENDING)]),
        IndexModel([("userId", ASCENDING), ("timestamp", DESCENDING)]),
        IndexModel([("action", ASCENDING)]),
        IndexModel([("createdAt", ASCENDING)], expireAfterSeconds=ttl_seconds),
    ]


def declared_indexes(settings) -> dict:
    return {
        CHAT_MESSAGES: chat_message_indexes(settings.chat_messages_ttl_seconds),
        AUDIT_LOGS: audit_log_indexes(settings.audit_logs_ttl_seconds),
    }


def key_pattern(model: IndexModel) -> list:
    """Key pattern of an index model as ``[(field, direction), ...]``."""
    return list(model.document["key"].items())
