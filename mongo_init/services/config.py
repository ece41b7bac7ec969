import os
from dotenv import load_dotenv

from mongo_init.db import schema


def _flag(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes")


def _positive_int(env, name: str, default: int) -> int:
    value = int(env.get(name, default))
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return value


class Settings:
    """Bootstrap settings read from environment variables."""

    def __init__(self, env=None):
        env = os.environ if env is None else env

        self.mongo_uri = env.get("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_db = env.get("MONGO_DB", "server")
        self.timeout_ms = _positive_int(env, "MONGO_TIMEOUT_MS", 5000)

        self.app_user = env.get("MONGO_APP_USER", "server_app")
        self.app_password = env.get("MONGO_APP_PASSWORD", "server_password")

        self.chat_messages_ttl_seconds = _positive_int(
            env, "CHAT_MESSAGES_TTL_SECONDS", schema.CHAT_MESSAGES_TTL_SECONDS
        )
        self.audit_logs_ttl_seconds = _positive_int(
            env, "AUDIT_LOGS_TTL_SECONDS", schema.AUDIT_LOGS_TTL_SECONDS
        )

        self.skip_migrations = _flag(env.get("SKIP_MIGRATIONS", "false"))
        self.migrations_dir = env.get(
            "MIGRATIONS_DIR",
            os.path.join(os.path.dirname(os.path.dirname(__file__)), "db", "migrations"),
        )
        self.verify_after_migrations = _flag(env.get("VERIFY_AFTER_MIGRATIONS", "true"))

        self.log_level = env.get("LOG_LEVEL", "INFO").upper()
        self.log_dir = env.get("LOG_DIR")


def load_settings() -> Settings:
    load_dotenv()
    return Settings()
