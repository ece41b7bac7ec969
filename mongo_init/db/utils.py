from datetime import datetime, timezone
from typing import Set

from mongo_init.db.schema import MIGRATIONS


def _get_migrations_collection(db):
    return db[MIGRATIONS]


def has_migration_run(db, name: str) -> bool:
    return _get_migrations_collection(db).find_one({"name": name}) is not None


def record_migration(db, name: str):
    _get_migrations_collection(db).update_one(
        {"name": name},
        {"$setOnInsert": {"name": name, "applied_at": datetime.now(timezone.utc)}},
        upsert=True,
    )


def list_applied_migrations(db) -> Set[str]:
    docs = _get_migrations_collection(db).find({}, {"name": 1})
    return {d["name"] for d in docs}


def ensure_collection(db, name: str) -> bool:
    """Create ``name`` unless it already exists. Returns True when created."""
    if name in set(db.list_collection_names()):
        return False
    db.create_collection(name)
    return True
