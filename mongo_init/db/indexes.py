from mongo_init.db.schema import key_pattern
from mongo_init.services.logger import get_logger

logger = get_logger(__name__)


def find_index(index_info: dict, keys: list):
    """Look up an index by key pattern in ``index_information()`` output."""
    for name, info in index_info.items():
        if list(info.get("key", [])) == keys:
            return name, info
    return None, None


def ensure_indexes(collection, models: list) -> list:
    """
    Create the indexes in ``models`` that ``collection`` does not have yet.

    Indexes are matched by key pattern. A matching TTL index with a different
    expiry is changed in place with collMod. An index whose TTL presence
    differs from the declared one (plain vs TTL) is dropped and recreated.
    Returns the created index names.
    """
    existing = collection.index_information()
    missing = []

    for model in models:
        doc = model.document
        keys = key_pattern(model)
        name, info = find_index(existing, keys)

        if info is None:
            missing.append(model)
            continue

        ttl = doc.get("expireAfterSeconds")
        current_ttl = info.get("expireAfterSeconds")
        if (ttl is None) != (current_ttl is None):
            collection.drop_index(name)
            logger.info(
                "index_dropped_for_ttl_change",
                extra={"extra": {"collection": collection.name, "index": name, "from": current_ttl, "to": ttl}},
            )
            missing.append(model)
        elif ttl is not None and current_ttl != ttl:
            collection.database.command(
                "collMod",
                collection.name,
                index={"name": name, "expireAfterSeconds": ttl},
            )
            logger.info(
                "ttl_index_updated",
                extra={"extra": {
                    "collection": collection.name,
                    "index": name,
                    "from": current_ttl,
                    "to": ttl,
                }},
            )
        else:
            logger.debug("index_exists", extra={"extra": {"collection": collection.name, "index": name}})

    if not missing:
        return []

    created = collection.create_indexes(missing)
    for name in created:
        logger.info("index_created", extra={"extra": {"collection": collection.name, "index": name}})
    return created
