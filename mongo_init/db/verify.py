import sys

from mongo_init.db import schema
from mongo_init.db.indexes import find_index
from mongo_init.db.users import find_user
from mongo_init.services.config import load_settings
from mongo_init.services.db import get_client
from mongo_init.services.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _describe_ttl(ttl) -> str:
    return "no TTL" if ttl is None else f"TTL {ttl}s"


def _role_set(roles) -> set:
    return {(r["role"], r["db"]) for r in roles}


def verify_user(db, username: str) -> list:
    user = find_user(db, username)
    if user is None:
        return [f"user '{username}' does not exist on '{db.name}'"]

    expected = _role_set(schema.app_user_roles(db.name))
    actual = _role_set(user.get("roles", []))
    if actual != expected:
        return [f"user '{username}' has roles {sorted(actual)}, expected {sorted(expected)}"]
    return []


def verify_indexes(collection, models: list) -> list:
    problems = []
    info = collection.index_information()

    for model in models:
        keys = schema.key_pattern(model)
        name, found = find_index(info, keys)
        if found is None:
            problems.append(f"{collection.name}: missing index {model.document['name']}")
            continue

        expected_ttl = model.document.get("expireAfterSeconds")
        actual_ttl = found.get("expireAfterSeconds")
        if expected_ttl != actual_ttl:
            problems.append(
                f"{collection.name}: index {name} has {_describe_ttl(actual_ttl)}, "
                f"expected {_describe_ttl(expected_ttl)}"
            )
    return problems


def verify_bootstrap(db, settings) -> list:
    """Compare ``db`` with the declared state. Returns a list of problems."""
    problems = verify_user(db, settings.app_user)

    existing = set(db.list_collection_names())
    for coll_name, models in schema.declared_indexes(settings).items():
        if coll_name not in existing:
            problems.append(f"collection '{coll_name}' does not exist")
            continue
        problems.extend(verify_indexes(db[coll_name], models))

    return problems


def main():
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_dir)

    client = get_client(settings)
    try:
        problems = verify_bootstrap(client[settings.mongo_db], settings)
    finally:
        client.close()

    if problems:
        for problem in problems:
            logger.error("verification_problem", extra={"extra": {"problem": problem}})
        sys.exit(1)

    logger.info("verification_passed", extra={"extra": {"db": settings.mongo_db}})


if __name__ == "__main__":
    main()
