import os
import runpy
import sys

from mongo_init.db import utils
from mongo_init.db.verify import verify_bootstrap
from mongo_init.services.config import load_settings
from mongo_init.services.db import get_client
from mongo_init.services.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _sorted_migration_paths(migrations_dir):
    files = [
        f
        for f in os.listdir(migrations_dir)
        if f.endswith(".py") and not f.startswith("__")
    ]
    files.sort()
    return [os.path.join(migrations_dir, f) for f in files]


def run_migrations(db, settings):
    """
    Apply every migration not yet in the ledger, plus every repeatable one.

    A migration module sets ``REPEATABLE = True`` when it declares state that
    must be re-applied on each run. Returns the names executed in this run.
    """
    applied = utils.list_applied_migrations(db)
    executed = []

    for path in _sorted_migration_paths(settings.migrations_dir):
        name = os.path.basename(path)
        module_globals = runpy.run_path(path)
        repeatable = bool(module_globals.get("REPEATABLE", False))
        if name in applied and not repeatable:
            logger.info("skipping_applied_migration", extra={"extra": {"migration": name}})
            continue

        if "run" not in module_globals:
            raise RuntimeError(
                f"Migration file {name} does not define a run(db, settings) function."
            )
        logger.info("applying_migration", extra={"extra": {"migration": name, "repeatable": repeatable}})
        module_globals["run"](db, settings)
        utils.record_migration(db, name)
        executed.append(name)
        logger.info("recorded_migration", extra={"extra": {"migration": name}})

    logger.info("all_migrations_processed", extra={"extra": {"executed": executed}})
    return executed


def bootstrap(settings, client):
    db = client[settings.mongo_db]
    executed = run_migrations(db, settings)

    if settings.verify_after_migrations:
        problems = verify_bootstrap(db, settings)
        if problems:
            raise RuntimeError(f"Bootstrap verification failed: {problems}")

    logger.info("bootstrap_complete", extra={"extra": {"db": settings.mongo_db, "executed": executed}})
    print("MongoDB initialized successfully")
    return executed


def main():
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_dir)

    if settings.skip_migrations:
        logger.info("SKIP_MIGRATIONS is set. Exiting without running migrations.")
        sys.exit(0)

    client = get_client(settings)
    try:
        bootstrap(settings, client)
    except Exception:
        logger.exception("bootstrap_failed", extra={"extra": {"db": settings.mongo_db}})
        raise
    finally:
        client.close()


if __name__ == "__main__":
    main()
