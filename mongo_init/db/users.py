from mongo_init.db.schema import app_user_roles
from mongo_init.services.logger import get_logger

logger = get_logger(__name__)


def find_user(db, username: str):
    """Return the ``usersInfo`` entry for ``username`` in ``db``, or None."""
    users = db.command("usersInfo", username).get("users", [])
    return users[0] if users else None


def ensure_app_user(db, username: str, password: str) -> str:
    """
    Create the application user on ``db`` with a single readWrite grant.

    An existing user is converged instead: its password and roles are reset
    to the declared ones. Returns ``"created"`` or ``"updated"``.
    """
    roles = app_user_roles(db.name)

    if find_user(db, username) is None:
        db.command("createUser", username, pwd=password, roles=roles)
        logger.info("user_created", extra={"extra": {"user": username, "db": db.name}})
        return "created"

    db.command("updateUser", username, pwd=password, roles=roles)
    logger.info("user_updated", extra={"extra": {"user": username, "db": db.name}})
    return "updated"
