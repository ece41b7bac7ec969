"""
In-memory doubles for the parts of a MongoDB deployment the bootstrap touches.

mongomock does not implement the user management commands or collMod, so the
bootstrap steps are exercised against these instead.
"""

import logging

import pytest
from pymongo.errors import CollectionInvalid, OperationFailure


class FakeCollection:
    def __init__(self, database, name):
        self.database = database
        self.name = name
        self.exists = False
        self.docs = []
        self._indexes = {"_id_": {"key": [("_id", 1)], "v": 2}}

    def index_information(self):
        return {name: dict(info) for name, info in self._indexes.items()}

    def create_indexes(self, models):
        self.exists = True
        names = []
        for model in models:
            doc = dict(model.document)
            name = doc.pop("name")
            keys = list(doc.pop("key").items())
            self._indexes[name] = {"key": keys, "v": 2, **doc}
            names.append(name)
        return names

    def drop_index(self, name):
        if name not in self._indexes:
            raise OperationFailure(f"index not found with name [{name}]", code=27)
        del self._indexes[name]

    def find(self, filter=None, projection=None):
        filter = filter or {}
        return [d for d in self.docs if all(d.get(k) == v for k, v in filter.items())]

    def find_one(self, filter=None):
        found = self.find(filter)
        return found[0] if found else None

    def update_one(self, filter, update, upsert=False):
        if self.find_one(filter) is None and upsert:
            self.exists = True
            self.docs.append({**filter, **update.get("$setOnInsert", {})})


class FakeDatabase:
    def __init__(self, name="server"):
        self.name = name
        self.collections = {}
        self.users = {}
        self.passwords = {}
        self.commands = []

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    def list_collection_names(self):
        return [name for name, coll in self.collections.items() if coll.exists]

    def create_collection(self, name):
        coll = self[name]
        if coll.exists:
            raise CollectionInvalid(f"collection {name} already exists")
        coll.exists = True
        return coll

    def command(self, name, value, **kwargs):
        self.commands.append(name)

        if name == "usersInfo":
            user = self.users.get(value)
            return {"users": [user] if user else [], "ok": 1.0}

        if name == "createUser":
            if value in self.users:
                raise OperationFailure(f"User \"{value}@{self.name}\" already exists", code=51003)
            self.users[value] = {"user": value, "db": self.name, "roles": list(kwargs["roles"])}
            self.passwords[value] = kwargs["pwd"]
            return {"ok": 1.0}

        if name == "updateUser":
            if value not in self.users:
                raise OperationFailure(f"Could not find user \"{value}\" for db \"{self.name}\"", code=11)
            self.users[value]["roles"] = list(kwargs["roles"])
            self.passwords[value] = kwargs["pwd"]
            return {"ok": 1.0}

        if name == "collMod":
            index = kwargs["index"]
            self.collections[value]._indexes[index["name"]]["expireAfterSeconds"] = index["expireAfterSeconds"]
            return {"ok": 1.0}

        raise OperationFailure(f"no such command: '{name}'", code=59)


class FakeClient:
    def __init__(self, db):
        self.db = db
        self.closed = False

    def __getitem__(self, name):
        assert name == self.db.name
        return self.db

    def close(self):
        self.closed = True


@pytest.fixture()
def fake_db():
    return FakeDatabase("server")


@pytest.fixture()
def bootstrap_env(monkeypatch):
    for name in (
        "MONGO_URI",
        "MONGO_DB",
        "MONGO_APP_USER",
        "MONGO_APP_PASSWORD",
        "CHAT_MESSAGES_TTL_SECONDS",
        "AUDIT_LOGS_TTL_SECONDS",
        "SKIP_MIGRATIONS",
        "MIGRATIONS_DIR",
        "VERIFY_AFTER_MIGRATIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MONGO_DB", "server")
    return monkeypatch


@pytest.fixture()
def fake_client(fake_db):
    return FakeClient(fake_db)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("mongo_init")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger._json_configured = False
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
