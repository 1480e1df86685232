# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - registry      → EntityRegistry with "User" registered
# - codec         → ValueCodec bound to the registry
# - row_store     → Fresh InMemoryRowStore
# - users         → UserDirectory: host-side persistence for User
# - host          → An unsaved bare Entity
# - metadata_store → MetadataStore for a saved Entity (id=1)
#
# ==============================================

from itertools import count

import pytest

from modelmeta.codec.value_codec import ValueCodec
from modelmeta.config import reset_config
from modelmeta.entity import Entity
from modelmeta.model import MetaModel
from modelmeta.persistence.metadata_store import MetadataStore
from modelmeta.registry import EntityRegistry
from modelmeta.storage.memory_store import InMemoryRowStore


class UserDirectory:
    """Stand-in for the host table: owns User rows and hands out ids."""

    def __init__(self, row_store, codec):
        self.row_store = row_store
        self.codec = codec
        self.rows = {}
        self._ids = count(7)

    def new(self, **attributes) -> "User":
        return User(self, **attributes)

    def find(self, user_id):
        row = self.rows.get(user_id)
        if row is None:
            return None
        return User(self, id=user_id, **row)

    def write(self, user: "User") -> None:
        if user.id is None:
            user.id = next(self._ids)
        self.rows[user.id] = dict(user.attributes)

    def remove(self, user_id) -> None:
        self.rows.pop(user_id, None)


class User(MetaModel):
    meta_table = "user_meta"

    def __init__(self, directory, id=None, **attributes):
        self.directory = directory
        super().__init__(directory.row_store, directory.codec, id=id, **attributes)

    def persist(self) -> None:
        self.directory.write(self)


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Every test sees default configuration."""
    for name in ("META_BACKEND", "META_TABLE", "META_KEY_NAME"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def registry():
    return EntityRegistry()


@pytest.fixture
def codec(registry):
    return ValueCodec(registry)


@pytest.fixture
def row_store():
    return InMemoryRowStore()


@pytest.fixture
def users(row_store, codec, registry):
    directory = UserDirectory(row_store, codec)
    registry.register("User", directory.find)
    return directory


@pytest.fixture
def host():
    return Entity()


@pytest.fixture
def metadata_store(row_store, codec):
    return MetadataStore(Entity(id=1), row_store, codec)
