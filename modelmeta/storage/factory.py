from typing import Optional

from modelmeta.config import AppConfig, get_config
from modelmeta.errors import ConfigError
from modelmeta.storage.base import RowStore
from modelmeta.storage.memory_store import InMemoryRowStore
from modelmeta.storage.mongo_client import MongoRowStore
from modelmeta.storage.mysql_client import MySQLRowStore

BACKENDS = ("memory", "mysql", "mongodb")


def create_row_store(config: Optional[AppConfig] = None) -> RowStore:
    """
    Build the RowStore selected by `config.meta.backend`.

    The returned store is not connected yet; use it as a context
    manager or call connect() first.
    """
    config = config or get_config()
    backend = config.meta.backend

    if backend == "memory":
        return InMemoryRowStore()

    if backend == "mysql":
        return MySQLRowStore(
            host=config.mysql.host,
            port=config.mysql.port,
            user=config.mysql.user,
            password=config.mysql.password,
            database=config.mysql.database
        )

    if backend == "mongodb":
        return MongoRowStore(
            host=config.mongo.host,
            port=config.mongo.port,
            database=config.mongo.database,
            user=config.mongo.user,
            password=config.mongo.password
        )

    raise ConfigError(f"Unknown META_BACKEND {backend!r}; expected one of {', '.join(BACKENDS)}")
