# ==============================================
# STORAGE: row stores for metadata rows
# ==============================================
#
# Modules:
# --------
# - base.py          → RowStore contract
# - memory_store.py  → In-process dict store
# - mysql_client.py  → MySQL via PyMySQL
# - mongo_client.py  → MongoDB via PyMongo
# - factory.py       → Build the store named by the config
#
# ==============================================

from .base import RowStore
from .memory_store import InMemoryRowStore
from .mysql_client import MySQLRowStore
from .mongo_client import MongoRowStore
from .factory import create_row_store

__all__ = [
    "RowStore",
    "InMemoryRowStore",
    "MySQLRowStore",
    "MongoRowStore",
    "create_row_store"
]
