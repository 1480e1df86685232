# ==============================================
# modelmeta
# ==============================================
#
# Attach arbitrary typed key/value metadata to host records,
# stored in a separate key/value table and flushed on save.
#
# Package Structure:
#
# modelmeta/
# ├── codec/        # Typed value <-> (type tag, raw text)
# ├── persistence/  # Per-host cache, dirty tracking, flush
# ├── storage/      # Row stores: memory, MySQL, MongoDB
# ├── entity.py     # Referenceable entity base
# ├── registry.py   # Resolve "<type>#<id>" references
# ├── model.py      # MetaModel host base class
# ├── config.py     # Configuration management
# └── errors.py     # Exception hierarchy
#
# ==============================================

from .errors import (
    MetaError,
    ConfigError,
    HostNotPersistedError,
    StorageError,
    EntryError,
    NotFoundError,
    DecodeError,
    EncodeError,
    InvalidReferenceError,
)
from .entity import Entity
from .registry import EntityRegistry
from .codec import ValueCodec, ValueType
from .persistence import MetadataEntry, MetadataStore, FlushResult
from .storage import RowStore, InMemoryRowStore, create_row_store
from .model import MetaModel

__version__ = "0.1.0"

__all__ = [
    "MetaError",
    "ConfigError",
    "HostNotPersistedError",
    "StorageError",
    "EntryError",
    "NotFoundError",
    "DecodeError",
    "EncodeError",
    "InvalidReferenceError",
    "Entity",
    "EntityRegistry",
    "ValueCodec",
    "ValueType",
    "MetadataEntry",
    "MetadataStore",
    "FlushResult",
    "RowStore",
    "InMemoryRowStore",
    "create_row_store",
    "MetaModel",
]
