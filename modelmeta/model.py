# ==============================================
# MetaModel (host base class)
# ==============================================
#
# PURPOSE:
#   Base class for host records that carry metadata. The host
#   keeps its own columns in `attributes` (and loaded relations in
#   `relations`) and owns one MetadataStore for everything else.
#
#   Subclasses provide the host's own persistence:
#     - persist()          → write the host row, assign self.id (abstract)
#     - find(id) (class)   → load a host by id, or None (optional,
#                            needed by EntityRegistry.register_model)
#
#   save() runs persist() and then flushes metadata, in that order,
#   so new hosts have an id before their metadata rows are written.
#
# CLASS ATTRIBUTES:
# -----------------
#   meta_table          → metadata table/collection (default: config META_TABLE)
#   meta_key_name       → foreign key column (default: config META_KEY_NAME)
#   meta_entry_factory  → callable(key, codec) -> MetadataEntry
#
# USAGE:
# ------
#   class User(MetaModel):
#       meta_table = "user_meta"
#
#       def persist(self): ...
#
#   user = User(row_store, codec, name="alice")
#   user.set_meta("theme", "dark")
#   user.save()
#
# ==============================================

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from modelmeta.codec.value_codec import ValueCodec
from modelmeta.config import get_config
from modelmeta.entity import Entity
from modelmeta.persistence.metadata_entry import EntryFactory
from modelmeta.persistence.metadata_store import FlushResult, MetadataStore
from modelmeta.storage.base import RowStore


class MetaModel(Entity, ABC):
    meta_table: Optional[str] = None
    meta_key_name: Optional[str] = None
    meta_entry_factory: Optional[EntryFactory] = None

    def __init__(self, row_store: RowStore, codec: ValueCodec, id: Any = None, **attributes):
        super().__init__(id)
        self.attributes: Dict[str, Any] = dict(attributes)
        self.relations: Dict[str, Any] = {}

        meta_config = get_config().meta
        self.meta = MetadataStore(
            self,
            row_store,
            codec,
            table=self.meta_table or meta_config.table,
            foreign_key=self.meta_key_name or meta_config.key_name,
            # Read through the class so a plain function is not bound to self
            entry_factory=type(self).meta_entry_factory
        )

    # --- host persistence (subclass hooks) ---

    @classmethod
    def find(cls, id: Any) -> Optional["MetaModel"]:
        raise NotImplementedError(f"{cls.__name__} does not implement find()")

    @abstractmethod
    def persist(self) -> None:
        """Write the host row and assign `self.id` when it is new."""

    def save(self) -> FlushResult:
        """Persist the host row, then flush its metadata."""
        self.persist()
        return self.meta.flush()

    # --- attribute resolution ---

    def get_attribute(self, name: str) -> Any:
        """
        Resolve `name` against the host's own attributes, then its
        loaded relations, then its metadata. Unknown names give None.
        """
        if name == "id":
            return self.id
        if name in self.attributes:
            return self.attributes[name]
        if name in self.relations:
            return self.relations[name]
        return self.meta.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = value

    def unset(self, name: str) -> None:
        """Remove `name` from the attributes, relations and metadata."""
        self.attributes.pop(name, None)
        self.relations.pop(name, None)
        self.meta.delete(name)

    # --- metadata shortcuts ---

    def get_meta(self, key: str, raw: bool = False) -> Any:
        return self.meta.get(key, raw=raw)

    def set_meta(self, key: str, value: Any) -> None:
        self.meta.set(key, value)

    def delete_meta(self, key: str) -> None:
        self.meta.delete(key)

    def get_all_meta(self, raw: bool = False) -> Dict[str, Any]:
        return self.meta.get_all(raw=raw)

    def meta_to_dict(self) -> Dict[str, Any]:
        return self.meta.to_dict()

    # --- serialization ---

    def to_dict(self) -> Dict[str, Any]:
        """
        Attributes, relations and metadata in one dict. Metadata has
        the lowest precedence and never hides a column or relation.
        """
        data = self.meta_to_dict()
        data.update(self.attributes)
        for name, related in self.relations.items():
            data[name] = related.to_dict() if hasattr(related, "to_dict") else related
        data["id"] = self.id
        return data
