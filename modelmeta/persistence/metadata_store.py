# ==============================================
# MetadataStore
# ==============================================
#
# PURPOSE:
#   Per-host cache of metadata entries and the flush pass that
#   writes them back to a RowStore when the host is saved.
#
# LIFECYCLE:
#   1. First accessor call → load(): fetch every row whose
#      foreign key equals the host id (or start empty when the
#      host has no id yet)
#   2. set() / delete() only touch the in-memory cache
#   3. The host's save() calls flush(): tombstoned rows are
#      deleted, dirty rows inserted or updated. An update whose
#      row is gone is re-inserted (last write wins)
#
# CLASS: MetadataStore
# --------------------
#   Stateful: owned by exactly one host instance.
#
#   Constructor:
#   ------------
#   - __init__(host, row_store, codec, table="metadata",
#              foreign_key="model_id", entry_factory=None)
#
#   Methods:
#   --------
#   READING:
#   - get(key, raw=False) -> value | MetadataEntry | None
#   - get_all(raw=False) -> dict[str, value | MetadataEntry]
#   - has(key) -> bool
#   - keys() -> list[str]
#   - to_dict() -> dict[str, value]
#
#   WRITING:
#   - set(key, value) -> None
#   - delete(key) -> None
#   - flush() -> FlushResult
#
#   UTILITY:
#   - load() / reload() / is_dirty()
#
# ==============================================

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from modelmeta.codec.value_codec import ValueCodec
from modelmeta.entity import Entity
from modelmeta.errors import HostNotPersistedError, MetaError, StorageError
from modelmeta.persistence.metadata_entry import EntryFactory, MetadataCache, MetadataEntry
from modelmeta.storage.base import RowStore


@dataclass
class FlushResult:
    inserted: int = 0
    updated: int = 0
    deleted: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.deleted


def _plain(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    return to_dict() if callable(to_dict) else value


class MetadataStore:
    """
    Lazily loaded, dirty-tracked metadata for a single host.

    Not thread-safe: the owning host instance must not be shared
    across threads without external locking.
    """

    def __init__(
        self,
        host: Entity,
        row_store: RowStore,
        codec: ValueCodec,
        table: str = "metadata",
        foreign_key: str = "model_id",
        entry_factory: Optional[EntryFactory] = None
    ):
        self.host = host
        self.row_store = row_store
        self.codec = codec
        self.table = table
        self.foreign_key = foreign_key
        self.entry_factory: EntryFactory = entry_factory or MetadataEntry
        self._cache = MetadataCache()

    @property
    def loaded(self) -> bool:
        return self._cache.loaded

    def load(self) -> None:
        """Fetch this host's rows once. No-op when already loaded."""
        if self._cache.loaded:
            return

        if not self.host.exists:
            self._cache.fill({})
            return

        try:
            rows = self.row_store.fetch_all(self.table, self.foreign_key, self.host.id)
        except MetaError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to load metadata for {self.host!r} from '{self.table}': {e}"
            ) from e

        entries: Dict[str, MetadataEntry] = {}
        for row in rows:
            entry = self.entry_factory(row["key"], self.codec)
            entries[entry.key] = entry.hydrate(row, self.foreign_key)
        self._cache.fill(entries)

    def reload(self) -> None:
        """Discard unsaved changes and read the host's rows again."""
        self._cache.reset()
        self.load()

    # ------------------------------------------
    # Reading
    # ------------------------------------------

    def get(self, key: str, raw: bool = False) -> Any:
        """
        Return the decoded value for `key`, or the entry itself when
        `raw` is True. Missing and deleted keys return None.
        """
        self.load()

        entry = self._cache.get(key)
        if entry is None or entry.is_deleted():
            return None
        return entry if raw else entry.value

    def get_all(self, raw: bool = False) -> Dict[str, Any]:
        self.load()
        return {
            entry.key: entry if raw else entry.value
            for entry in self._cache.live()
        }

    def has(self, key: str) -> bool:
        self.load()
        entry = self._cache.get(key)
        return entry is not None and not entry.is_deleted()

    def keys(self) -> List[str]:
        self.load()
        return [entry.key for entry in self._cache.live()]

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain key → value mapping, for serialization. Values that know
        how to serialize themselves (referenced entities, models) are
        replaced by their own to_dict().
        """
        return {key: _plain(value) for key, value in self.get_all().items()}

    def is_dirty(self) -> bool:
        """True when flush() would write anything."""
        self.load()
        return any(
            (entry.tombstoned and entry.exists) or (not entry.tombstoned and entry.is_dirty())
            for entry in self._cache
        )

    # ------------------------------------------
    # Writing
    # ------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """
        Set `key` to `value` in memory. The value is encoded right
        away so encoding errors surface here, not at flush time.
        """
        self.load()

        entry = self._cache.get(key)
        if entry is None:
            entry = self.entry_factory(key, self.codec)
            entry.set_value(value)
            self._cache.put(entry)
        else:
            entry.set_value(value)

    def delete(self, key: str) -> None:
        """Mark `key` for deletion on the next flush."""
        self.load()

        entry = self._cache.get(key)
        if entry is not None:
            entry.mark_deleted()

    def flush(self) -> FlushResult:
        """
        Write pending changes to the row store.

        Entries are written one at a time in cache order. If a write
        fails, earlier entries stay persisted and the failing entry
        keeps its flags; a StorageError naming its key is raised.
        """
        self.load()

        if self.is_dirty() and not self.host.exists:
            raise HostNotPersistedError(
                f"Cannot flush metadata for unsaved {self.host.entity_type()}: host has no id"
            )

        result = FlushResult()
        for entry in self._cache:
            try:
                if entry.is_deleted():
                    if entry.exists:
                        self.row_store.delete(self.table, entry.id)
                        result.deleted += 1
                    self._cache.remove(entry.key)
                elif entry.is_dirty():
                    entry.owner_id = self.host.id
                    row = entry.to_row(self.foreign_key)
                    if entry.exists and self.row_store.update(self.table, entry.id, row):
                        entry.mark_persisted()
                        result.updated += 1
                    else:
                        # New key, or its row was deleted by another writer
                        entry.mark_persisted(self.row_store.insert(self.table, self.foreign_key, row))
                        result.inserted += 1
            except Exception as e:
                raise StorageError(
                    f"Failed to flush metadata key '{entry.key}' for {self.host!r}: {e}",
                    key=entry.key
                ) from e

        if result.total:
            print(
                f"Flushed metadata for {self.host!r}: "
                f"{result.inserted} inserted, {result.updated} updated, {result.deleted} deleted"
            )
        return result
