# ==============================================
# MetadataEntry / MetadataCache
# ==============================================
#
# PURPOSE:
#   In-memory representation of a host's metadata rows.
#
# CLASS: MetadataEntry
# --------------------
#   One key/value pair. Holds the encoded (type, raw) pair that
#   will be written to storage, plus the lazily decoded value.
#
#   State:
#   ------
#     new         → id is None, dirty
#     clean       → id set, not dirty
#     dirty       → set_value() called since the last persist
#     tombstoned  → mark_deleted() called; removed on next flush
#
#   Storage row shape (to_row / hydrate):
#   -------------------------------------
#     {"id": ..., <foreign_key>: ..., "key": ..., "type": ..., "value": ...}
#
# CLASS: MetadataCache
# --------------------
#   key → MetadataEntry mapping plus the `loaded` flag.
#
# ==============================================

from typing import Any, Callable, Dict, Iterator, Optional

from modelmeta.codec.value_codec import ValueCodec
from modelmeta.codec.value_type import ValueType
from modelmeta.errors import EntryError

_UNDECODED = object()


class MetadataEntry:
    """A single metadata key/value pair attached to a host."""

    def __init__(self, key: str, codec: ValueCodec):
        self.key = key
        self.codec = codec
        self.id: Any = None
        self.owner_id: Any = None
        self.type: Optional[ValueType] = None
        self.raw: Optional[str] = None
        self.dirty = False
        self.tombstoned = False
        self._decoded: Any = _UNDECODED

    # --- value access ---

    @property
    def value(self) -> Any:
        """Decoded value; decoded on first access and cached."""
        if self._decoded is _UNDECODED:
            try:
                self._decoded = self.codec.decode(self.type, self.raw)
            except EntryError as exc:
                raise exc.with_key(self.key)
        return self._decoded

    def set_value(self, value: Any) -> None:
        """Encode `value` now; the decoded form is rebuilt on next read."""
        try:
            encoded = self.codec.encode(value)
        except EntryError as exc:
            raise exc.with_key(self.key)
        self.type = encoded.type
        self.raw = encoded.raw
        self._decoded = _UNDECODED
        self.dirty = True
        self.tombstoned = False

    # --- lifecycle flags ---

    @property
    def exists(self) -> bool:
        return self.id is not None

    def is_dirty(self) -> bool:
        return self.dirty or not self.exists

    def mark_deleted(self, deleted: bool = True) -> None:
        self.tombstoned = deleted

    def is_deleted(self) -> bool:
        return self.tombstoned

    def mark_persisted(self, row_id: Any = None) -> None:
        if row_id is not None:
            self.id = row_id
        self.dirty = False

    # --- storage rows ---

    def to_row(self, foreign_key: str) -> Dict[str, Any]:
        return {
            foreign_key: self.owner_id,
            "key": self.key,
            "type": self.type.value if self.type else None,
            "value": self.raw,
        }

    def hydrate(self, row: Dict[str, Any], foreign_key: str) -> "MetadataEntry":
        """Fill this entry from a stored row and mark it clean."""
        self.id = row.get("id")
        self.owner_id = row.get(foreign_key)
        self.type = ValueType.parse(row.get("type"))
        self.raw = row.get("value")
        self._decoded = _UNDECODED
        self.dirty = False
        self.tombstoned = False
        return self

    def __repr__(self) -> str:
        tag = self.type.value if self.type else None
        flags = []
        if self.is_dirty():
            flags.append("dirty")
        if self.tombstoned:
            flags.append("deleted")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"<MetadataEntry {self.key!r} {tag}={self.raw!r}{suffix}>"


EntryFactory = Callable[[str, ValueCodec], MetadataEntry]


class MetadataCache:
    """Per-host container of metadata entries."""

    def __init__(self):
        self.entries: Dict[str, MetadataEntry] = {}
        self.loaded = False

    def fill(self, entries: Dict[str, MetadataEntry]) -> None:
        self.entries = entries
        self.loaded = True

    def reset(self) -> None:
        self.entries = {}
        self.loaded = False

    def get(self, key: str) -> Optional[MetadataEntry]:
        return self.entries.get(key)

    def put(self, entry: MetadataEntry) -> None:
        self.entries[entry.key] = entry

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)

    def live(self) -> Iterator[MetadataEntry]:
        """Entries that are not tombstoned."""
        return (entry for entry in self.entries.values() if not entry.tombstoned)

    def __iter__(self) -> Iterator[MetadataEntry]:
        return iter(list(self.entries.values()))

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)
