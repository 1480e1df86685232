# ==============================================
# RowStore
# ==============================================
#
# PURPOSE:
#   The row-store contract the metadata cache reads from and
#   writes to. Rows are plain dicts:
#
#     {"id": ..., <foreign_key>: ..., "key": str, "type": str, "value": str | None}
#
#   `id` is assigned by the store on insert. At most one row exists
#   per (<foreign_key>, key); inserting a second one overwrites the
#   first and returns its id (last write wins). update() reports
#   whether the row was still there so callers can re-insert rows
#   another writer deleted.
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with SomeRowStore(...) as store:` usage.
#
# ==============================================

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class RowStore(ABC):
    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    @abstractmethod
    def fetch_all(self, table: str, foreign_key: str, owner_id: Any) -> List[Dict[str, Any]]:
        """Return every row of `table` whose `foreign_key` equals `owner_id`, oldest first."""

    @abstractmethod
    def insert(self, table: str, foreign_key: str, row: Dict[str, Any]) -> Any:
        """Insert `row` and return its id."""

    @abstractmethod
    def update(self, table: str, row_id: Any, row: Dict[str, Any]) -> bool:
        """Overwrite the row with id `row_id`. Returns False when no such row exists."""

    @abstractmethod
    def delete(self, table: str, row_id: Any) -> None:
        """Delete the row with id `row_id`; missing rows are ignored."""

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
