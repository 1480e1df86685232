# ==============================================
# InMemoryRowStore
# ==============================================
#
# PURPOSE:
#   Dict-backed RowStore for tests and for the "memory" backend.
#   Rows are copied on the way in and out so callers never hold
#   a live reference into the store.
#
# ==============================================

from itertools import count
from typing import Any, Dict, List

from modelmeta.storage.base import RowStore


class InMemoryRowStore(RowStore):
    def __init__(self):
        self.tables: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self._ids = count(1)

    def _table(self, table: str) -> Dict[int, Dict[str, Any]]:
        return self.tables.setdefault(table, {})

    def fetch_all(self, table: str, foreign_key: str, owner_id: Any) -> List[Dict[str, Any]]:
        rows = self._table(table)
        return [
            dict(rows[row_id])
            for row_id in sorted(rows)
            if rows[row_id].get(foreign_key) == owner_id
        ]

    def insert(self, table: str, foreign_key: str, row: Dict[str, Any]) -> int:
        rows = self._table(table)
        for row_id, existing in rows.items():
            if existing.get(foreign_key) == row.get(foreign_key) and existing.get("key") == row.get("key"):
                existing.update(row)
                return row_id
        row_id = next(self._ids)
        rows[row_id] = dict(row, id=row_id)
        return row_id

    def update(self, table: str, row_id: Any, row: Dict[str, Any]) -> bool:
        rows = self._table(table)
        if row_id not in rows:
            return False
        rows[row_id].update(row)
        rows[row_id]["id"] = row_id
        return True

    def delete(self, table: str, row_id: Any) -> None:
        self._table(table).pop(row_id, None)

    def count(self, table: str) -> int:
        return len(self._table(table))
