from __future__ import annotations

from typing import Any

"""Category lookup collaborator: numeric id -> canonical name."""

SAVEPOINT = "catalog_category_lookup"


class PostgresCategoryLookup:
    """Looks category names up once per id; unknown ids map to None.

    Each query runs inside a savepoint so a failed lookup does not abort the
    surrounding import transaction.
    """

    def __init__(self, cursor: Any, table: str = "categories") -> None:
        if not table.replace("_", "").isalnum():
            raise ValueError(f"invalid table name: {table!r}")
        self.cursor = cursor
        self.sql = f"SELECT name FROM {table} WHERE id = %s"
        self._cache: dict[int, str | None] = {}

    def __call__(self, category_id: int) -> str | None:
        if category_id not in self._cache:
            self.cursor.execute(f"SAVEPOINT {SAVEPOINT}")
            try:
                self.cursor.execute(self.sql, (category_id,))
                row = self.cursor.fetchone()
            except Exception:
                self.cursor.execute(f"ROLLBACK TO SAVEPOINT {SAVEPOINT}")
                raise
            self.cursor.execute(f"RELEASE SAVEPOINT {SAVEPOINT}")
            self._cache[category_id] = row[0] if row else None
        return self._cache[category_id]
