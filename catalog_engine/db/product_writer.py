from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any

from psycopg2.extras import Json

from ..models.product import ProductDraft

"""Product creation collaborators for the batch runner.

PostgresProductWriter inserts one draft per call through a psycopg2 cursor,
guarded by a savepoint so that a rejected draft does not poison the
transaction of its siblings. JsonLinesProductWriter appends drafts to a file
and is used when no database is configured.
"""

__all__ = [
    "ProductWriteError",
    "PostgresProductWriter",
    "JsonLinesProductWriter",
]

COLUMNS = (
    "name",
    "description",
    "category",
    "category_id",
    "sku",
    "price",
    "wholesale_price",
    "stock",
    "weight",
    "dimensions",
    "images",
    "status",
    "variation_axes",
    "variant_items",
)

SAVEPOINT = "catalog_import_draft"


class ProductWriteError(Exception):
    pass


def _values(draft: ProductDraft) -> tuple[Any, ...]:
    return (
        draft.name,
        draft.description,
        draft.category,
        draft.category_id,
        draft.sku,
        draft.price,
        draft.wholesale_price,
        draft.stock,
        draft.weight,
        draft.dimensions,
        list(draft.images),
        draft.status,
        Json([a.to_dict() for a in draft.axes]),
        Json([v.to_dict() for v in draft.variant_items]),
    )


class PostgresProductWriter:
    """``create`` collaborator backed by a DB-API cursor (psycopg2).

    The caller owns the connection and commits once the batch is over.
    """

    def __init__(self, cursor: Any, table: str = "products") -> None:
        if not table.replace("_", "").isalnum():
            raise ProductWriteError(f"invalid table name: {table!r}")
        self.cursor = cursor
        self.table = table
        cols_sql = ",".join(f'"{c}"' for c in COLUMNS)
        placeholders = ",".join(["%s"] * len(COLUMNS))
        self.sql = f"INSERT INTO {table} ({cols_sql}) VALUES ({placeholders}) RETURNING id"

    def __call__(self, draft: ProductDraft) -> Any:
        self.cursor.execute(f"SAVEPOINT {SAVEPOINT}")
        try:
            self.cursor.execute(self.sql, _values(draft))
            row = self.cursor.fetchone()
        except Exception as e:
            self.cursor.execute(f"ROLLBACK TO SAVEPOINT {SAVEPOINT}")
            raise ProductWriteError(f"insert failed: {e}") from e
        self.cursor.execute(f"RELEASE SAVEPOINT {SAVEPOINT}")
        if not row:
            raise ProductWriteError("insert returned no id")
        return row[0]


class JsonLinesProductWriter:
    """``create`` collaborator writing one JSON object per draft."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def __call__(self, draft: ProductDraft) -> str:
        product_id = uuid.uuid4().hex
        record = {"id": product_id, **draft.to_payload()}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
        return product_id
