from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .variant import VariationAxis, VariantItem

"""Product grouping and draft models.

ProductGroup is the set of raw rows describing one logical product; it is
consumed once into a ProductDraft by the assembler.
"""

__all__ = [
    "Row",
    "ProductGroup",
    "ProductDraft",
    "FailedDraft",
]

Row = dict[str, Any]  # column label -> cell value (text)


@dataclass(frozen=True)
class ProductGroup:
    """Rows sharing one trimmed product name, in sheet order."""
    canonical_name: str
    rows: tuple[Row, ...]
    first_row_number: int = -1  # 1-based sheet row of rows[0] (header = 1), -1 if unknown

    @property
    def first_row(self) -> Row:
        return self.rows[0]


@dataclass(frozen=True)
class ProductDraft:
    """Normalized product ready for the creation collaborator.

    When ``variant_items`` is non-empty, ``price`` and ``stock`` are None:
    the variants are the only source of price and stock.
    """
    name: str
    category: str
    description: str = ""
    category_id: int | None = None
    sku: str | None = None
    price: float | None = None
    wholesale_price: float | None = None
    stock: int | float | None = None
    weight: float | None = None
    dimensions: str | None = None
    images: tuple[str, ...] = ()
    status: bool = True
    axes: tuple[VariationAxis, ...] = ()
    variant_items: tuple[VariantItem, ...] = ()
    source_row: int = -1

    @property
    def has_variants(self) -> bool:
        return len(self.variant_items) > 0

    @property
    def reference(self) -> str:
        """Human reference used in import reports (``Row N: <name>``)."""
        return f"Row {self.source_row}: {self.name}"

    def to_payload(self) -> dict[str, Any]:
        """camelCase payload in the shape of the product creation contract."""
        payload: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "status": self.status,
        }
        optional: dict[str, Any] = {
            "categoryId": self.category_id,
            "sku": self.sku,
            "price": self.price,
            "wholesalePrice": self.wholesale_price,
            "stock": self.stock,
            "weight": self.weight,
            "dimensions": self.dimensions,
            "images": list(self.images) or None,
            "variationAxes": [a.to_dict() for a in self.axes] or None,
            "variantItems": [v.to_dict() for v in self.variant_items] or None,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return payload


@dataclass(frozen=True)
class FailedDraft:
    """A group that did not pass assembly; reported without calling create."""
    reference: str
    error: str
    row: int = -1
