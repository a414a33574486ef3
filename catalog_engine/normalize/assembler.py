from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..models.column_scheme import ColumnScheme
from ..models.product import ProductDraft, ProductGroup
from ..models.variant import VariantItem, VariationAxis
from .columns import as_quantity, format_number, parse_number, resolve

"""Product draft assembly.

assemble() combines the base fields of a group's first row with its axes and
variant matrix. When variants exist the base price and stock are dropped.

Category is never fatal: an unknown or missing category falls back to the
category name columns and then to the placeholder label.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "CategoryLookup",
    "DraftValidationError",
    "assemble",
    "extract_images",
    "extract_dimensions",
    "summarize_variants",
]

# Given a numeric category id returns its canonical name, or None if not found
CategoryLookup = Callable[[int], str | None]


class DraftValidationError(Exception):
    """A product group cannot become a draft (missing name, price or stock)."""


def extract_dimensions(row: dict, scheme: ColumnScheme) -> str | None:
    """``LxWxH`` when at least one dimension is present, missing ones as 0."""
    length = parse_number(resolve(row, scheme.length))
    width = parse_number(resolve(row, scheme.width))
    height = parse_number(resolve(row, scheme.height))
    if not (length or width or height):
        return None
    return "x".join(format_number(v) for v in (length, width, height))


def extract_images(row: dict, scheme: ColumnScheme) -> tuple[str, ...]:
    """Cover plus numbered image URLs, deduplicated, capped at max_images."""
    images: list[str] = []
    for column in scheme.image_columns:
        url = resolve(row, column)
        if url and url not in images:
            images.append(url)
        if len(images) >= scheme.max_images:
            break
    return tuple(images)


def _category(row: dict, scheme: ColumnScheme, lookup: CategoryLookup | None) -> tuple[int | None, str]:
    raw_id = parse_number(resolve(row, scheme.category_id))
    category_id = int(raw_id) if raw_id is not None and raw_id.is_integer() else None

    label = None
    if category_id is not None and lookup is not None:
        try:
            label = lookup(category_id)
        except Exception as e:
            logger.warning("category lookup failed for id %s: %s", category_id, e)
    if not label:
        for column in scheme.category_names:
            label = resolve(row, column)
            if label:
                break
    label = (label or "").strip() or scheme.category_placeholder
    return category_id, label


def assemble(
    group: ProductGroup,
    axes: Sequence[VariationAxis],
    variant_items: Sequence[VariantItem],
    scheme: ColumnScheme | None = None,
    category_lookup: CategoryLookup | None = None,
) -> ProductDraft:
    """Build the ProductDraft of a group.

    Raises:
        DraftValidationError: no name, or no price/stock on a product
            without variants.
    """
    scheme = scheme or ColumnScheme()
    row = group.first_row

    name = resolve(row, scheme.name)
    if not name:
        raise DraftValidationError(f"Product without name on row {group.first_row_number}")

    category_id, category = _category(row, scheme, category_lookup)
    price = parse_number(resolve(row, scheme.price))
    stock = as_quantity(parse_number(resolve(row, scheme.stock)))

    items = tuple(variant_items)
    if items:
        price = None
        stock = None
        for item in items:
            if item.price is not None and item.price < 0:
                raise DraftValidationError(f'Product "{name}" has a negative price for {item.key}')
            if item.stock < 0:
                raise DraftValidationError(f'Product "{name}" has a negative stock for {item.key}')
    else:
        if price is None:
            raise DraftValidationError(f'Product "{name}" without price')
        if stock is None:
            raise DraftValidationError(f'Product "{name}" without stock')
        if price < 0:
            raise DraftValidationError(f'Product "{name}" has a negative price')
        if stock < 0:
            raise DraftValidationError(f'Product "{name}" has a negative stock')

    return ProductDraft(
        name=name,
        description=resolve(row, scheme.description) or "",
        category=category,
        category_id=category_id,
        sku=resolve(row, scheme.sku),
        price=price,
        wholesale_price=parse_number(resolve(row, scheme.wholesale_price)),
        stock=stock,
        weight=parse_number(resolve(row, scheme.weight)),
        dimensions=extract_dimensions(row, scheme),
        images=extract_images(row, scheme),
        axes=tuple(axes),
        variant_items=items,
        source_row=group.first_row_number,
    )


def summarize_variants(items: Sequence[VariantItem]) -> tuple[float, int | float]:
    """Aggregate base price/stock of a combination-mode product.

    Lowest valid price and sum of valid stocks; negative or missing values are
    ignored.
    """
    prices = [i.price for i in items if i.price is not None and i.price >= 0]
    stocks = [i.stock for i in items if i.stock is not None and i.stock >= 0]
    if not prices:
        raise DraftValidationError("no valid price among the variant combinations")
    if not stocks:
        raise DraftValidationError("no valid stock among the variant combinations")
    return min(prices), sum(stocks)
