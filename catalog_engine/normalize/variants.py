from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from ..models.column_scheme import ColumnScheme
from ..models.product import ProductGroup, Row
from ..models.variant import VariantItem, VariationAxis, variant_key
from .columns import as_quantity, parse_number, resolve
from .grouping import declared_axes

"""Variant matrix construction.

Two entry points share the same keying (models.variant.variant_key):

- build_from_rows(): import path. Rows of a product group are folded into a
  matrix keyed by option assignment. On key collision stock is summed, the
  lowest positive price wins and the first known SKU is kept.
- regenerate(): admin editing path. The full cartesian product of the axes is
  enumerated (last axis varies fastest) and values of items whose key still
  exists are carried over unchanged.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "VariantAccumulator",
    "build_from_rows",
    "regenerate",
    "cartesian_assignments",
]


class VariantAccumulator:
    """Insertion-ordered VariantKey -> VariantItem map with the merge rules.

    A fresh accumulator is created per build; items are immutable and replaced
    on merge.
    """

    def __init__(self) -> None:
        self._items: dict[str, VariantItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def add(self, options: dict[str, str], *, price: float, stock: int | float, sku: str | None) -> None:
        key = variant_key(options)
        existing = self._items.get(key)
        if existing is None:
            self._items[key] = VariantItem(key=key, options=dict(options), sku=sku, price=price, stock=stock)
            return
        self._items[key] = merge_item(existing, price=price, stock=stock, sku=sku)

    def items(self) -> list[VariantItem]:
        return list(self._items.values())


def merge_item(existing: VariantItem, *, price: float, stock: int | float, sku: str | None) -> VariantItem:
    """Fold one more row into an existing combination."""
    new_price = existing.price or 0
    if price > 0 and (new_price == 0 or price < new_price):
        new_price = price
    return replace(
        existing,
        stock=(existing.stock or 0) + (stock or 0),
        price=new_price,
        sku=existing.sku or sku,
    )


def _row_assignment(row: Row, axes: Sequence[tuple[str, str]]) -> dict[str, str]:
    options: dict[str, str] = {}
    for axis_name, option_column in axes:
        option = resolve(row, option_column)
        if option is not None:
            options[axis_name] = option
    return options


def build_from_rows(
    group: ProductGroup,
    axes: Sequence[VariationAxis],
    scheme: ColumnScheme | None = None,
) -> list[VariantItem]:
    """Deduplicated variant items of a product group, in first-insertion order.

    Only axes declared on the group's first row and present in ``axes`` take
    part in the option assignment. Rows with neither an option value nor a
    variant SKU are skipped. A group without declared axes has no variants.
    """
    scheme = scheme or ColumnScheme()
    wanted = {axis.name for axis in axes}
    columns = [(name, col) for name, col in declared_axes(group, scheme) if name in wanted]
    if not columns:
        return []

    base_price = parse_number(resolve(group.first_row, scheme.price))
    accumulator = VariantAccumulator()
    for row in group.rows:
        options = _row_assignment(row, columns)
        sku = resolve(row, scheme.variant_sku)
        if not options and sku is None:
            continue
        price = parse_number(resolve(row, scheme.price))
        if price is None:
            price = base_price if base_price is not None else 0.0
        stock = as_quantity(parse_number(resolve(row, scheme.stock))) or 0
        accumulator.add(options, price=price, stock=stock, sku=sku)

    logger.debug(
        "built %d variant(s) for %r from %d row(s)", len(accumulator), group.canonical_name, len(group.rows)
    )
    return accumulator.items()


def _unique_options(options: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for option in options:
        if option.strip():
            seen.setdefault(option, None)
    return list(seen)


def cartesian_assignments(axes: Sequence[VariationAxis]) -> list[dict[str, str]]:
    """Every option assignment of the axes, last axis varying fastest.

    An empty axis list yields no assignment at all.
    """
    if not axes:
        return []
    names = [axis.name.strip() for axis in axes]
    option_lists = [_unique_options(axis.options) for axis in axes]
    return [dict(zip(names, combo, strict=True)) for combo in itertools.product(*option_lists)]


def regenerate(axes: Sequence[VariationAxis], existing_items: Iterable[VariantItem] = ()) -> list[VariantItem]:
    """Full variant matrix for ``axes``, reusing values of surviving combinations.

    Returns an empty list while any axis lacks a name or a non-blank option,
    or while two axes share a name, which is the state of the admin form
    before combinations are editable.
    """
    if not axes or not all(axis.is_complete for axis in axes):
        return []
    names = [axis.name.strip() for axis in axes]
    if len(set(names)) != len(names):
        return []

    previous = {variant_key(item.options): item for item in existing_items}
    matrix: list[VariantItem] = []
    for options in cartesian_assignments(axes):
        current = previous.get(variant_key(options))
        if current is not None:
            matrix.append(current)
        else:
            matrix.append(VariantItem.for_options(options, stock=0))
    return matrix
