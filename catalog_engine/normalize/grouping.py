from __future__ import annotations

from collections.abc import Sequence

from ..models.column_scheme import ColumnScheme
from ..models.product import ProductGroup, Row
from ..models.variant import VariationAxis
from .columns import resolve

"""Row grouping and variation-axis collection.

group_rows() folds the sheet rows into ProductGroups keyed by the trimmed
product name (case preserved), keeping first-seen order for both groups and
rows.

An axis exists for a product only when the FIRST row of its group names it
(``Nome Variante1`` / ``Nome Variante2``). Later rows filling an option column
for an undeclared axis are ignored. This is a known quirk of the column
scheme and is kept as is.
"""

__all__ = [
    "FIRST_DATA_ROW",
    "group_rows",
    "declared_axes",
    "collect_axes",
]

FIRST_DATA_ROW = 2  # header occupies sheet row 1


def group_rows(
    rows: Sequence[Row],
    scheme: ColumnScheme | None = None,
    row_numbers: Sequence[int] | None = None,
) -> list[ProductGroup]:
    """Group rows by trimmed product name, preserving first appearance order.

    Rows without a product name are skipped silently.
    """
    scheme = scheme or ColumnScheme()
    if row_numbers is None:
        row_numbers = range(FIRST_DATA_ROW, FIRST_DATA_ROW + len(rows))

    grouped: dict[str, list[Row]] = {}
    first_seen: dict[str, int] = {}
    for row, number in zip(rows, row_numbers, strict=True):
        name = resolve(row, scheme.name)
        if name is None:
            continue
        if name not in grouped:
            grouped[name] = []
            first_seen[name] = number
        grouped[name].append(row)

    return [
        ProductGroup(canonical_name=name, rows=tuple(members), first_row_number=first_seen[name])
        for name, members in grouped.items()
    ]


def declared_axes(group: ProductGroup, scheme: ColumnScheme | None = None) -> list[tuple[str, str]]:
    """(axis name, option column) for every axis named on the group's first row."""
    scheme = scheme or ColumnScheme()
    declared: list[tuple[str, str]] = []
    for name_column, option_column in scheme.axis_columns:
        axis_name = resolve(group.first_row, name_column)
        if axis_name is not None:
            declared.append((axis_name, option_column))
    return declared


def collect_axes(group: ProductGroup, scheme: ColumnScheme | None = None) -> list[VariationAxis]:
    """Variation axes of a group with options in order of first appearance.

    Declared axes that end up with no option value at all are not returned.
    """
    axes: list[VariationAxis] = []
    for axis_name, option_column in declared_axes(group, scheme):
        options: dict[str, None] = {}
        for row in group.rows:
            option = resolve(row, option_column)
            if option is not None:
                options.setdefault(option, None)
        if options:
            axes.append(VariationAxis(name=axis_name, options=tuple(options)))
    return axes
