from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

"""Variation domain models: axes, option assignments and variant items.

A VariantKey is the canonical, order-independent string of an option
assignment: the ``name=value`` pairs sorted by axis name and joined with ``|``
(e.g. ``Color=Red|Size=M``). Both the import path and the interactive
regeneration path key their items through variant_key() so there is exactly
one dedup rule.
"""

__all__ = [
    "OptionAssignment",
    "VariationAxis",
    "VariantItem",
    "variant_key",
]

OptionAssignment = Mapping[str, str]

KEY_SEPARATOR = "|"
PAIR_SEPARATOR = "="


def variant_key(options: OptionAssignment) -> str:
    """Canonical key of an option assignment (sorted ``axis=value`` pairs)."""
    pairs = sorted((str(name), str(value)) for name, value in options.items())
    return KEY_SEPARATOR.join(f"{name}{PAIR_SEPARATOR}{value}" for name, value in pairs)


@dataclass(frozen=True)
class VariationAxis:
    """A named dimension of variation with its ordered, unique options."""
    name: str
    options: tuple[str, ...] = ()

    @property
    def is_complete(self) -> bool:
        return bool(self.name.strip()) and any(o.strip() for o in self.options)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "options": list(self.options)}


@dataclass(frozen=True)
class VariantItem:
    """One purchasable combination of a product.

    ``price`` and the other monetary fields are None when the value has not
    been entered yet (fresh items of an interactive regeneration).
    """
    key: str
    options: dict[str, str] = field(default_factory=dict)
    sku: str | None = None
    price: float | None = None
    wholesale_price: float | None = None
    price_usd: float | None = None
    wholesale_price_usd: float | None = None
    stock: int | float = 0

    @classmethod
    def for_options(cls, options: OptionAssignment, **values: Any) -> VariantItem:
        opts = dict(options)
        return cls(key=variant_key(opts), options=opts, **values)

    def to_dict(self) -> dict[str, Any]:
        """External (camelCase) representation, as consumed by product creation."""
        data: dict[str, Any] = {
            "options": dict(self.options),
            "price": self.price,
            "stock": self.stock,
        }
        if self.sku:
            data["sku"] = self.sku
        optional = {
            "wholesalePrice": self.wholesale_price,
            "priceUSD": self.price_usd,
            "wholesalePriceUSD": self.wholesale_price_usd,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data
