from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

"""Column scheme for the product import workbook.

The labels are the human-authored headers of the spreadsheet. They are data,
not code: configuration may override any of them (see config/loader.py).
"""

__all__ = [
    "ColumnScheme",
    "DEFAULT_CATEGORY_PLACEHOLDER",
    "DEFAULT_MAX_IMAGES",
]

DEFAULT_CATEGORY_PLACEHOLDER = "Sem categoria"
DEFAULT_MAX_IMAGES = 10


@dataclass(frozen=True)
class ColumnScheme:
    """Header labels used to read one product row."""
    name: str = "Nome do Anúncio"
    description: str = "Descrição"
    category_id: str = "Categoria ID"
    category_names: tuple[str, ...] = ("Nome da Categoria", "Categoria")
    sku: str = "SKU Principal"
    price: str = "Preço"
    wholesale_price: str = "Preço com Desconto"
    stock: str = "Quantidade"
    weight: str = "Peso (kg)"
    length: str = "Comprimento (cm)"
    width: str = "Largura (cm)"
    height: str = "Altura (cm)"
    cover_image: str = "Imagem de Capa"
    image_prefix: str = "Imagem de Anúncio"
    image_slots: int = 9
    axis_names: tuple[str, ...] = ("Nome Variante1", "Nome Variante2")
    axis_options: tuple[str, ...] = ("Opção por Variante1", "Opção por Variante2")
    variant_sku: str = "SKU"
    variant_id: str = "ID da Variante"
    category_placeholder: str = DEFAULT_CATEGORY_PLACEHOLDER
    max_images: int = DEFAULT_MAX_IMAGES

    @property
    def image_columns(self) -> list[str]:
        """Cover first, then the numbered slots (1-based)."""
        return [self.cover_image] + [
            f"{self.image_prefix}{i}" for i in range(1, self.image_slots + 1)
        ]

    @property
    def axis_columns(self) -> list[tuple[str, str]]:
        """(axis name column, option column) pairs in axis order."""
        return list(zip(self.axis_names, self.axis_options, strict=True))

    @property
    def template_headers(self) -> list[str]:
        # Template uses two numbered image slots only
        return [
            self.name,
            self.description,
            self.category_id,
            self.sku,
            self.price,
            self.wholesale_price,
            self.stock,
            self.weight,
            self.length,
            self.width,
            self.height,
            self.cover_image,
            f"{self.image_prefix}1",
            f"{self.image_prefix}2",
            self.axis_names[0],
            self.axis_options[0],
            self.axis_names[1],
            self.axis_options[1],
            self.variant_sku,
            self.variant_id,
        ]

    def with_overrides(self, overrides: dict[str, Any] | None) -> ColumnScheme:
        """Return a copy with the given fields replaced.

        Unknown keys raise ValueError; list values are converted to tuples so
        the scheme stays hashable.
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"unknown column scheme keys: {sorted(unknown)}")
        normalized = {
            k: tuple(v) if isinstance(v, list) else v for k, v in overrides.items()
        }
        scheme = replace(self, **normalized)
        if len(scheme.axis_names) != len(scheme.axis_options):
            raise ValueError("axis_names and axis_options must have the same length")
        return scheme
