from __future__ import annotations

import io

import pandas as pd

from ..models.column_scheme import ColumnScheme

"""Import template workbook.

Two example rows of one product with two axes: the first row carries the
base data and the first combination, the second row only the second
combination. Documents the column contract read by the import.
"""

__all__ = [
    "TEMPLATE_SHEET_NAME",
    "template_rows",
    "emit_template",
]

TEMPLATE_SHEET_NAME = "Produtos"


def template_rows(scheme: ColumnScheme | None = None) -> list[dict[str, str]]:
    s = scheme or ColumnScheme()
    base = {
        s.name: "Exemplo Produto",
        s.description: "Descrição do produto exemplo",
        s.category_id: "1",
        s.sku: "PROD001",
        s.price: "99.90",
        s.wholesale_price: "79.90",
        s.stock: "50",
        s.weight: "0.5",
        s.length: "20",
        s.width: "15",
        s.height: "10",
        s.cover_image: "https://exemplo.com/imagem1.jpg",
        f"{s.image_prefix}1": "https://exemplo.com/imagem2.jpg",
        f"{s.image_prefix}2": "https://exemplo.com/imagem3.jpg",
        s.axis_names[0]: "Cor",
        s.axis_options[0]: "Vermelho",
        s.axis_names[1]: "Tamanho",
        s.axis_options[1]: "P",
        s.variant_sku: "PROD001-VERM-P",
        s.variant_id: "",
    }
    sibling = {header: "" for header in s.template_headers}
    sibling.update({
        s.name: "Exemplo Produto",
        s.axis_options[0]: "Azul",
        s.axis_options[1]: "M",
        s.variant_sku: "PROD001-AZUL-M",
    })
    return [base, sibling]


def emit_template(scheme: ColumnScheme | None = None) -> bytes:
    """Return the template as ``.xlsx`` bytes."""
    s = scheme or ColumnScheme()
    df = pd.DataFrame(template_rows(s), columns=s.template_headers)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=TEMPLATE_SHEET_NAME, index=False)
    return buffer.getvalue()
