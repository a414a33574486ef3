from __future__ import annotations

from unittest.mock import patch

import pytest

from catalog_engine.models.column_scheme import ColumnScheme
from catalog_engine.models.variant import VariantItem, VariationAxis
from catalog_engine.normalize import assembler
from catalog_engine.normalize.assembler import (
    DraftValidationError,
    assemble,
    extract_dimensions,
    extract_images,
    summarize_variants,
)
from catalog_engine.normalize.grouping import collect_axes, group_rows
from catalog_engine.normalize.variants import build_from_rows

NAME = "Nome do Anúncio"


def _draft(rows, **kwargs):
    (group,) = group_rows(rows)
    axes = collect_axes(group)
    return assemble(group, axes, build_from_rows(group, axes), **kwargs)


def test_simple_product_base_fields():
    draft = _draft([
        {
            NAME: " Caneca ",
            "Descrição": "Caneca branca",
            "SKU Principal": "CAN-1",
            "Preço": "19,90",
            "Preço com Desconto": "15",
            "Quantidade": "12",
            "Peso (kg)": "0,3",
            "Comprimento (cm)": "10",
            "Altura (cm)": "12.5",
        }
    ])
    assert draft.name == "Caneca"
    assert draft.description == "Caneca branca"
    assert draft.sku == "CAN-1"
    assert draft.price == pytest.approx(19.9)
    assert draft.wholesale_price == 15.0
    assert draft.stock == 12
    assert draft.weight == pytest.approx(0.3)
    assert draft.dimensions == "10x0x12.5"
    assert draft.category == "Sem categoria"
    assert draft.category_id is None
    assert draft.status is True
    assert draft.variant_items == ()
    assert draft.source_row == 2
    assert draft.reference == "Row 2: Caneca"


def test_variants_suppress_base_price_and_stock():
    draft = _draft([
        {NAME: "Shoe", "Preço": "80", "Quantidade": "9", "Nome Variante1": "Cor", "Opção por Variante1": "Azul"},
        {NAME: "Shoe", "Opção por Variante1": "Preto", "Preço": "70", "Quantidade": "1"},
    ])
    assert draft.price is None
    assert draft.stock is None
    assert len(draft.variant_items) == 2
    assert draft.axes == (VariationAxis("Cor", ("Azul", "Preto")),)


def test_missing_price_without_variants_fails():
    with pytest.raises(DraftValidationError, match="without price"):
        _draft([{NAME: "P", "Quantidade": "1"}])


def test_missing_stock_without_variants_fails():
    with pytest.raises(DraftValidationError, match="without stock"):
        _draft([{NAME: "P", "Preço": "1"}])


def test_zero_price_and_stock_are_valid():
    draft = _draft([{NAME: "Brinde", "Preço": "0", "Quantidade": "0"}])
    assert (draft.price, draft.stock) == (0.0, 0)


def test_negative_values_fail():
    with pytest.raises(DraftValidationError, match="negative price"):
        _draft([{NAME: "P", "Preço": "-1", "Quantidade": "1"}])
    with pytest.raises(DraftValidationError, match="negative stock"):
        _draft([{NAME: "P", "Preço": "1", "Quantidade": "-1"}])


def test_negative_variant_stock_fails():
    (group,) = group_rows([{NAME: "P"}])
    items = [VariantItem.for_options({"Cor": "Azul"}, price=1.0, stock=-2)]
    with pytest.raises(DraftValidationError, match="negative stock for Cor=Azul"):
        assemble(group, [VariationAxis("Cor", ("Azul",))], items)


def test_missing_name_fails():
    from catalog_engine.models.product import ProductGroup

    group = ProductGroup(canonical_name="", rows=({"Preço": "1"},), first_row_number=7)
    with pytest.raises(DraftValidationError, match="row 7"):
        assemble(group, [], [])


def test_category_lookup_then_name_columns_then_placeholder():
    row = {NAME: "P", "Preço": "1", "Quantidade": "1", "Categoria ID": "4", "Categoria": "Cozinha"}
    draft = _draft([row], category_lookup={4: "Utilidades"}.get)
    assert draft.category == "Utilidades"
    assert draft.category_id == 4

    draft = _draft([row], category_lookup=lambda _id: None)
    assert draft.category == "Cozinha"
    assert draft.category_id == 4

    draft = _draft([{NAME: "P", "Preço": "1", "Quantidade": "1", "Categoria ID": "x"}])
    assert draft.category == "Sem categoria"
    assert draft.category_id is None


def test_category_name_column_preferred_over_generic_column():
    draft = _draft([{NAME: "P", "Preço": "1", "Quantidade": "1", "Nome da Categoria": "Casa", "Categoria": "X"}])
    assert draft.category == "Casa"


def test_failing_category_lookup_falls_back_to_name_columns():
    def lookup(_id):
        raise RuntimeError("db down")

    row = {NAME: "P", "Preço": "1", "Quantidade": "1", "Categoria ID": "4", "Categoria": "Cozinha"}
    with patch.object(assembler.logger, "warning") as warning:
        draft = _draft([row], category_lookup=lookup)
    assert draft.category == "Cozinha"
    assert draft.category_id == 4
    warning.assert_called_once()
    _, category_id, error = warning.call_args.args
    assert category_id == 4
    assert str(error) == "db down"


def test_custom_placeholder():
    scheme = ColumnScheme().with_overrides({"category_placeholder": "Uncategorized"})
    (group,) = group_rows([{NAME: "P", "Preço": "1", "Quantidade": "1"}], scheme)
    assert assemble(group, [], [], scheme).category == "Uncategorized"


def test_extract_images_cover_first_deduplicated_and_capped():
    scheme = ColumnScheme()
    row = {"Imagem de Capa": "a.jpg", "Imagem de Anúncio1": "a.jpg", "Imagem de Anúncio2": "b.jpg"}
    assert extract_images(row, scheme) == ("a.jpg", "b.jpg")

    row = {"Imagem de Capa": "cover.jpg"}
    row.update({f"Imagem de Anúncio{i}": f"{i}.jpg" for i in range(1, 10)})
    images = extract_images(row, scheme)
    assert len(images) == 10
    assert images[0] == "cover.jpg"

    capped = ColumnScheme().with_overrides({"max_images": 3})
    assert extract_images(row, capped) == ("cover.jpg", "1.jpg", "2.jpg")


def test_extract_dimensions_absent():
    assert extract_dimensions({}, ColumnScheme()) is None
    assert extract_dimensions({"Largura (cm)": "15"}, ColumnScheme()) == "0x15x0"


def test_summarize_variants():
    items = [
        VariantItem.for_options({"S": "P"}, price=30.0, stock=2),
        VariantItem.for_options({"S": "M"}, price=25.0, stock=3),
        VariantItem.for_options({"S": "G"}, price=None, stock=0),
    ]
    assert summarize_variants(items) == (25.0, 5)


def test_summarize_variants_without_prices_fails():
    with pytest.raises(DraftValidationError):
        summarize_variants([VariantItem.for_options({"S": "P"}, stock=1)])
