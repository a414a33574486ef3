# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from catalog_engine.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _no_database_env(monkeypatch):
    # Live mode is selected from the environment; keep tests on the file writer
    for var in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
        monkeypatch.delenv(var, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """columns:
  name: Nome do Anúncio
  variant_sku: SKU
category_placeholder: Sem categoria
max_images: 10
error_log_dir: logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _write_workbook(path: Path, rows: list[dict[str, object]], sheet: str = "Produtos") -> Path:
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    df = pd.DataFrame(rows, columns=columns)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet, index=False)
    return path


@pytest.fixture()
def shoe_rows() -> list[dict[str, str]]:
    return [
        {
            "Nome do Anúncio": "Shoe A",
            "Categoria ID": "",
            "Nome Variante1": "Color",
            "Opção por Variante1": "Red",
            "Preço": "59,90",
            "Quantidade": "5",
        },
        {
            "Nome do Anúncio": "Shoe A",
            "Categoria ID": "",
            "Nome Variante1": "",
            "Opção por Variante1": "Blue",
            "Preço": "55.00",
            "Quantidade": "3",
        },
    ]


@pytest.fixture()
def make_workbook(temp_workdir: Path):
    """Factory writing rows (dicts keyed by header) to data/<name>."""
    def _make(name: str, rows: list[dict[str, object]], sheet: str = "Produtos") -> Path:
        return _write_workbook(temp_workdir / "data" / name, rows, sheet)
    return _make
