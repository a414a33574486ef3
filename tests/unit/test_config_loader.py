from __future__ import annotations

from pathlib import Path

import pytest

from catalog_engine.config.loader import ConfigError, DatabaseConfig, ImportConfig, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.columns.name == "Nome do Anúncio"
    assert cfg.columns.category_placeholder == "Sem categoria"
    assert cfg.columns.max_images == 10
    assert cfg.error_log_dir == "logs"
    assert cfg.database.table == "products"


def test_default_location_missing_means_defaults(temp_workdir: Path):
    cfg = load_config()
    assert cfg == ImportConfig()


def test_default_location_is_used_when_present(write_config: Path):
    write_config.write_text("max_images: 4\n", encoding="utf-8")
    assert load_config().columns.max_images == 4


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("columns: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(write_config)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_unknown_column_key(write_config: Path):
    write_config.write_text("columns:\n  colour: Cor\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_column_overrides(write_config: Path):
    write_config.write_text(
        "columns:\n  name: Product\n  axis_names: [Var 1, Var 2]\n  axis_options: [Opt 1, Opt 2]\n",
        encoding="utf-8",
    )
    cfg = load_config(write_config)
    assert cfg.columns.name == "Product"
    assert cfg.columns.axis_columns == [("Var 1", "Opt 1"), ("Var 2", "Opt 2")]


def test_resolve_dsn_precedence(monkeypatch):
    db = DatabaseConfig(host="db", port=5433, user="app", password="pw", database="shop")
    assert db.resolve_dsn() == "host=db port=5433 user=app dbname=shop password=pw"

    monkeypatch.setenv("DATABASE_URL", "postgresql://env/shop")
    assert db.resolve_dsn() == "postgresql://env/shop"


def test_resolve_dsn_unconfigured():
    assert DatabaseConfig().resolve_dsn() is None
