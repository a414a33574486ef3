from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import psycopg2

from catalog_engine.cli.__main__ import main as cli_main


def test_cli_import_all_success(make_workbook, shoe_rows, temp_workdir: Path, capsys):
    path = make_workbook("shoes.xlsx", shoe_rows)
    code = cli_main(["import", str(path), "--output", "out/drafts.jsonl"])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO mode=file" in out
    assert "SUMMARY total=1 success=1 failed=0" in out
    lines = (temp_workdir / "out" / "drafts.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["name"] == "Shoe A"


def test_cli_import_partial_failure_exit_code(make_workbook, shoe_rows, capsys):
    rows = shoe_rows + [{"Nome do Anúncio": "Sem preço", "Quantidade": "1"}]
    path = make_workbook("mixed.xlsx", rows)
    code = cli_main(["import", str(path), "--json"])
    out = capsys.readouterr().out
    assert code == 2
    assert 'ERROR Row 4: Sem preço: Product "Sem preço" without price' in out
    assert "SUMMARY total=2 success=1 failed=1" in out
    assert '"failed": 1' in out


def test_cli_import_missing_file(temp_workdir: Path, capsys):
    code = cli_main(["import", "data/nope.xlsx"])
    assert code == 1
    assert "ERROR file not found:" in capsys.readouterr().out


def test_cli_import_structural_failure(make_workbook, capsys):
    path = make_workbook("empty.xlsx", [{"Nome do Anúncio": None}])
    code = cli_main(["import", str(path)])
    assert code == 1
    assert "ERROR import: sheet" in capsys.readouterr().out


def test_cli_bad_config(write_config: Path, capsys):
    write_config.write_text("unknown: 1\n", encoding="utf-8")
    code = cli_main(["template", "t.xlsx"])
    assert code == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_cli_template_and_inspect(temp_workdir: Path, capsys):
    assert cli_main(["template", "template.xlsx"]) == 0
    assert (temp_workdir / "template.xlsx").stat().st_size > 0

    assert cli_main(["inspect", "template.xlsx"]) == 0
    out = capsys.readouterr().out
    assert "SHEET: Produtos" in out
    assert "Row 2: Exemplo Produto rows=2" in out


def test_cli_import_unreachable_database_falls_back_to_file_mode(
    make_workbook, shoe_rows, temp_workdir: Path, monkeypatch, capsys
):
    monkeypatch.setenv("DATABASE_URL", "host=127.0.0.1 port=1 dbname=catalog")
    path = make_workbook("shoes.xlsx", shoe_rows)
    refused = psycopg2.OperationalError("connection refused")
    with patch("catalog_engine.cli.__main__.psycopg2.connect", side_effect=refused) as connect:
        code = cli_main(["import", str(path)])
    out = capsys.readouterr().out
    connect.assert_called_once_with("host=127.0.0.1 port=1 dbname=catalog")
    assert code == 0
    assert "DB connection failed -> fallback to file mode: connection refused" in out
    assert "INFO mode=file output=drafts.jsonl" in out
    assert (temp_workdir / "drafts.jsonl").exists()
