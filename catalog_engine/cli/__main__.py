from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from ..config.loader import ConfigError, ImportConfig, load_config
from ..db.categories import PostgresCategoryLookup
from ..db.product_writer import JsonLinesProductWriter, PostgresProductWriter
from ..excel.reader import StructuralImportError, read_workbook
from ..excel.template import emit_template
from ..logging.init import log_summary, set_debug, setup_logging
from ..normalize.grouping import group_rows
from ..services.orchestrator import import_workbook
from ..services.summary import render_summary_line

"""Command line entrypoint.

    python -m catalog_engine.cli import products.xlsx [--config PATH] [--output drafts.jsonl]
    python -m catalog_engine.cli template template.xlsx
    python -m catalog_engine.cli inspect products.xlsx

Exit codes: 0 all drafts created, 2 at least one draft failed, 1 config or
structural failure.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_OUTPUT = Path("drafts.jsonl")


@contextmanager
def _db_connection(conn: Any) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """psycopg2 cursor committed on success, rolled back on error."""
    try:
        with conn:
            with conn.cursor() as cur:
                yield cur
    finally:
        conn.close()


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="catalog_engine", description="Spreadsheet -> product catalog importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/import.yml if present)")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import products from a workbook")
    imp.add_argument("file", type=Path)
    imp.add_argument("--output", type=Path, default=None, help="JSON Lines output when no database is configured")
    imp.add_argument("--json", action="store_true", help="Print the import report as JSON")

    tpl = sub.add_parser("template", help="Write the import template workbook")
    tpl.add_argument("out", type=Path)

    ins = sub.add_parser("inspect", help="Print headers and product groups then exit")
    ins.add_argument("file", type=Path)
    return p.parse_args(argv)


def _run_import(args: argparse.Namespace, cfg: ImportConfig, logger: Any) -> int:
    if not args.file.exists():
        logger.error(f"file not found: {args.file}")
        return EXIT_FATAL

    conn = None
    dsn = cfg.database.resolve_dsn()
    if dsn:
        try:
            conn = psycopg2.connect(dsn)
        except psycopg2.OperationalError as e:
            logger.warning(f"DB connection failed -> fallback to file mode: {e}")

    try:
        if conn is not None:
            with _db_connection(conn) as cur:
                logger.info(f"mode=live table={cfg.database.table}")
                result = import_workbook(
                    args.file,
                    PostgresProductWriter(cur, cfg.database.table),
                    config=cfg,
                    category_lookup=PostgresCategoryLookup(cur),
                )
        else:
            output = args.output or DEFAULT_OUTPUT
            logger.info(f"mode=file output={output}")
            result = import_workbook(args.file, JsonLinesProductWriter(output), config=cfg)
    except StructuralImportError as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL

    for outcome in result.failures:
        logger.error(f"{outcome.reference}: {outcome.error}")
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if result.failed > 0 else EXIT_SUCCESS_ALL


def _run_inspect(args: argparse.Namespace, cfg: ImportConfig, logger: Any) -> int:
    try:
        sheet = read_workbook(args.file)
    except StructuralImportError as e:
        logger.error(f"inspect: {e}")
        return EXIT_FATAL
    print(f"SHEET: {sheet.sheet_name} cols={sheet.columns}")
    for group in group_rows(sheet.rows, cfg.columns, sheet.row_numbers):
        print(f"  Row {group.first_row_number}: {group.canonical_name} rows={len(group.rows)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an empty list must not pull in sys.argv (pytest arguments)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "template":
        args.out.write_bytes(emit_template(cfg.columns))
        logger.info(f"template written to {args.out}")
        return EXIT_SUCCESS_ALL
    if args.command == "inspect":
        return _run_inspect(args, cfg, logger)
    return _run_import(args, cfg, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
