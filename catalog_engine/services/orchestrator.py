from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..config.loader import ImportConfig
from ..excel.reader import StructuralImportError, read_workbook
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.column_scheme import ColumnScheme
from ..models.import_outcome import ImportResult
from ..models.product import FailedDraft, ProductDraft, Row
from ..normalize.assembler import CategoryLookup, DraftValidationError, assemble
from ..normalize.grouping import group_rows, collect_axes
from ..normalize.variants import build_from_rows
from .batch_import import CreateProduct, run_batch
from .progress import ProgressTracker

"""Import orchestration.

Import path: workbook -> rows -> groups -> (axes, variant matrix) -> drafts
-> sequential creation. Structural failures abort before grouping; group and
creation failures are isolated per draft and written to the error log.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "build_drafts",
    "import_workbook",
]


def build_drafts(
    rows: Sequence[Row],
    *,
    scheme: ColumnScheme | None = None,
    row_numbers: Sequence[int] | None = None,
    category_lookup: CategoryLookup | None = None,
) -> list[ProductDraft | FailedDraft]:
    """One draft (or FailedDraft) per product group, in group order."""
    scheme = scheme or ColumnScheme()
    drafts: list[ProductDraft | FailedDraft] = []
    for group in group_rows(rows, scheme, row_numbers):
        axes = collect_axes(group, scheme)
        items = build_from_rows(group, axes, scheme)
        try:
            drafts.append(assemble(group, axes, items, scheme, category_lookup))
        except DraftValidationError as e:
            reference = f"Row {group.first_row_number}: {group.canonical_name}"
            drafts.append(FailedDraft(reference=reference, error=str(e), row=group.first_row_number))
    return drafts


def _source_name(source: Path | str | bytes, file_name: str | None) -> str:
    if file_name:
        return file_name
    if isinstance(source, (bytes, bytearray)):
        return "<upload>"
    return Path(source).name


def _row_number(draft: ProductDraft | FailedDraft) -> int:
    return draft.row if isinstance(draft, FailedDraft) else draft.source_row


def _flush(error_log: ErrorLogBuffer) -> None:
    try:
        path = error_log.flush()
    except OSError as e:
        logger.warning("could not write error log: %s", e)
        return
    if path is not None:
        logger.info("error log written to %s", path)


def import_workbook(
    source: Path | str | bytes,
    create: CreateProduct,
    *,
    config: ImportConfig | None = None,
    category_lookup: CategoryLookup | None = None,
    file_name: str | None = None,
) -> ImportResult:
    """Import every product of a workbook through ``create``.

    Raises:
        StructuralImportError: no sheet, or no data rows
    """
    config = config or ImportConfig()
    name = _source_name(source, file_name)
    error_log = ErrorLogBuffer(Path(config.error_log_dir))

    try:
        sheet = read_workbook(source)
    except StructuralImportError as e:
        error_log.append(ErrorRecord.create(name, -1, name, "STRUCTURAL_ERROR", str(e)))
        _flush(error_log)
        raise

    drafts = build_drafts(
        sheet.rows,
        scheme=config.columns,
        row_numbers=sheet.row_numbers,
        category_lookup=category_lookup,
    )
    logger.info(f"{name}: {len(sheet.rows)} row(s), {len(drafts)} product(s)")

    with ProgressTracker(len(drafts)) as progress:
        result = run_batch(drafts, create, progress=progress)

    for draft, outcome in zip(drafts, result.results, strict=True):
        if outcome.success:
            continue
        error_type = "VALIDATION_ERROR" if isinstance(draft, FailedDraft) else "CREATE_ERROR"
        error_log.append(
            ErrorRecord.create(name, _row_number(draft), outcome.reference, error_type, outcome.error or "")
        )
    _flush(error_log)
    return result
