from __future__ import annotations

from ..models.import_outcome import ImportResult

"""SUMMARY line rendering for an import run."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult) -> str:
    """Render ``SUMMARY total=N success=S failed=F elapsed_sec=E``.

    Examples:
        >>> from catalog_engine.models.import_outcome import ImportOutcome, ImportResult
        >>> result = ImportResult(
        ...     results=[ImportOutcome("Row 2: A", True, 1), ImportOutcome("Row 3: B", False, error="x")],
        ...     elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY total=2 success=1 failed=1 elapsed_sec=2'
    """
    return (
        f"SUMMARY total={result.total} "
        f"success={result.success} "
        f"failed={result.failed} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
