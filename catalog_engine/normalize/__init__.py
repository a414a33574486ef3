"""Pure, in-memory normalization of tabular product rows."""

from .assembler import DraftValidationError, assemble, summarize_variants
from .columns import parse_number, resolve
from .grouping import collect_axes, group_rows
from .variants import build_from_rows, regenerate

__all__ = [
    "resolve",
    "parse_number",
    "group_rows",
    "collect_axes",
    "build_from_rows",
    "regenerate",
    "assemble",
    "summarize_variants",
    "DraftValidationError",
]
