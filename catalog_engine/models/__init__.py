"""Domain models for the catalog normalization engine.

Rows, groups, variation axes, variant items, drafts and import outcomes.
"""

from .column_scheme import DEFAULT_CATEGORY_PLACEHOLDER, ColumnScheme
from .error_record import ErrorRecord
from .import_outcome import ImportOutcome, ImportResult
from .product import FailedDraft, ProductDraft, ProductGroup, Row
from .variant import OptionAssignment, VariantItem, VariationAxis, variant_key

__all__ = [
    # Column contract
    "ColumnScheme",
    "DEFAULT_CATEGORY_PLACEHOLDER",
    # Variation models
    "OptionAssignment",
    "VariationAxis",
    "VariantItem",
    "variant_key",
    # Product models
    "Row",
    "ProductGroup",
    "ProductDraft",
    "FailedDraft",
    # Results
    "ErrorRecord",
    "ImportOutcome",
    "ImportResult",
]
