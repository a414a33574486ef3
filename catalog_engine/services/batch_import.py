from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from ..models.import_outcome import ImportOutcome, ImportResult
from ..models.product import FailedDraft, ProductDraft
from .progress import ProgressTracker

"""Sequential batch materialization of product drafts.

Drafts are handed to the ``create`` collaborator strictly one at a time, in
order. A failure of one draft (an exception from ``create``, or a group that
already failed assembly) is recorded as a failed outcome and the batch goes
on. The runner itself never raises for per-draft failures.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "CreateProduct",
    "AsyncCreateProduct",
    "run_batch",
    "run_batch_async",
]

BatchItem = ProductDraft | FailedDraft
CreateProduct = Callable[[ProductDraft], Any]
AsyncCreateProduct = Callable[[ProductDraft], Awaitable[Any]]


def _failed(reference: str, error: BaseException | str) -> ImportOutcome:
    message = str(error) or type(error).__name__
    return ImportOutcome(reference=reference, success=False, error=message)


def _finish(outcomes: list[ImportOutcome], start: datetime) -> ImportResult:
    end = datetime.now(UTC)
    return ImportResult(
        results=outcomes,
        start_time=start,
        end_time=end,
        elapsed_seconds=(end - start).total_seconds(),
    )


def _record(outcome: ImportOutcome, outcomes: list[ImportOutcome], progress: ProgressTracker | None) -> None:
    outcomes.append(outcome)
    if outcome.success:
        logger.debug("created %s -> %s", outcome.reference, outcome.created_id)
    else:
        logger.warning("%s failed: %s", outcome.reference, outcome.error)
    if progress is not None:
        progress.finish_item(success=outcome.success)
        succeeded = sum(1 for o in outcomes if o.success)
        progress.set_postfix(success=succeeded, failed=len(outcomes) - succeeded)


def run_batch(
    drafts: Sequence[BatchItem],
    create: CreateProduct,
    *,
    progress: ProgressTracker | None = None,
) -> ImportResult:
    """Create every draft in order, isolating failures.

    Args:
        drafts: drafts to create; FailedDraft entries are reported as failures
            without calling ``create``
        create: persists one draft and returns its generated id, or raises
        progress: optional progress bar ticked once per draft

    Returns:
        ImportResult with one outcome per draft, in input order
    """
    start = datetime.now(UTC)
    outcomes: list[ImportOutcome] = []
    for draft in drafts:
        if progress is not None:
            progress.start_item(draft.reference)
        if isinstance(draft, FailedDraft):
            _record(_failed(draft.reference, draft.error), outcomes, progress)
            continue
        try:
            created_id = create(draft)
        except Exception as e:
            outcome = _failed(draft.reference, e)
        else:
            outcome = ImportOutcome(reference=draft.reference, success=True, created_id=created_id)
        _record(outcome, outcomes, progress)
    return _finish(outcomes, start)


async def run_batch_async(
    drafts: Sequence[BatchItem],
    create: AsyncCreateProduct,
    *,
    progress: ProgressTracker | None = None,
) -> ImportResult:
    """Same contract as run_batch with a coroutine ``create``.

    Each call is awaited before the next draft starts; there is no fan-out.
    """
    start = datetime.now(UTC)
    outcomes: list[ImportOutcome] = []
    for draft in drafts:
        if progress is not None:
            progress.start_item(draft.reference)
        if isinstance(draft, FailedDraft):
            _record(_failed(draft.reference, draft.error), outcomes, progress)
            continue
        try:
            created_id = await create(draft)
        except Exception as e:
            outcome = _failed(draft.reference, e)
        else:
            outcome = ImportOutcome(reference=draft.reference, success=True, created_id=created_id)
        _record(outcome, outcomes, progress)
    return _finish(outcomes, start)
