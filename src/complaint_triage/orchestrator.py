"""Startup training: data-backed when possible, seed vocabulary otherwise."""

from __future__ import annotations

import logging
from typing import Optional

from .models import ModelState, TrainingOutcome
from .sources import DEFAULT_FETCH_LIMIT, FetchError, RecordSource, fetch_records
from .trainer import Trainer

logger = logging.getLogger(__name__)


async def initialize_model(
    state: ModelState,
    source: Optional[RecordSource] = None,
    *,
    limit: int = DEFAULT_FETCH_LIMIT,
    timeout: Optional[float] = None,
    attempts: int = 1,
) -> TrainingOutcome:
    """Train ``state`` from a record source, falling back to the seed lists.

    The state is cleared before the fetch, so classification during the
    await sees a not-ready model and takes the cold-start path. The seed
    fallback is used when there is no source, the fetch fails, or the
    fetched records produce an empty vocabulary. Safe to call repeatedly.

    Args:
        state: Model state to rebuild.
        source: Optional record source for data-backed training.
        limit: Maximum number of records to fetch.
        timeout: Per-attempt fetch timeout in seconds.
        attempts: Number of fetch attempts.

    Returns:
        TrainingOutcome of the strategy that produced the final model. Its
        ``error`` is set when the source failed.
    """
    state.reset()
    trainer = Trainer(state)
    error: Optional[FetchError] = None

    if source is not None:
        result = await fetch_records(source, limit=limit, timeout=timeout, attempts=attempts)
        error = result.error
        if result.ok:
            outcome = trainer.fit_records(result.records)
            if state.vocab_size > 0:
                return outcome

    logger.warning(
        "No data-backed vocabulary (%s); training from seed keywords",
        error or ("no source configured" if source is None else "no usable records"),
    )
    outcome = trainer.fit_seed()
    outcome.error = error
    return outcome
