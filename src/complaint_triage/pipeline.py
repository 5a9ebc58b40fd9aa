"""Process-default model and the flat caller API.

These functions operate on a single module-level ``ModelState`` for
callers that want one shared classifier. Code that needs several
independent models should create its own ``ModelState`` and use
``Trainer`` / ``ComplaintClassifier`` directly.

There is no internal locking: callers must serialize retraining against
concurrent classification.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from .classifier import ComplaintClassifier
from .config import Settings
from .models import ClassificationResult, ModelState, TrainingOutcome
from .orchestrator import initialize_model
from .preprocessing import preprocess as _preprocess
from .sources import MongoRecordSource, RecordSource
from .trainer import ExampleLike, Trainer

_model = ModelState()
_classifier = ComplaintClassifier(_model)


def source_from_settings(settings: Settings) -> Optional[RecordSource]:
    """Build the MongoDB record source if a URI is configured."""
    if not settings.mongo_uri:
        return None
    return MongoRecordSource(
        settings.mongo_uri,
        settings.mongo_db,
        settings.collection,
    )


async def init_classifier(
    source: Optional[RecordSource] = None,
    settings: Optional[Settings] = None,
) -> TrainingOutcome:
    """Train the default model from a record source or the seed lists.

    Args:
        source: Record source to train from. When omitted, one is built
            from ``settings`` (MongoDB if a URI is configured).
        settings: Fetch limits and source configuration; defaults to
            ``Settings.from_env()``.

    Returns:
        TrainingOutcome of the strategy that was used.
    """
    settings = settings or Settings.from_env()
    if source is None:
        source = source_from_settings(settings)
    return await initialize_model(
        _model,
        source,
        limit=settings.fetch_limit,
        timeout=settings.fetch_timeout,
        attempts=settings.fetch_attempts,
    )


def preprocess(text: Any) -> list[str]:
    """Normalize text into tokens."""
    return _preprocess(text)


def classify_text(text: Any) -> ClassificationResult:
    """Classify text with the default model."""
    return _classifier.classify(text)


def train_from_examples(examples: Iterable[ExampleLike]) -> TrainingOutcome:
    """Rebuild the default model from labeled examples."""
    return Trainer(_model).fit_examples(examples)


def get_model() -> ModelState:
    """Return the default model for diagnostics. Do not mutate it."""
    return _model
