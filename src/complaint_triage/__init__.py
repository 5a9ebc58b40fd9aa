"""Complaint Triage -- FIR vs non-FIR classification of complaint texts."""

__version__ = "0.1.0"

from .classifier import ComplaintClassifier
from .config import Settings
from .evaluation import (
    ACCURACY_THRESHOLD,
    ClassificationMetrics,
    compute_metrics,
    cross_validate,
    evaluate,
    stratified_k_fold,
)
from .models import (
    ClassificationResult,
    Label,
    ModelState,
    TrainingExample,
    TrainingOutcome,
    TrainingStrategy,
)
from .orchestrator import initialize_model
from .pipeline import (
    classify_text,
    get_model,
    init_classifier,
    preprocess,
    train_from_examples,
)
from .sources import (
    FetchError,
    FetchResult,
    JsonFileRecordSource,
    MongoRecordSource,
    RecordSource,
    StaticRecordSource,
    fetch_records,
)
from .trainer import Trainer

__all__ = [
    # Flat API over the default model
    "init_classifier",
    "preprocess",
    "classify_text",
    "train_from_examples",
    "get_model",
    # Model and training
    "ModelState",
    "Trainer",
    "TrainingExample",
    "TrainingOutcome",
    "TrainingStrategy",
    "initialize_model",
    # Classification
    "ComplaintClassifier",
    "ClassificationResult",
    "Label",
    # Record sources
    "RecordSource",
    "StaticRecordSource",
    "JsonFileRecordSource",
    "MongoRecordSource",
    "FetchError",
    "FetchResult",
    "fetch_records",
    # Evaluation
    "ACCURACY_THRESHOLD",
    "ClassificationMetrics",
    "compute_metrics",
    "cross_validate",
    "evaluate",
    "stratified_k_fold",
    # Configuration
    "Settings",
]
