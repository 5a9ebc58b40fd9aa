"""Evaluation of the complaint classifier.

The task is binary, so scores are reported with fir as the positive
class:

- accuracy against the acceptance floor
- fir precision, recall and F1
- a 2x2 confusion table keyed by ``Label``
- stratified k-fold cross-validation with a fresh model per fold
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Sequence

from .classifier import ComplaintClassifier
from .models import Label, ModelState, TrainingExample
from .trainer import ExampleLike, Trainer, as_example

# Minimum training-set accuracy for a labeled example set to be accepted
ACCURACY_THRESHOLD = 0.85


def _ratio(num: int, den: int) -> float:
    return num / den if den else 0.0


@dataclass
class ClassificationMetrics:
    """Confusion counts for fir-vs-non-fir predictions.

    Attributes:
        fir_hits: fir complaints predicted fir.
        fir_misses: fir complaints predicted non-fir.
        false_alarms: non-fir complaints predicted fir.
        non_fir_hits: non-fir complaints predicted non-fir.
    """

    fir_hits: int = 0
    fir_misses: int = 0
    false_alarms: int = 0
    non_fir_hits: int = 0

    @property
    def total(self) -> int:
        return self.fir_hits + self.fir_misses + self.false_alarms + self.non_fir_hits

    @property
    def accuracy(self) -> float:
        return _ratio(self.fir_hits + self.non_fir_hits, self.total)

    @property
    def precision(self) -> float:
        """Share of fir predictions that were fir."""
        return _ratio(self.fir_hits, self.fir_hits + self.false_alarms)

    @property
    def recall(self) -> float:
        """Share of fir complaints that were caught."""
        return _ratio(self.fir_hits, self.fir_hits + self.fir_misses)

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if (p + r) > 0 else 0.0

    @property
    def confusion(self) -> dict[Label, dict[Label, int]]:
        """Counts as ``{true: {predicted: count}}``."""
        return {
            Label.FIR: {Label.FIR: self.fir_hits, Label.NON_FIR: self.fir_misses},
            Label.NON_FIR: {Label.FIR: self.false_alarms, Label.NON_FIR: self.non_fir_hits},
        }

    @property
    def support(self) -> dict[Label, int]:
        return {
            Label.FIR: self.fir_hits + self.fir_misses,
            Label.NON_FIR: self.false_alarms + self.non_fir_hits,
        }

    @property
    def passes_threshold(self) -> bool:
        return self.accuracy >= ACCURACY_THRESHOLD

    def record(self, true: Label, predicted: Label) -> None:
        """Count one prediction."""
        if true is Label.FIR:
            if predicted is Label.FIR:
                self.fir_hits += 1
            else:
                self.fir_misses += 1
        elif predicted is Label.FIR:
            self.false_alarms += 1
        else:
            self.non_fir_hits += 1

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "precision": round(self.precision, 4),
            "recall": round(self.recall, 4),
            "f1": round(self.f1, 4),
            "confusion_matrix": {
                true.value: {pred.value: n for pred, n in row.items()}
                for true, row in self.confusion.items()
            },
            "support": {label.value: n for label, n in self.support.items()},
        }

    def summary(self) -> str:
        """Human-readable summary of metrics."""
        return "\n".join([
            f"Accuracy: {self.accuracy:.2%} ({self.fir_hits + self.non_fir_hits}/{self.total})",
            f"FIR precision: {self.precision:.4f}  recall: {self.recall:.4f}  F1: {self.f1:.4f}",
            "",
            f"{'true / predicted':<18} {'fir':>8} {'non-fir':>8}",
            f"{'fir':<18} {self.fir_hits:>8} {self.fir_misses:>8}",
            f"{'non-fir':<18} {self.false_alarms:>8} {self.non_fir_hits:>8}",
        ])


def compute_metrics(
    y_true: Sequence[Any],
    y_pred: Sequence[Any],
) -> ClassificationMetrics:
    """Score predicted labels against true labels.

    Labels may be ``Label`` members or strings; they are parsed the same
    way as training labels.

    Raises:
        ValueError: If the sequences differ in length.
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    metrics = ClassificationMetrics()
    for true, pred in zip(y_true, y_pred):
        metrics.record(Label.parse(true), Label.parse(pred))
    return metrics


def evaluate(
    classifier: ComplaintClassifier,
    examples: Sequence[ExampleLike],
) -> ClassificationMetrics:
    """Re-classify labeled examples and score the predictions."""
    metrics = ClassificationMetrics()
    for ex in (as_example(item) for item in examples):
        metrics.record(ex.label, classifier.classify(ex.text).label)
    return metrics


def stratified_k_fold(
    labels: Sequence[Any],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Split indices into ``k`` train/test folds with balanced labels.

    Indices of each label are shuffled, then dealt to folds in turn, fir
    first and non-fir continuing where fir stopped, so fold sizes differ
    by at most one.

    Args:
        labels: Label per example.
        k: Number of folds.
        seed: Random seed for reproducibility.

    Returns:
        List of (train_indices, test_indices) tuples.
    """
    rng = random.Random(seed)
    parsed = [Label.parse(label) for label in labels]

    dealt: list[int] = []
    for label in (Label.FIR, Label.NON_FIR):
        indices = [i for i, lab in enumerate(parsed) if lab is label]
        rng.shuffle(indices)
        dealt.extend(indices)

    fold_of = {idx: pos % k for pos, idx in enumerate(dealt)}
    return [
        (
            [i for i in range(len(parsed)) if fold_of[i] != fold],
            [i for i in range(len(parsed)) if fold_of[i] == fold],
        )
        for fold in range(k)
    ]


def cross_validate(
    examples: Sequence[ExampleLike],
    k: int = 5,
    seed: int = 42,
) -> list[ClassificationMetrics]:
    """Run stratified k-fold cross-validation.

    Each fold trains a fresh ``ModelState`` from its training split, so the
    process-default model is never touched.

    Args:
        examples: Labeled examples.
        k: Number of folds (at least 2).
        seed: Random seed for fold generation.

    Returns:
        List of ClassificationMetrics, one per non-empty test fold.

    Raises:
        ValueError: If ``k`` is less than 2.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")

    parsed: list[TrainingExample] = [as_example(ex) for ex in examples]
    results: list[ClassificationMetrics] = []

    for train_idx, test_idx in stratified_k_fold([ex.label for ex in parsed], k=k, seed=seed):
        if not test_idx:
            continue
        state = ModelState()
        Trainer(state).fit_examples(parsed[i] for i in train_idx)
        results.append(evaluate(ComplaintClassifier(state), [parsed[i] for i in test_idx]))

    return results


def mean_accuracy(results: Sequence[ClassificationMetrics]) -> float:
    """Average accuracy over cross-validation folds."""
    return sum(m.accuracy for m in results) / len(results) if results else 0.0
