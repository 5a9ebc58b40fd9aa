"""Data models for complaint classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from .sources import FetchError

FIR = "fir"
NON_FIR = "nonfir"
CLASSES: tuple[str, str] = (FIR, NON_FIR)

MIN_PRIOR = 1e-6


class Label(str, Enum):
    """Complaint categories."""

    FIR = "fir"
    NON_FIR = "non-fir"

    @property
    def key(self) -> str:
        """Class key used inside ``ModelState`` maps."""
        return FIR if self is Label.FIR else NON_FIR

    @classmethod
    def parse(cls, value: Any) -> "Label":
        """Parse a label leniently; anything but ``"fir"`` is non-fir."""
        if isinstance(value, Label):
            return value
        return cls.FIR if str(value or "").lower() == "fir" else cls.NON_FIR


class TrainingStrategy(str, Enum):
    """Where a training pass took its documents from."""

    SOURCE = "source"
    EXAMPLES = "examples"
    SEED = "seed"


@dataclass
class TrainingExample:
    """A caller-supplied labeled complaint text.

    ``label`` may be given as a string; it is parsed with ``Label.parse``,
    so anything other than ``"fir"`` becomes ``Label.NON_FIR``.
    """

    text: str
    label: Label | str

    def __post_init__(self) -> None:
        self.label = Label.parse(self.label)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TrainingExample":
        return cls(text=data.get("text") or "", label=Label.parse(data.get("label")))


@dataclass
class ClassificationResult:
    """Label and class probabilities for one complaint text.

    Attributes:
        label: Predicted label.
        prob_fir: Probability of the fir class (0-1).
        prob_non_fir: ``1 - prob_fir``.
        tokens: Normalized tokens the decision was made on.
        tier: Decision tier that produced the result
            (``cold_start``, ``rule`` or ``bayes``).
    """

    label: Label
    prob_fir: float
    prob_non_fir: float
    tokens: list[str] = field(default_factory=list)
    tier: str = "bayes"

    @property
    def is_fir(self) -> bool:
        return self.label is Label.FIR

    def to_dict(self) -> dict:
        return {
            "label": self.label.value,
            "prob_fir": round(self.prob_fir, 4),
            "prob_non_fir": round(self.prob_non_fir, 4),
            "tokens": list(self.tokens),
            "tier": self.tier,
        }


@dataclass
class ModelState:
    """Counts, priors and IDF table shared by the trainer and classifier.

    Training always clears the state and rebuilds it from scratch; there
    is no partial-update API. Callers must not mutate a state that a
    classifier is reading without external synchronization.
    """

    vocab: set[str] = field(default_factory=set)
    cond: dict[str, dict[str, int]] = field(
        default_factory=lambda: {FIR: {}, NON_FIR: {}}
    )
    totals: dict[str, int] = field(default_factory=lambda: {FIR: 0, NON_FIR: 0})
    priors: dict[str, float] = field(default_factory=lambda: {FIR: 0.5, NON_FIR: 0.5})
    idf: dict[str, float] = field(default_factory=dict)
    ready: bool = False

    def reset(self) -> None:
        """Clear all learned fields and mark the state as not ready."""
        self.ready = False
        self.vocab.clear()
        for cls in CLASSES:
            self.cond[cls].clear()
            self.totals[cls] = 0
            self.priors[cls] = 0.5
        self.idf.clear()

    def add_counts(self, cls: str, tokens: list[str]) -> None:
        counts = self.cond[cls]
        for token in tokens:
            self.vocab.add(token)
            counts[token] = counts.get(token, 0) + 1
            self.totals[cls] += 1

    @property
    def vocab_size(self) -> int:
        return len(self.vocab)

    def to_dict(self) -> dict:
        """Plain-dict view for diagnostics."""
        return {
            "ready": self.ready,
            "vocab_size": self.vocab_size,
            "priors": {k: round(v, 6) for k, v in self.priors.items()},
            "totals": dict(self.totals),
        }


@dataclass
class TrainingOutcome:
    """Summary of one training pass.

    ``error`` is set when a record source failed and the seed fallback
    was taken instead.
    """

    strategy: TrainingStrategy
    documents: int = 0
    fir_documents: int = 0
    nonfir_documents: int = 0
    vocab_size: int = 0
    error: Optional["FetchError"] = None

    @property
    def fell_back(self) -> bool:
        return self.strategy is TrainingStrategy.SEED

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy.value,
            "documents": self.documents,
            "fir_documents": self.fir_documents,
            "nonfir_documents": self.nonfir_documents,
            "vocab_size": self.vocab_size,
            "error": str(self.error) if self.error else None,
        }
