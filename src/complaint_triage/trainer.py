"""Training strategies that rebuild a ``ModelState`` from scratch.

Three strategies populate the model:

- ``fit_examples``: caller-supplied labeled examples
- ``fit_records``: records retrieved from a ``RecordSource``
- ``fit_seed``: the hardcoded seed keyword lists, as a last resort

Every strategy clears the state first. Priors are class-document
fractions clamped away from zero, and the IDF table uses a class-level
document frequency: ``idf[t] = ln((N + 1) / (df[t] + 1))`` where ``N`` is
the number of training documents and ``df[t]`` counts the classes (0-2)
whose documents contain ``t``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Union

from .lexicon import SEED_FIR, SEED_NON_FIR
from .models import (
    CLASSES,
    FIR,
    MIN_PRIOR,
    NON_FIR,
    Label,
    ModelState,
    TrainingExample,
    TrainingOutcome,
    TrainingStrategy,
)
from .preprocessing import preprocess
from .sources import Record

logger = logging.getLogger(__name__)

ExampleLike = Union[TrainingExample, Mapping[str, Any]]


def as_example(item: ExampleLike) -> TrainingExample:
    """Coerce an example or mapping; anything else becomes an empty non-fir example."""
    if isinstance(item, TrainingExample):
        return item
    if isinstance(item, Mapping):
        return TrainingExample.from_mapping(item)
    return TrainingExample(text="", label=Label.NON_FIR)


class Trainer:
    """Populates a ``ModelState`` using one of the training strategies.

    Args:
        state: The model state to rebuild. It is cleared at the start of
            every ``fit_*`` call.
    """

    def __init__(self, state: ModelState) -> None:
        self.state = state

    def fit_examples(self, examples: Iterable[ExampleLike]) -> TrainingOutcome:
        """Rebuild the model from labeled examples.

        Examples may be ``TrainingExample`` objects or mappings with
        ``text`` and ``label`` keys. Labels other than ``"fir"`` count as
        non-fir. An empty iterable leaves an empty, ready model with
        0.5/0.5 priors.

        Args:
            examples: Labeled complaint texts.

        Returns:
            TrainingOutcome describing the rebuilt model.
        """
        documents = (
            (ex.text, ex.label) for ex in (as_example(item) for item in examples)
        )
        return self._fit(documents, TrainingStrategy.EXAMPLES)

    def fit_records(self, records: Iterable[Record]) -> TrainingOutcome:
        """Rebuild the model from source records.

        Records need ``description`` and ``category`` keys; the category is
        parsed the same way as example labels.
        """
        documents = (
            (r.get("description"), Label.parse(r.get("category"))) for r in records
        )
        return self._fit(documents, TrainingStrategy.SOURCE)

    def fit_seed(self) -> TrainingOutcome:
        """Rebuild the model from the seed keyword lists.

        Each keyword is a one-token document of its class. Priors are
        fixed at 0.5/0.5 and every token gets the same IDF weight.
        """
        state = self.state
        state.reset()
        state.add_counts(FIR, list(SEED_FIR))
        state.add_counts(NON_FIR, list(SEED_NON_FIR))
        state.priors[FIR] = 0.5
        state.priors[NON_FIR] = 0.5

        n_docs = 2
        uniform_idf = math.log((n_docs + 1) / 2)
        for token in state.vocab:
            state.idf[token] = uniform_idf
        state.ready = True

        logger.info("Trained seed model: vocab=%d", state.vocab_size)
        return TrainingOutcome(
            strategy=TrainingStrategy.SEED,
            documents=len(SEED_FIR) + len(SEED_NON_FIR),
            fir_documents=len(SEED_FIR),
            nonfir_documents=len(SEED_NON_FIR),
            vocab_size=state.vocab_size,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fit(
        self,
        documents: Iterable[tuple[Any, Label]],
        strategy: TrainingStrategy,
    ) -> TrainingOutcome:
        state = self.state
        state.reset()

        doc_counts = {FIR: 0, NON_FIR: 0}
        for text, label in documents:
            cls = label.key
            doc_counts[cls] += 1
            state.add_counts(cls, preprocess(text))

        n_docs = doc_counts[FIR] + doc_counts[NON_FIR]
        for cls in CLASSES:
            state.priors[cls] = max(MIN_PRIOR, doc_counts[cls] / n_docs) if n_docs else 0.5

        self._compute_idf(n_docs)
        state.ready = True

        logger.info(
            "Trained %s model: docs=%d fir=%d nonfir=%d vocab=%d",
            strategy.value,
            n_docs,
            doc_counts[FIR],
            doc_counts[NON_FIR],
            state.vocab_size,
        )
        return TrainingOutcome(
            strategy=strategy,
            documents=n_docs,
            fir_documents=doc_counts[FIR],
            nonfir_documents=doc_counts[NON_FIR],
            vocab_size=state.vocab_size,
        )

    def _compute_idf(self, n_docs: int) -> None:
        state = self.state
        n = max(n_docs, 1)
        for token in state.vocab:
            df = sum(1 for cls in CLASSES if token in state.cond[cls])
            state.idf[token] = math.log((n + 1) / (df + 1))
