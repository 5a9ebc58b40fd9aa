"""Tests for the training strategies and model-state invariants."""

from __future__ import annotations

import math

import pytest

from complaint_triage.lexicon import SEED_FIR, SEED_NON_FIR
from complaint_triage.models import (
    FIR,
    MIN_PRIOR,
    NON_FIR,
    Label,
    ModelState,
    TrainingExample,
    TrainingStrategy,
)
from complaint_triage.trainer import Trainer, as_example


def assert_consistent(state: ModelState) -> None:
    """Check the structural invariants every training pass must keep."""
    assert state.vocab == set(state.cond[FIR]) | set(state.cond[NON_FIR])
    for cls in (FIR, NON_FIR):
        assert state.totals[cls] == sum(state.cond[cls].values())
    assert math.isclose(state.priors[FIR] + state.priors[NON_FIR], 1.0, abs_tol=1e-5)
    assert set(state.idf) == state.vocab
    assert all(v >= 0 for v in state.idf.values())


# ---------------------------------------------------------------------------
# fit_examples
# ---------------------------------------------------------------------------

class TestFitExamples:
    """Tests for training from caller-supplied examples."""

    def test_fixture_model_is_consistent(self, trained_state):
        assert trained_state.ready
        assert_consistent(trained_state)

    def test_priors_are_document_fractions(self, trained_state):
        assert trained_state.priors[FIR] == pytest.approx(11 / 21)
        assert trained_state.priors[NON_FIR] == pytest.approx(10 / 21)

    def test_counts_use_normalized_tokens(self, trained_state):
        # "reported" appears twice and "report" once, all in fir examples
        assert trained_state.cond[FIR]["report"] == 3
        assert "report" not in trained_state.cond[NON_FIR]
        assert trained_state.cond[NON_FIR]["certificate"] == 3

    def test_class_level_idf(self):
        state = ModelState()
        Trainer(state).fit_examples([
            {"text": "bike stolen", "label": "fir"},
            {"text": "bike paperwork", "label": "non-fir"},
            {"text": "phone snatched", "label": "fir"},
        ])
        # N = 3 documents; "bike" occurs in both classes, "phone" in one
        assert state.idf["bike"] == pytest.approx(math.log(4 / 3))
        assert state.idf["phone"] == pytest.approx(math.log(4 / 2))

    def test_token_in_both_classes_of_two_docs_gets_zero_idf(self):
        state = ModelState()
        Trainer(state).fit_examples([
            {"text": "bike stolen", "label": "fir"},
            {"text": "bike lost", "label": "non-fir"},
        ])
        assert state.idf["bike"] == pytest.approx(0.0)
        assert state.idf["stolen"] > 0

    def test_accepts_training_example_objects(self):
        state = ModelState()
        outcome = Trainer(state).fit_examples([
            TrainingExample(text="Robbery at shop", label=Label.FIR),
            TrainingExample(text="Passport request", label=Label.NON_FIR),
        ])
        assert outcome.fir_documents == 1
        assert outcome.nonfir_documents == 1
        assert_consistent(state)

    def test_training_examples_with_string_labels(self):
        state = ModelState()
        outcome = Trainer(state).fit_examples([
            TrainingExample("bike stolen", "fir"),
            TrainingExample("noc", "garbage"),
            TrainingExample("passport request", None),  # type: ignore[arg-type]
        ])
        assert outcome.fir_documents == 1
        assert outcome.nonfir_documents == 2
        assert state.cond[FIR] == {"bike": 1, "stolen": 1}
        assert_consistent(state)

    def test_labels_are_case_insensitive(self):
        state = ModelState()
        outcome = Trainer(state).fit_examples([{"text": "knife attack", "label": "FIR"}])
        assert outcome.fir_documents == 1
        assert state.cond[FIR] == {"knife": 1, "attack": 1}

    def test_malformed_labels_count_as_non_fir(self):
        state = ModelState()
        outcome = Trainer(state).fit_examples([
            {"text": "strange noise", "label": None},
            {"text": "parking dispute", "label": "criminal"},
            {"text": "queue jumping"},
        ])
        assert outcome.nonfir_documents == 3
        assert outcome.fir_documents == 0
        assert state.cond[FIR] == {}

    def test_single_class_priors_are_clamped(self):
        state = ModelState()
        Trainer(state).fit_examples([{"text": "armed robbery", "label": "fir"}])
        assert state.priors[FIR] == 1.0
        assert state.priors[NON_FIR] == MIN_PRIOR
        assert_consistent(state)

    def test_empty_examples_do_not_raise(self):
        state = ModelState()
        outcome = Trainer(state).fit_examples([])
        assert state.ready
        assert state.vocab == set()
        assert state.priors == {FIR: 0.5, NON_FIR: 0.5}
        assert outcome.documents == 0
        assert outcome.strategy is TrainingStrategy.EXAMPLES

    def test_retraining_replaces_previous_state(self, trained_state):
        Trainer(trained_state).fit_examples([{"text": "bicycle theft", "label": "fir"}])
        assert trained_state.vocab == {"bicycle", "theft"}
        assert trained_state.totals[NON_FIR] == 0
        assert "certificate" not in trained_state.idf

    def test_outcome_reports_vocab_size(self, labeled_examples):
        state = ModelState()
        outcome = Trainer(state).fit_examples(labeled_examples)
        assert outcome.vocab_size == state.vocab_size > 0
        assert outcome.documents == len(labeled_examples)


# ---------------------------------------------------------------------------
# fit_records
# ---------------------------------------------------------------------------

class TestFitRecords:
    """Tests for training from source records."""

    def test_records_train_like_examples(self, labeled_examples):
        records = [{"description": ex["text"], "category": ex["label"]} for ex in labeled_examples]
        from_records = ModelState()
        from_examples = ModelState()
        outcome = Trainer(from_records).fit_records(records)
        Trainer(from_examples).fit_examples(labeled_examples)

        assert outcome.strategy is TrainingStrategy.SOURCE
        assert from_records.cond == from_examples.cond
        assert from_records.idf == from_examples.idf
        assert from_records.priors == from_examples.priors

    def test_missing_description(self):
        state = ModelState()
        Trainer(state).fit_records([{"category": "fir"}, {"description": "noc", "category": "non-fir"}])
        assert state.vocab == {"noc"}
        assert_consistent(state)


# ---------------------------------------------------------------------------
# fit_seed
# ---------------------------------------------------------------------------

class TestFitSeed:
    """Tests for the seed-keyword fallback."""

    def test_seed_vocabulary(self, seed_state):
        assert seed_state.ready
        assert seed_state.vocab == set(SEED_FIR) | set(SEED_NON_FIR)
        assert seed_state.totals[FIR] == len(SEED_FIR)
        assert seed_state.totals[NON_FIR] == len(SEED_NON_FIR)

    def test_seed_priors_and_uniform_idf(self, seed_state):
        assert seed_state.priors == {FIR: 0.5, NON_FIR: 0.5}
        assert all(v == pytest.approx(math.log(1.5)) for v in seed_state.idf.values())
        assert_consistent(seed_state)

    def test_seed_clears_previous_training(self, trained_state):
        outcome = Trainer(trained_state).fit_seed()
        assert outcome.strategy is TrainingStrategy.SEED
        assert "report" not in trained_state.vocab


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestAsExample:

    def test_unsupported_item_becomes_empty_non_fir(self):
        example = as_example(42)  # type: ignore[arg-type]
        assert example.text == ""
        assert example.label is Label.NON_FIR

    def test_reset(self, trained_state):
        trained_state.reset()
        assert not trained_state.ready
        assert trained_state.vocab == set()
        assert trained_state.idf == {}
        assert trained_state.totals == {FIR: 0, NON_FIR: 0}
