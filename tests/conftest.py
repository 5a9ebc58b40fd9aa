"""Shared test fixtures for complaint-triage tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from complaint_triage.classifier import ComplaintClassifier
from complaint_triage.models import ModelState
from complaint_triage.trainer import Trainer

# Balanced labeled fixture used for the training-set accuracy check
LABELED_EXAMPLES: list[dict[str, str]] = [
    {"text": "My phone was stolen from the bus", "label": "fir"},
    {"text": "There was a robbery at my home", "label": "fir"},
    {"text": "Victim of assault near market", "label": "fir"},
    {"text": "Someone threatened me with a knife", "label": "fir"},
    {"text": "Car theft reported last night", "label": "fir"},
    {"text": "Apply for police verification certificate", "label": "non-fir"},
    {"text": "Need address proof and NOC", "label": "non-fir"},
    {"text": "Request clearance certificate for passport", "label": "non-fir"},
    {"text": "Document verification required", "label": "non-fir"},
    {"text": "Service issue with helpdesk", "label": "non-fir"},
    {"text": "Burglary attempt in apartment", "label": "fir"},
    {"text": "Pickpocketing incident reported", "label": "fir"},
    {"text": "Harassment complaint at workplace", "label": "fir"},
    {"text": "Extortion calls received", "label": "fir"},
    {"text": "Application for character certificate", "label": "non-fir"},
    {"text": "Lost document request", "label": "non-fir"},
    {"text": "Passport police verification appointment", "label": "non-fir"},
    {"text": "Attack by unknown persons", "label": "fir"},
    {"text": "Molestation case report", "label": "fir"},
    {"text": "Need NOC for address change", "label": "non-fir"},
    {
        "text": "I lost my personal item and could not find it despite "
                "searching the surrounding area",
        "label": "non-fir",
    },
]


@pytest.fixture
def labeled_examples() -> list[dict[str, str]]:
    """Copy of the balanced labeled fixture."""
    return [dict(ex) for ex in LABELED_EXAMPLES]


@pytest.fixture
def empty_state() -> ModelState:
    """A fresh, untrained model state."""
    return ModelState()


@pytest.fixture
def trained_state(labeled_examples) -> ModelState:
    """Model state trained on the labeled fixture."""
    state = ModelState()
    Trainer(state).fit_examples(labeled_examples)
    return state


@pytest.fixture
def seed_state() -> ModelState:
    """Model state trained from the seed keyword lists."""
    state = ModelState()
    Trainer(state).fit_seed()
    return state


@pytest.fixture
def trained_classifier(trained_state: ModelState) -> ComplaintClassifier:
    return ComplaintClassifier(trained_state)


@pytest.fixture
def seed_classifier(seed_state: ModelState) -> ComplaintClassifier:
    return ComplaintClassifier(seed_state)


@pytest.fixture
def examples_file(tmp_path: Path, labeled_examples) -> Path:
    """Labeled fixture written to a JSON file."""
    file = tmp_path / "examples.json"
    file.write_text(json.dumps(labeled_examples), encoding="utf-8")
    return file


@pytest.fixture
def records_file(tmp_path: Path, labeled_examples) -> Path:
    """Labeled fixture written as source records (description/category)."""
    file = tmp_path / "records.json"
    records = [{"description": ex["text"], "category": ex["label"]} for ex in labeled_examples]
    file.write_text(json.dumps(records), encoding="utf-8")
    return file
