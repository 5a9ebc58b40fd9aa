"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from complaint_triage.config import Settings
from complaint_triage.pipeline import source_from_settings
from complaint_triage.sources import MongoRecordSource


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.mongo_uri is None
        assert settings.mongo_db == "complaints"
        assert settings.collection == "complaints"
        assert settings.fetch_limit == 2000
        assert settings.fetch_timeout is None
        assert settings.fetch_attempts == 1
        assert settings.log_level == "WARNING"

    def test_overrides(self):
        settings = Settings.from_env({
            "COMPLAINT_TRIAGE_MONGO_URI": "mongodb://db:27017",
            "COMPLAINT_TRIAGE_MONGO_DB": "intake",
            "COMPLAINT_TRIAGE_COLLECTION": "tickets",
            "COMPLAINT_TRIAGE_FETCH_LIMIT": "500",
            "COMPLAINT_TRIAGE_FETCH_TIMEOUT": "2.5",
            "COMPLAINT_TRIAGE_FETCH_ATTEMPTS": "3",
            "COMPLAINT_TRIAGE_LOG_LEVEL": "debug",
        })
        assert settings.mongo_uri == "mongodb://db:27017"
        assert settings.mongo_db == "intake"
        assert settings.collection == "tickets"
        assert settings.fetch_limit == 500
        assert settings.fetch_timeout == 2.5
        assert settings.fetch_attempts == 3
        assert settings.log_level == "DEBUG"

    def test_blank_values_use_defaults(self):
        settings = Settings.from_env({
            "COMPLAINT_TRIAGE_MONGO_URI": "",
            "COMPLAINT_TRIAGE_FETCH_LIMIT": " ",
        })
        assert settings.mongo_uri is None
        assert settings.fetch_limit == 2000

    @pytest.mark.parametrize(
        "name, value",
        [("FETCH_LIMIT", "many"), ("FETCH_TIMEOUT", "soon"), ("FETCH_ATTEMPTS", "1.5")],
    )
    def test_invalid_numbers_name_the_variable(self, name, value):
        with pytest.raises(ValueError, match=f"COMPLAINT_TRIAGE_{name}"):
            Settings.from_env({f"COMPLAINT_TRIAGE_{name}": value})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("COMPLAINT_TRIAGE_FETCH_LIMIT", "7")
        assert Settings.from_env().fetch_limit == 7


class TestSourceFromSettings:

    def test_no_uri_means_no_source(self):
        assert source_from_settings(Settings()) is None

    def test_mongo_source(self):
        source = source_from_settings(
            Settings(mongo_uri="mongodb://db:27017", mongo_db="intake", collection="tickets")
        )
        assert isinstance(source, MongoRecordSource)
        assert (source.database, source.collection) == ("intake", "tickets")
