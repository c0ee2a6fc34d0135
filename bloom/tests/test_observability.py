from __future__ import annotations

import json
import logging

import pytest

from bloom.services.journal_api import observability
from bloom.services.journal_api.observability import REDACTED, log_event, scrub

LOGGER = "bloom.tests.events"


@pytest.fixture
def events(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER)
    return caplog


def test_reflection_values_never_reach_the_log_line(events, monkeypatch):
    monkeypatch.setattr(observability, "BLOOM_LOG_JSON", True)
    log_event(
        logging.getLogger(LOGGER),
        "journal_entry_saved",
        gratitude="my sister called",
        entry={"goals": "run a 5k", "mood": 7},
        history=[{"challenges": "insomnia", "id": "1"}],
        n_entries=3,
    )
    for secret in ("my sister called", "run a 5k", "insomnia"):
        assert secret not in events.text

    (record,) = events.records
    payload = json.loads(record.getMessage())
    assert payload["event"] == "journal_entry_saved"
    assert payload["gratitude"] == REDACTED
    assert payload["entry"] == {"goals": REDACTED, "mood": 7}
    assert payload["history"] == [{"challenges": REDACTED, "id": "1"}]
    assert payload["n_entries"] == 3
    assert payload["ts"].endswith("Z")


def test_plain_text_mode_also_redacts_calendar_notes(events, monkeypatch):
    monkeypatch.setattr(observability, "BLOOM_LOG_JSON", False)
    log_event(logging.getLogger(LOGGER), "calendar_entry_saved", level="warning",
              notes="first dose, nervous", kind="hrt")
    (record,) = events.records
    assert record.levelno == logging.WARNING
    assert record.getMessage().startswith("calendar_entry_saved ")
    assert "kind=hrt" in record.getMessage()
    assert "nervous" not in record.getMessage()


def test_unknown_level_logs_at_info(events):
    log_event(logging.getLogger(LOGGER), "x", level="loud")
    assert events.records[0].levelno == logging.INFO


def test_scrub_leaves_the_input_alone():
    fields = {"progress": "walked", "entry": {"goals": "g"}}
    assert scrub(fields) == {"progress": REDACTED, "entry": {"goals": REDACTED}}
    assert fields == {"progress": "walked", "entry": {"goals": "g"}}
