"""Tests for the activity log."""

import logging

from civic_triage.services.activity_logger import ActivityLogger


def test_entry_shape(store):
    assert ActivityLogger(store).log("r1", "created", {"message": "Report created and processed"}) is True

    [entry] = store.logs_for("r1")
    assert entry["action"] == "created"
    assert entry["metadata"] == {"message": "Report created and processed"}
    assert entry["created_by"] == "system"
    assert entry["timestamp"] is not None
    assert entry["id"]


def test_metadata_defaults_to_empty(store):
    ActivityLogger(store, actor="staff-7").log("r1", "viewed")
    [entry] = store.logs_for("r1")
    assert entry["metadata"] == {}
    assert entry["created_by"] == "staff-7"


def test_write_fault_is_swallowed_and_logged(monkeypatch, store, caplog):
    def broken_add(entry):
        raise RuntimeError("quota exceeded")

    monkeypatch.setattr(store, "add_activity_log", broken_add)

    with caplog.at_level(logging.ERROR, logger="civic_triage.services.activity_logger"):
        assert ActivityLogger(store).log("r1", "created") is False

    assert "quota exceeded" in caplog.text
