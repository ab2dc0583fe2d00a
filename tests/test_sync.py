"""Tests for the sync orchestrator."""

from datetime import datetime, timezone

import requests

from order_sync.sync import (
    ALL_SOURCES,
    CURRENT_QUARTER_SOURCES,
    MODEL_3_SOURCES,
    MODEL_Y_SOURCES,
    AggregateSyncResult,
    SourceConfig,
    run_sync,
    sources_for_mode,
)

import pytest

from order_sync import sync as sync_module

from conftest import FakeResponse, FakeSession, MemoryStore, model_y_header, model_y_row, to_csv


FIXED = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

CURRENT = SourceConfig("sheet-y", "100", "model_y", "Current Quarter")
OLDER = SourceConfig("sheet-y", "200", "model_y_q3", "Q3 2025")
M3 = SourceConfig("sheet-3", "100", "model_3", "Model 3 Data")


def test_single_source_sync(memory_store, memory_settings, sheets_cfg, url_for, model_y_csv):
    session = FakeSession({url_for(CURRENT): FakeResponse(model_y_csv)})
    result = run_sync([CURRENT], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg, now=lambda: FIXED)

    assert (result.created, result.updated, result.skipped) == (3, 0, 0)
    assert result.errors == []
    assert [s.label for s in result.sheets] == ["Current Quarter"]
    assert memory_settings.calls == [(FIXED, 3)]

    clara = memory_store.find_order("Clara", None, "Model Y")
    assert clara is not None
    assert clara["country"] == "ch"
    assert clara["range"] == "maximale_reichweite"
    bernd = memory_store.find_order("Bernd", "07.01.2026", "Model Y")
    assert bernd["towHitch"] is None
    assert bernd["range"] == "standard"


def test_second_run_creates_nothing(memory_store, memory_settings, sheets_cfg, url_for, model_y_csv):
    session = FakeSession({url_for(CURRENT): FakeResponse(model_y_csv)})
    run_sync([CURRENT], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg)
    count = len(memory_store.orders)
    again = run_sync([CURRENT], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg)
    assert again.created == 0
    assert again.updated == 3
    assert len(memory_store.orders) == count


def test_fetch_failure_only_affects_its_source(memory_store, memory_settings, sheets_cfg, url_for, model_y_csv, model_3_csv):
    session = FakeSession({
        url_for(OLDER): FakeResponse("", status_code=500, reason="Internal Server Error"),
        url_for(CURRENT): requests.ConnectionError("connection reset"),
        url_for(M3): FakeResponse(model_3_csv),
    })
    result = run_sync([OLDER, CURRENT, M3], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg)

    assert [len(s.errors) for s in result.sheets] == [1, 1, 0]
    assert "500" in result.sheets[0].errors[0]
    assert "connection reset" in result.sheets[1].errors[0]
    assert result.created == 2
    assert len(result.errors) == 2
    assert len(memory_settings.calls) == 1


def test_sheet_without_data_rows_is_reported(memory_store, memory_settings, sheets_cfg, url_for, model_3_csv):
    session = FakeSession({
        url_for(CURRENT): FakeResponse("Name,Bestelldatum\n\n"),
        url_for(M3): FakeResponse(model_3_csv),
    })
    result = run_sync([CURRENT, M3], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg)
    assert result.sheets[0].errors == ["No data rows found in sheet Current Quarter"]
    assert result.sheets[1].created == 2


def test_model_3_sheet_applies_vehicle_rules(memory_store, memory_settings, sheets_cfg, url_for, model_3_csv):
    session = FakeSession({url_for(M3): FakeResponse(model_3_csv)})
    run_sync([M3], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg)
    dana = memory_store.find_order("Dana", "10.01.2026", "Model 3")
    assert dana["towHitch"] == "nv"
    assert dana["range"] == "maximale_reichweite"
    assert dana["country"] == "nl"
    emil = memory_store.find_order("Emil", "11.01.2026", "Model 3")
    assert emil["range"] == "standard"
    assert emil["country"] == "de"


def test_same_tab_id_on_different_spreadsheets_is_fetched_separately(memory_store, memory_settings, sheets_cfg, url_for, model_y_csv, model_3_csv):
    session = FakeSession({url_for(CURRENT): FakeResponse(model_y_csv), url_for(M3): FakeResponse(model_3_csv)})
    run_sync([CURRENT, M3], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg)
    assert [c["url"] for c in session.calls] == [url_for(CURRENT), url_for(M3)]


def test_sqlite_store_idempotence(sqlite_db, settings_file, sheets_cfg, url_for, model_y_csv):
    session = FakeSession({url_for(CURRENT): FakeResponse(model_y_csv)})
    first = run_sync([CURRENT], sqlite_db, settings_file, session=session, sheets_cfg=sheets_cfg, now=lambda: FIXED)
    before = sqlite_db.count_orders()
    second = run_sync([CURRENT], sqlite_db, settings_file, session=session, sheets_cfg=sheets_cfg, now=lambda: FIXED)

    assert first.created == 3
    assert second.created == 0
    assert second.updated == 3
    assert sqlite_db.count_orders() == before == 3
    assert settings_file.get_sync_metadata() == {"last_sync_time": FIXED.isoformat(), "last_sync_count": 3}


def test_aggregate_sums_and_serializes():
    from order_sync.merge import SyncResult

    total = AggregateSyncResult()
    total.add(SyncResult(label="a", created=1, updated=2, skipped=0, errors=[]))
    total.add(SyncResult(label="b", created=0, updated=1, skipped=1, errors=["boom"]))
    d = total.to_dict()
    assert (d["created"], d["updated"], d["skipped"]) == (1, 3, 1)
    assert d["errors"] == ["boom"]
    assert [s["label"] for s in d["sheets"]] == ["a", "b"]


def test_source_modes():
    assert sources_for_mode("current") == CURRENT_QUARTER_SOURCES
    assert sources_for_mode("all") == MODEL_Y_SOURCES
    assert sources_for_mode("model3") == MODEL_3_SOURCES
    assert sources_for_mode("everything") == ALL_SOURCES
    assert [s.schema_variant for s in MODEL_Y_SOURCES] == ["model_y_q3", "model_y", "model_y"]
    with pytest.raises(ValueError):
        sources_for_mode("nope")


def test_row_error_names_the_sheet_row_after_blank_lines(memory_settings, sheets_cfg, url_for):
    text = (
        to_csv([model_y_header(), model_y_row(name="A", order_date="02.01.2026")])
        + "\n"
        + ",,\n"
        + to_csv([model_y_row(name="BAD", order_date="03.01.2026")])
    )
    store = MemoryStore(fail_names={"BAD"})
    session = FakeSession({url_for(CURRENT): FakeResponse(text)})
    result = run_sync([CURRENT], store, memory_settings, session=session, sheets_cfg=sheets_cfg)

    assert result.created == 1
    assert result.errors == ["Failed to sync BAD (row 5): disk I/O error"]


class ClosingSession(FakeSession):
    closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


def test_owned_session_is_closed(monkeypatch, memory_store, memory_settings, sheets_cfg, url_for, model_y_csv):
    owned = ClosingSession({url_for(CURRENT): FakeResponse(model_y_csv)})
    monkeypatch.setattr(sync_module, "build_session", lambda cfg: owned)
    result = run_sync([CURRENT], memory_store, memory_settings, sheets_cfg=sheets_cfg)
    assert result.created == 3
    assert owned.closed


def test_passed_session_is_left_open(memory_store, memory_settings, sheets_cfg, url_for, model_y_csv):
    session = ClosingSession({url_for(CURRENT): FakeResponse(model_y_csv)})
    run_sync([CURRENT], memory_store, memory_settings, session=session, sheets_cfg=sheets_cfg)
    assert not session.closed
