"""Shared test fixtures for order_sync tests."""

import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="order-sync-tests-"))
os.environ.setdefault("ORDER_SYNC_DB_PATH", str(_TMP / "orders.sqlite3"))
os.environ.setdefault("ORDER_SYNC_SETTINGS_PATH", str(_TMP / "settings.json"))

import pytest

from order_sync.columns import MODEL_3_COLUMNS, MODEL_Y_COLUMNS
from order_sync.sheets_client import SheetsConfig, export_url


MODEL_Y_WIDTH = 26
MODEL_3_WIDTH = 27


def build_row(cols, width, **values):
    """Place field values at their column positions in a blank row."""
    row = [""] * width
    for field_name, value in values.items():
        row[getattr(cols, field_name)] = value
    return row


def to_csv(rows):
    def quote(cell):
        if any(ch in cell for ch in ',"\n'):
            return '"' + cell.replace('"', '""') + '"'
        return cell

    return "\n".join(",".join(quote(c) for c in row) for row in rows) + "\n"


def model_y_header():
    return build_row(
        MODEL_Y_COLUMNS, MODEL_Y_WIDTH,
        name="Name", order_date="Bestelldatum", country="Land", model="Modell",
        drive="Antrieb", color="Farbe", interior="Innen", wheels="Felgen",
        tow_hitch="AHK", autopilot="Autopilot",
    )


def model_3_header():
    return build_row(
        MODEL_3_COLUMNS, MODEL_3_WIDTH,
        name="Name", order_date="Bestelldatum", country="Land", model="Model",
        drive="Antrieb", battery="Akku", color="Farbe", tow_hitch="AHK",
    )


def model_y_row(**values):
    return build_row(MODEL_Y_COLUMNS, MODEL_Y_WIDTH, **values)


def model_3_row(**values):
    return build_row(MODEL_3_COLUMNS, MODEL_3_WIDTH, **values)


class FakeResponse:
    def __init__(self, text="", status_code=200, reason="OK"):
        self.text = text
        self.status_code = status_code
        self.reason = reason
        self.encoding = None

    @property
    def ok(self):
        return 200 <= self.status_code < 400


class FakeSession:
    """Stands in for requests.Session; serves canned responses by URL."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self.headers = {}

    def get(self, url, allow_redirects=True, timeout=None):
        self.calls.append({"url": url, "allow_redirects": allow_redirects, "timeout": timeout})
        resp = self.responses.get(url)
        if isinstance(resp, Exception):
            raise resp
        if resp is None:
            return FakeResponse("", status_code=404, reason="Not Found")
        return resp


class MemoryStore:
    """In-memory order store keyed by (name, orderDate, vehicleType)."""

    def __init__(self, fail_names=()):
        self.orders = {}
        self.fail_names = set(fail_names)
        self._next = 1

    def find_order(self, name, order_date, vehicle_type):
        for o in self.orders.values():
            if o["name"] == name and o["orderDate"] == order_date and o["vehicleType"] == vehicle_type:
                return dict(o)
        return None

    def create_order(self, data):
        if data.get("name") in self.fail_names:
            raise RuntimeError("disk I/O error")
        order = {"id": str(self._next), **data, "archived": False, "createdAt": "t0", "updatedAt": "t0"}
        self._next += 1
        self.orders[order["id"]] = order
        return dict(order)

    def update_order(self, order_id, data):
        if data.get("name") in self.fail_names:
            raise RuntimeError("disk I/O error")
        self.orders[order_id].update(data)
        self.orders[order_id]["updatedAt"] = "t1"
        return dict(self.orders[order_id])


class MemorySettings:
    def __init__(self):
        self.calls = []

    def upsert_sync_metadata(self, last_sync_time, last_sync_count):
        self.calls.append((last_sync_time, last_sync_count))


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def memory_settings():
    return MemorySettings()


@pytest.fixture
def sheets_cfg():
    return SheetsConfig()


@pytest.fixture
def url_for(sheets_cfg):
    def _url(source):
        return export_url(sheets_cfg, source.remote_id, source.tab_id)

    return _url


@pytest.fixture
def sqlite_db(tmp_path):
    from server import db

    db.init_db(tmp_path / "orders.sqlite3")
    return db


@pytest.fixture
def settings_file(tmp_path):
    from server import settings

    settings.init_settings(tmp_path / "settings.json")
    return settings


@pytest.fixture
def model_y_csv():
    rows = [
        ["Tesla Model Y Bestellungen Q1 2026"],
        model_y_header(),
        model_y_row(
            name="Anna", order_date="05.01.2026", country="🇩🇪 Deutschland", model="Premium",
            drive="Allradantrieb", color="Pearl White", interior="Schwarz", wheels="19''",
            tow_hitch="Ja", autopilot="Kein", delivery_location="Berlin",
            vin_received_date="20.01.2026", order_to_vin="15",
        ),
        model_y_row(
            name="Bernd", order_date="07.01.2026", country="Österreich", model="Standard",
            drive="Hinterradantrieb", color="Stealth Grey", interior="Weiß", wheels="18 Zoll",
            tow_hitch="-", autopilot="FSD",
        ),
        model_y_row(name="", order_date="08.01.2026"),
        model_y_row(
            name="Clara", order_date="-", country="Schweiz", model="Performance", drive="AWD",
            color="Ultra Red", wheels='21"',
        ),
    ]
    return to_csv(rows)


@pytest.fixture
def model_3_csv():
    rows = [
        model_3_header(),
        model_3_row(
            name="Dana", order_date="10.01.2026", country="🇳🇱 Niederlande", model="Performance",
            drive="AWD", battery="-", color="Marine Blue", tow_hitch="Ja", wheels="20''",
        ),
        model_3_row(
            name="Emil", order_date="11.01.2026", country="DE", model="Standard",
            drive="RWD", battery="Std", tow_hitch="Nein",
        ),
    ]
    return to_csv(rows)
