from __future__ import annotations
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional


DB_PATH: Optional[Path] = None

BUSINESS_FIELDS = [
    "name",
    "vehicleType",
    "orderDate",
    "country",
    "model",
    "range",
    "drive",
    "color",
    "interior",
    "wheels",
    "towHitch",
    "autopilot",
    "deliveryWindow",
    "deliveryLocation",
    "vin",
    "vinReceivedDate",
    "papersReceivedDate",
    "productionDate",
    "typeApproval",
    "typeVariant",
    "deliveryDate",
    "orderToProduction",
    "orderToVin",
    "orderToDelivery",
    "orderToPapers",
    "papersToDelivery",
]

INT_FIELDS = {"orderToProduction", "orderToVin", "orderToDelivery", "orderToPapers", "papersToDelivery"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _quote(column: str) -> str:
    return f'"{column}"'


def _connect() -> sqlite3.Connection:
    assert DB_PATH is not None
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_order(r: sqlite3.Row) -> Dict:
    d = dict(r)
    d["archived"] = bool(d.get("archived"))
    return d


def init_db(db_path: Path) -> None:
    global DB_PATH
    DB_PATH = db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    columns = ",\n".join(
        f'"{f}" {"INTEGER" if f in INT_FIELDS else "TEXT"}' for f in BUSINESS_FIELDS if f not in ("name", "vehicleType")
    )
    with sqlite3.connect(str(db_path)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"""
            CREATE TABLE IF NOT EXISTS orders (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                vehicleType TEXT NOT NULL DEFAULT 'Model Y',
                {columns},
                archived INTEGER NOT NULL DEFAULT 0,
                archivedAt TEXT,
                createdAt TEXT NOT NULL,
                updatedAt TEXT NOT NULL
            )
            """
        )
        cur.execute(
            'CREATE INDEX IF NOT EXISTS orders_natural_key ON orders(name, orderDate, vehicleType)'
        )
        conn.commit()


def ping() -> None:
    with _connect() as conn:
        conn.execute("SELECT 1")


def find_order(name: str, order_date: Optional[str], vehicle_type: str) -> Optional[Dict]:
    # IS matches NULL only against NULL
    with _connect() as conn:
        cur = conn.execute(
            'SELECT * FROM orders WHERE name=? AND "orderDate" IS ? AND "vehicleType"=? ORDER BY createdAt LIMIT 1',
            (name, order_date, vehicle_type),
        )
        r = cur.fetchone()
    return _row_to_order(r) if r else None


def create_order(data: Dict) -> Dict:
    values = {f: data.get(f) for f in BUSINESS_FIELDS}
    if not values.get("name"):
        raise ValueError("order name is required")
    values["vehicleType"] = values.get("vehicleType") or "Model Y"
    now = _now()
    record = {"id": uuid.uuid4().hex, **values, "archived": 0, "archivedAt": None, "createdAt": now, "updatedAt": now}
    cols = list(record)
    with _connect() as conn:
        conn.execute(
            f"INSERT INTO orders({','.join(_quote(c) for c in cols)}) VALUES({','.join('?' for _ in cols)})",
            [record[c] for c in cols],
        )
        conn.commit()
    return get_order(record["id"])


def update_order(order_id: str, data: Dict) -> Dict:
    """Overwrite the given business fields; id, createdAt and archived stay."""
    values = {f: data[f] for f in BUSINESS_FIELDS if f in data}
    values["updatedAt"] = _now()
    assignments = ",".join(f"{_quote(c)}=?" for c in values)
    with _connect() as conn:
        cur = conn.execute(
            f"UPDATE orders SET {assignments} WHERE id=?",
            [*values.values(), order_id],
        )
        conn.commit()
        if cur.rowcount == 0:
            raise KeyError(f"order not found: {order_id}")
    return get_order(order_id)


def get_order(order_id: str) -> Optional[Dict]:
    with _connect() as conn:
        r = conn.execute("SELECT * FROM orders WHERE id=?", (order_id,)).fetchone()
    return _row_to_order(r) if r else None


def list_orders(vehicle_type: Optional[str] = None, include_archived: bool = True) -> List[Dict]:
    sql = "SELECT * FROM orders"
    where = []
    args: list = []
    if vehicle_type:
        where.append('"vehicleType"=?')
        args.append(vehicle_type)
    if not include_archived:
        where.append("archived=0")
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY createdAt"
    with _connect() as conn:
        rows = [_row_to_order(r) for r in conn.execute(sql, args).fetchall()]
    return rows


def count_orders() -> int:
    with _connect() as conn:
        return int(conn.execute("SELECT COUNT(*) FROM orders").fetchone()[0])
