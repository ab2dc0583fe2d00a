from __future__ import annotations
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from order_sync import config
from order_sync.sync import run_sync, sources_for_mode
from . import db
from . import settings as app_settings


log = logging.getLogger(__name__)

app = FastAPI(title="Order Sheet Sync API", version="0.1.0")
db.init_db(config.DB_PATH)
app_settings.init_settings(config.SETTINGS_PATH)


class SheetResult(BaseModel):
    label: str
    created: int
    updated: int
    skipped: int
    errors: List[str] = []


class SyncResponse(BaseModel):
    created: int
    updated: int
    skipped: int
    errors: List[str] = []
    sheets: List[SheetResult] = []


class SyncMetadata(BaseModel):
    last_sync_time: Optional[str] = None
    last_sync_count: Optional[int] = None


@app.get("/health")
def health():
    try:
        db.ping()
    except Exception as e:
        log.error(f"health: database unreachable: {e}")
        return JSONResponse({"status": "error", "message": "Database unreachable"}, status_code=503)
    return {"status": "ok"}


@app.post("/orders/sync", response_model=SyncResponse)
def sync_orders(
    mode: str = "current",
    sync_all: bool = Query(False, alias="all"),
) -> SyncResponse:
    if sync_all:
        mode = "all"
    try:
        sources = sources_for_mode(mode)
    except ValueError as e:
        raise HTTPException(400, str(e))
    try:
        result = run_sync(sources, store=db, settings_store=app_settings)
    except Exception as e:
        log.exception("Sync failed")
        raise HTTPException(500, f"Sync failed: {e}")
    return SyncResponse(**result.to_dict())


@app.get("/orders")
def list_orders(vehicle_type: Optional[str] = None, include_archived: bool = True) -> List[Dict]:
    return db.list_orders(vehicle_type=vehicle_type, include_archived=include_archived)


@app.get("/settings/sync", response_model=SyncMetadata)
def get_sync_metadata() -> SyncMetadata:
    return SyncMetadata(**app_settings.get_sync_metadata())
