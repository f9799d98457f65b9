from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse

from coffee_radar.api.schemas import ScanStatus
from coffee_radar.db.migrate import run_migrations
from coffee_radar.db.repository import fetch_latest_scan_run
from coffee_radar.export.hrefs import DEFAULT_OUTPUT_PATH

app = FastAPI(title="Coffee Radar", version="0.1.0")


@app.on_event("startup")
def startup() -> None:
    run_migrations()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/status/latest", response_model=Optional[ScanStatus])
def get_latest_status() -> Optional[ScanStatus]:
    row = fetch_latest_scan_run()
    if row is None:
        return None
    return ScanStatus(**row)


@app.get("/hrefs")
def get_hrefs() -> FileResponse:
    output_path = Path(os.getenv("COFFEEDESK_OUTPUT_PATH", DEFAULT_OUTPUT_PATH))
    if not output_path.is_file():
        raise HTTPException(status_code=404, detail="No scan output written yet")
    return FileResponse(output_path, media_type="text/plain; charset=utf-8")
