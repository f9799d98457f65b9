from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from coffee_radar.collectors.base import CatalogScan
from coffee_radar.collectors.coffeedesk_page import DEFAULT_START_URL
from coffee_radar.collectors.coffeedesk_scraper import collect_coffeedesk_fresh_hrefs
from coffee_radar.db.migrate import run_migrations
from coffee_radar.db.repository import create_scan_run
from coffee_radar.export.hrefs import DEFAULT_OUTPUT_PATH, write_hrefs

logger = logging.getLogger(__name__)


def _record_scan_run(**fields) -> None:
    # Bookkeeping only: a broken run store must never block or mask the scan.
    try:
        run_migrations()
        create_scan_run(**fields)
    except (sqlite3.Error, OSError):
        logger.exception("Could not record scan run")


def run_scan() -> list[Optional[str]]:
    started_at = datetime.now(timezone.utc)
    start_url = os.getenv("COFFEEDESK_START_URL", DEFAULT_START_URL)
    output_path = os.getenv("COFFEEDESK_OUTPUT_PATH", DEFAULT_OUTPUT_PATH)

    scan = CatalogScan()
    written: list[Optional[str]] = []
    status = "SUCCESS"
    error_message: Optional[str] = None

    try:
        scan = collect_coffeedesk_fresh_hrefs()
        written = write_hrefs(scan.hrefs, output_path)
    except Exception as exc:
        status = "FAILED"
        error_message = str(exc) or type(exc).__name__
        logger.error("Scan failed, %s left untouched: %s", output_path, error_message)
        raise
    finally:
        _record_scan_run(
            started_at=started_at.isoformat(),
            finished_at=datetime.now(timezone.utc).isoformat(),
            status=status,
            start_url=start_url,
            pages_visited=len(scan.pages),
            total_products=scan.total_products,
            available_products=scan.available_products,
            fresh_products=scan.fresh_products,
            hrefs_written=len(written),
            output_path=output_path,
            error_message=error_message,
        )
    return written


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    hrefs = run_scan()
    print(f"Scan completed at {datetime.now(timezone.utc).isoformat()} ({len(hrefs)} hrefs)")
