from __future__ import annotations

from typing import Any

from coffee_radar.db.connection import get_conn


def create_scan_run(
    *,
    started_at: str,
    finished_at: str,
    status: str,
    start_url: str,
    pages_visited: int,
    total_products: int,
    available_products: int,
    fresh_products: int,
    hrefs_written: int,
    output_path: str,
    error_message: str | None,
) -> int:
    with get_conn() as conn:
        cur = conn.execute(
            """
            INSERT INTO scan_runs (
              started_at, finished_at, status, start_url, pages_visited,
              total_products, available_products, fresh_products,
              hrefs_written, output_path, error_message
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                started_at,
                finished_at,
                status,
                start_url,
                pages_visited,
                total_products,
                available_products,
                fresh_products,
                hrefs_written,
                output_path,
                error_message,
            ),
        )
        return int(cur.lastrowid)


def fetch_latest_scan_run() -> dict[str, Any] | None:
    with get_conn() as conn:
        row = conn.execute(
            """
            SELECT
              id,
              started_at,
              finished_at,
              status,
              start_url,
              pages_visited,
              total_products,
              available_products,
              fresh_products,
              hrefs_written,
              output_path,
              error_message,
              created_at
            FROM scan_runs
            ORDER BY id DESC
            LIMIT 1
            """
        ).fetchone()
    if row is None:
        return None
    return dict(row)
