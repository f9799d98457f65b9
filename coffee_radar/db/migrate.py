from __future__ import annotations

from pathlib import Path

from coffee_radar.db.connection import get_conn

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def run_migrations() -> None:
    # Every migration is written with IF NOT EXISTS, so re-running is a no-op.
    with get_conn() as conn:
        for migration_file in sorted(MIGRATIONS_DIR.glob("*.sql")):
            conn.executescript(migration_file.read_text(encoding="utf-8"))
