"""
Create the SQL store's tables and seed defaults (criteria + admin user).

Idempotent: existing tables are kept and an existing admin user's password
is NOT overwritten.

Usage:
  DATABASE_URL=postgresql://... python scripts/init_db.py [--demo]
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.prioritizer.db import create_store_engine
from app.prioritizer.seed import ensure_admin_user, seed_demo_data, seed_scoring_criteria
from app.prioritizer.store import SqlStore


def init_db(*, database_url: str | None = None, demo: bool = False) -> SqlStore:
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///prioritizer.db").strip()
    admin_username = (os.environ.get("ADMIN_USERNAME") or "Raj").strip()
    admin_password = os.environ.get("ADMIN_PASSWORD") or "Raj"
    admin_name = (os.environ.get("ADMIN_NAME") or "Raj Kumar").strip()

    store = SqlStore(create_store_engine(db_url))
    store.create_all()
    print("Tables ready.", flush=True)

    created = seed_scoring_criteria(store)
    print(f"Scoring criteria seeded: {created}", flush=True)
    admin = ensure_admin_user(store, username=admin_username, password=admin_password, name=admin_name)
    print(f"Admin user: {admin.username} (id={admin.id})", flush=True)

    if demo:
        n = seed_demo_data(store, created_by_id=admin.id)
        print(f"Demo features seeded: {n}", flush=True)
    return store


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Create tables and seed the SQL store.")
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL.")
    parser.add_argument("--demo", action="store_true", help="Also seed demo features and comments.")
    args = parser.parse_args()
    init_db(database_url=args.database_url, demo=args.demo)


if __name__ == "__main__":
    main()
