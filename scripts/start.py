#!/usr/bin/env python3
"""
Production startup script.

1. Validates PORT
2. With STORE_BACKEND=sql, creates tables + seeds (init_db.py)
3. Starts gunicorn (replaces this process via os.execvp)

Usage:
    python scripts/start.py

Note: with the in-memory store every gunicorn worker holds its own copy of
the data, so this runs a single worker unless STORE_BACKEND=sql.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def main() -> None:
    # Step 0: Validate PORT environment variable
    port = os.environ.get("PORT", "").strip()
    if not port:
        print("WARNING: PORT not set, using default 8080", flush=True)
        port = "8080"

    try:
        port_int = int(port)
        if port_int < 1 or port_int > 65535:
            raise ValueError("Port out of range")
    except ValueError:
        print(f"ERROR: Invalid PORT value '{port}'. Must be integer 1-65535.", flush=True)
        sys.exit(1)

    print(f"PORT={port} validated", flush=True)

    backend = (os.environ.get("STORE_BACKEND") or "memory").strip().lower()

    # Step 1: Tables + seed (SQL store only; the memory store seeds itself on boot)
    if backend == "sql":
        print("=== Initializing SQL store ===", flush=True)
        from scripts.init_db import init_db

        try:
            init_db()
        except Exception as e:
            print(f"Store init failed: {e}", flush=True)
            sys.exit(1)

    workers = (os.environ.get("WEB_CONCURRENCY") or "").strip() or ("2" if backend == "sql" else "1")

    # Step 2: Start gunicorn (exec replaces this process)
    print("=== Starting gunicorn ===", flush=True)
    print(f"Gunicorn binding to 0.0.0.0:{port} with {workers} worker(s)", flush=True)
    print("Health check endpoint ready at /healthz", flush=True)

    os.execvp(
        "gunicorn",
        [
            "gunicorn",
            "app.wsgi:app",
            "--bind", f"0.0.0.0:{port}",
            "--workers", workers,
            "--timeout", "60",
            "--access-logfile", "-",
            "--error-logfile", "-",
        ],
    )


if __name__ == "__main__":
    main()
