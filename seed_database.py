#!/usr/bin/env python3
"""
Seed the survey records database from the command line.

By default the default dataset is inserted only when the database holds
no records.  With ``--force`` every existing record is deleted first and
the default dataset is loaded again.

Usage:
    python seed_database.py --db ./survey_data.db
    python seed_database.py --db ./survey_data.db --force

If --db is omitted, ``DATABASE_URL`` (or its default) is used.
"""

import argparse
import asyncio
import sqlite3
import sys
from typing import List, Optional

from survey_data_api.app.core.config import settings
from survey_data_api.app.core.db import RecordStore, resolve_database_path
from survey_data_api.app.core.errors import StoreFailure
from survey_data_api.app.core.logging_config import setup_logging
from survey_data_api.app.services.record_service import RecordService


async def run(database_path: str, force: bool) -> int:
    store = RecordStore(database_path)
    store.init_schema()
    service = RecordService(store)
    if force:
        inserted = await service.reseed()
        print(f"[+] Reseeded {inserted} records into {database_path}")
    else:
        inserted = await service.ensure_seeded()
        if inserted:
            print(f"[+] Seeded {inserted} records into {database_path}")
        else:
            print(f"[=] {database_path} already holds {await service.count()} records; nothing to do")
    return inserted


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Seed the survey records database (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--force", action="store_true", help="Delete all records before seeding")
    args = ap.parse_args(argv)

    setup_logging(settings.log_level, settings.log_file)
    database_path = resolve_database_path(args.db or settings.database_url)
    try:
        asyncio.run(run(database_path, args.force))
    except (StoreFailure, sqlite3.Error) as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
