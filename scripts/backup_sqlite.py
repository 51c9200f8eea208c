#!/usr/bin/env python3
"""Snapshot the task database (SQLite only) and keep the newest N copies."""
import argparse
import os
import sqlite3
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import make_url

BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DB_PATH = BASE_DIR / "instance" / "daystrip.db"


def db_path_from_url(database_url, base_dir=BASE_DIR):
    """Map a DATABASE_URL onto a file path; relative paths live under instance/ like the app's."""
    if not database_url:
        return DEFAULT_DB_PATH
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite"):
        raise SystemExit(f"Only SQLite databases can be backed up, got {url.drivername}")
    if url.database in (None, "", ":memory:"):
        raise SystemExit("DATABASE_URL points at an in-memory database; nothing to back up")
    path = Path(url.database)
    if path.is_absolute():
        return path
    return (base_dir / "instance" / path).resolve()


def backup_sqlite(db_path: Path, output_dir: Path, now=None) -> Path:
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    final_path = output_dir / f"{db_path.stem}_{timestamp}.db"
    tmp_path = final_path.with_suffix(".db.tmp")
    tmp_path.unlink(missing_ok=True)

    source_conn = sqlite3.connect(str(db_path))
    try:
        dest_conn = sqlite3.connect(str(tmp_path))
        try:
            source_conn.backup(dest_conn)
        finally:
            dest_conn.close()
    finally:
        source_conn.close()

    os.replace(tmp_path, final_path)
    return final_path


def prune_backups(output_dir: Path, stem: str, keep: int) -> int:
    """Delete all but the `keep` newest backups of the database named `stem`."""
    if keep <= 0:
        return 0
    backups = sorted(
        (p for p in output_dir.glob(f"{stem}_*.db") if p.is_file()),
        key=lambda p: (p.stat().st_mtime, p.name),
    )
    to_delete = backups[:-keep]
    for path in to_delete:
        path.unlink()
    return len(to_delete)


def main(argv=None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Backup the task database.")
    parser.add_argument(
        "--db-path",
        help="SQLite file to back up (default: derived from DATABASE_URL, else instance/daystrip.db).",
    )
    parser.add_argument(
        "--output-dir",
        default=str(BASE_DIR / "instance" / "backups"),
        help="Directory to store backups (default: instance/backups).",
    )
    parser.add_argument("--keep", type=int, default=5, help="Number of backups to keep (default: 5).")
    args = parser.parse_args(argv)

    db_path = Path(args.db_path).resolve() if args.db_path else db_path_from_url(os.environ.get("DATABASE_URL"))
    output_dir = Path(args.output_dir).resolve()
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")

    output_dir.mkdir(parents=True, exist_ok=True)
    backup_path = backup_sqlite(db_path, output_dir)
    deleted = prune_backups(output_dir, db_path.stem, args.keep)

    print(f"Backup created: {backup_path}")
    if deleted:
        print(f"Pruned {deleted} old backups.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
