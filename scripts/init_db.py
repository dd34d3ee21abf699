"""
Create the users table and optionally seed a few demo users.

Usage:
  python scripts/init_db.py
  python scripts/init_db.py --seed
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import date, datetime
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import select

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.fazbook.models import Base, User  # noqa: E402
from scripts._db_utils import create_script_engine, script_session  # noqa: E402

DEMO_USERS = (
    ("Ada", "Lovelace", "ada@example.com", date(1815, 12, 10)),
    ("Grace", "Hopper", "grace@example.com", date(1906, 12, 9)),
    ("Alan", "Turing", "alan@example.com", date(1912, 6, 23)),
)


def create_tables(*, database_url: str) -> None:
    engine = create_script_engine(database_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()


def seed_demo_users(*, database_url: str) -> int:
    """
    Insert the demo users whose email is not already present. Idempotent.
    """
    added = 0
    with script_session(database_url) as s:
        existing = set(s.scalars(select(User.email)).all())
        now = datetime.utcnow()
        for first, last, email, dob in DEMO_USERS:
            if email in existing:
                continue
            s.add(User(first_name=first, last_name=last, email=email, dob=dob, created_at=now, updated_at=now))
            added += 1
    return added


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Create tables (and optionally seed demo users).")
    parser.add_argument("--seed", action="store_true", help="insert demo users")
    args = parser.parse_args()

    db_url = (os.environ.get("DATABASE_URL") or "sqlite:///fazbook.db").strip()
    create_tables(database_url=db_url)
    print("Tables ready.", flush=True)
    if args.seed:
        added = seed_demo_users(database_url=db_url)
        print(f"Seeded {added} demo user(s).", flush=True)


if __name__ == "__main__":
    main()
