from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import create_engine

from app.fazbook.db import make_sessionmaker, unit_of_work


def create_script_engine(db_url: str):
    return create_engine(
        db_url,
        future=True,
        pool_pre_ping=True,
        pool_recycle=1800,
    )


@contextmanager
def script_session(db_url: str):
    engine = create_script_engine(db_url)
    try:
        with unit_of_work(make_sessionmaker(engine)) as s:
            yield s
    finally:
        engine.dispose()
