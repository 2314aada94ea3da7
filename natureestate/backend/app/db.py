# backend/app/db.py
from __future__ import annotations

import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from .config import Settings

log = logging.getLogger("natureestate.db")


class Base(DeclarativeBase):
    pass


def _enable_sqlite_fks(dbapi_conn, _record) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


class Database:
    """
    Process-scoped engine + session factory.

    Created once by create_app() and stored on app.state.db; routes never
    touch it directly, they receive a Session from get_db().
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self.engine: Engine = create_engine(
            url,
            pool_pre_ping=True,
            echo=echo,
            future=True,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_fks)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url, echo=bool(settings.sql_echo))

    def create_all(self) -> None:
        # models must be imported so every table is registered on Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        log.info("disposing engine pool")
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    IMPORTANT (Postgres):
    If any SQL statement fails, the transaction is aborted and the session
    cannot run further statements until a rollback happens.

    This dependency guarantees rollback on exceptions so errors don't cascade
    into "InFailedSqlTransaction" on later queries in the same request.
    """
    database: Database = request.app.state.db
    db = database.SessionLocal()
    try:
        yield db
    except Exception:
        try:
            db.rollback()
        except Exception:
            log.exception("rollback failed")
        raise
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
