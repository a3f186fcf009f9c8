"""SQLite migrations for the cache store."""

from __future__ import annotations

from sqlalchemy import Engine, text

from .models import Base


def _initial_migration(engine: Engine) -> None:
    with engine.begin() as conn:
        Base.metadata.create_all(conn)
        conn.execute(
            text(
                "CREATE TABLE IF NOT EXISTS dataservice_schema_migrations "
                "(version INTEGER PRIMARY KEY)"
            )
        )
        result = conn.execute(text("SELECT MAX(version) FROM dataservice_schema_migrations"))
        current = result.scalar()
        if current is None:
            conn.execute(text("INSERT INTO dataservice_schema_migrations (version) VALUES (1)"))


def apply_migrations(engine: Engine) -> None:
    _initial_migration(engine)


__all__ = ["apply_migrations"]
