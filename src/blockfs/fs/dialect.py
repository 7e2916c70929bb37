"""Dialect-aware SQL helpers — upsert and insert-or-ignore."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import make_url

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession


SUPPORTED_DIALECTS = ("sqlite", "postgresql")


def _canonical(name: str) -> str:
    if name in ("postgresql", "postgres"):
        return "postgresql"
    return name


def get_dialect(engine: Engine | AsyncEngine) -> str:
    """Return 'sqlite', 'postgresql', or the raw dialect name."""
    # AsyncEngine wraps a sync engine
    sync_engine = getattr(engine, "sync_engine", engine)
    return _canonical(sync_engine.dialect.name)


def dialect_from_url(url: str) -> str:
    """Return the dialect for a database URL without creating an engine."""
    return _canonical(make_url(url).get_backend_name())


async def upsert(
    session: AsyncSession,
    dialect: str,
    values: dict[str, Any],
    conflict_keys: list[str],
    model: type,
    update_keys: list[str] | None = None,
) -> int:
    """Dialect-aware upsert into *model*'s table. Returns rowcount.

    Uses ``INSERT ... ON CONFLICT DO UPDATE`` on SQLite and PostgreSQL.
    *update_keys* selects the columns refreshed on conflict; ``None``
    means every non-key column, an empty list means ``DO NOTHING``.
    """
    if dialect not in SUPPORTED_DIALECTS:
        msg = f"Unsupported dialect for upsert: {dialect}"
        raise ValueError(msg)

    from sqlalchemy.dialects import sqlite as sqlite_dialect

    dialect_module = sqlite_dialect
    if dialect == "postgresql":
        from sqlalchemy.dialects import postgresql as pg_dialect

        dialect_module = pg_dialect

    stmt = dialect_module.insert(model).values(**values)

    # Columns to update on conflict
    if update_keys is not None:
        update_cols = {k: v for k, v in values.items() if k in update_keys}
    else:
        update_cols = {k: v for k, v in values.items() if k not in conflict_keys}

    if update_cols:
        stmt = stmt.on_conflict_do_update(
            index_elements=conflict_keys,
            set_=update_cols,
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=conflict_keys)

    result = await session.execute(stmt)
    return result.rowcount  # type: ignore[return-value]


async def insert_ignore(
    session: AsyncSession,
    dialect: str,
    values: dict[str, Any],
    conflict_keys: list[str],
    model: type,
) -> int:
    """Insert a row unless one with the same key exists. Returns rowcount (0 or 1)."""
    return await upsert(session, dialect, values, conflict_keys, model, update_keys=[])
