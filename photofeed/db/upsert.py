"""
Dialect-aware INSERT .. ON CONFLICT helpers.

Join rows (likes, saves, follows) are keyed by their composite primary key,
so an idempotent create is a single statement that lets the database drop
the duplicate instead of a select-then-insert round trip.
"""
from typing import Any, Dict, Iterable, Optional
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise NotImplementedError(f"Upsert is not supported on {dialect}")

async def insert_or_ignore(
    db: AsyncSession,
    model,
    values: Dict[str, Any],
    index_elements: Iterable[str],
) -> None:
    """Insert a row unless one with the same key already exists"""
    insert = _insert_for(db)
    stmt = insert(model).values(**values).on_conflict_do_nothing(
        index_elements=list(index_elements)
    )
    await db.execute(stmt)

async def insert_or_update(
    db: AsyncSession,
    model,
    values: Dict[str, Any],
    index_elements: Iterable[str],
    update_values: Optional[Dict[str, Any]] = None,
) -> None:
    """Insert a row, or overwrite the given columns of the existing one"""
    insert = _insert_for(db)
    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(index_elements),
        set_=update_values if update_values is not None else values,
    )
    await db.execute(stmt)
