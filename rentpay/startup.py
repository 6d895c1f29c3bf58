from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from .database import Base


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables in the database."""
    # Registers the table classes on Base.metadata
    from . import db_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
