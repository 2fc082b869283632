"""Database connection utilities for the PostgreSQL record store."""

import logging
from typing import Optional

import asyncpg
from asyncpg import Pool

from ..config import PaginationSettings
from .postgres import PostgresRecordStore


logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages the asyncpg connection pool."""

    def __init__(self, settings: Optional[PaginationSettings] = None):
        self.settings = settings or PaginationSettings()
        self.pool: Optional[Pool] = None

    async def initialize(self) -> None:
        """Initialize the database connection pool."""
        if self.pool is None:
            self.pool = await asyncpg.create_pool(
                self.settings.database_url,
                min_size=self.settings.db_pool_min_size,
                max_size=self.settings.db_pool_max_size,
                command_timeout=self.settings.db_command_timeout
            )
            logger.info("Database connection pool initialized")

    async def close(self) -> None:
        """Close the database connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database connections closed")

    async def store(self, table: str) -> PostgresRecordStore:
        """Get a record store for ``table``, initializing the pool if needed."""
        if not self.pool:
            await self.initialize()
        if self.settings.id_field:
            return PostgresRecordStore(self.pool, table, id_field=self.settings.id_field)
        return PostgresRecordStore(self.pool, table)
