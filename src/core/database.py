"""Supabase database service for the Portfol API."""

import logging
from typing import Optional, Dict, Any, List, Sequence
from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions

from src.core.config import get_settings

logger = logging.getLogger(__name__)


class DatabaseService:
    """
    Service for Supabase database operations.

    Generic table helpers used by the repositories. Uses the sync Supabase
    client but is exposed through an async interface for consistency with
    the rest of the application. Failures are logged and reported as
    ``None`` / ``False`` / ``[]``; callers decide whether that is fatal.
    """

    def __init__(self, client: Optional[Client] = None):
        """Initialize with an optional pre-built client."""
        self._client = client

    @property
    def client(self) -> Client:
        """Lazy initialization of Supabase client."""
        if self._client is None:
            settings = get_settings()
            if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
                raise ValueError("Supabase credentials not configured")

            self._client = create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_KEY,
                options=ClientOptions(
                    postgrest_client_timeout=30,
                    storage_client_timeout=30
                )
            )
            logger.info("Supabase client initialized")
        return self._client

    @staticmethod
    def _apply_filters(query, filters: Optional[Dict[str, Any]]):
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return query

    # ===========================================
    # Read Operations
    # ===========================================

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        columns: str = "*",
        order_by: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Fetch rows matching equality filters."""
        try:
            query = self._apply_filters(self.client.table(table).select(columns), filters)
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit:
                query = query.limit(limit)

            response = query.execute()
            return list(response.data or [])

        except Exception as e:
            logger.error(f"Failed to select from {table} {filters}: {e}")
            return []

    async def select_one(
        self,
        table: str,
        filters: Dict[str, Any],
        columns: str = "*"
    ) -> Optional[Dict[str, Any]]:
        """Fetch a single row, or None if missing."""
        rows = await self.select(table, filters, columns=columns, limit=1)
        if rows:
            return rows[0]

        logger.warning(f"No {table} row for {filters}")
        return None

    async def select_in(
        self,
        table: str,
        column: str,
        values: Sequence[Any],
        columns: str = "*"
    ) -> List[Dict[str, Any]]:
        """Fetch rows whose column is in the given values."""
        if not values:
            return []
        try:
            response = (
                self.client.table(table)
                .select(columns)
                .in_(column, list(values))
                .execute()
            )
            return list(response.data or [])

        except Exception as e:
            logger.error(f"Failed to select {table}.{column} in {values}: {e}")
            return []

    # ===========================================
    # Write Operations
    # ===========================================

    async def insert(self, table: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Insert a row and return it as stored."""
        try:
            response = self.client.table(table).insert(data).execute()

            if response.data:
                row = response.data[0]
                logger.info(f"Inserted into {table}: {row.get('id')}")
                return row

            logger.error(f"Insert into {table} returned no data")
            return None

        except Exception as e:
            logger.error(f"Failed to insert into {table}: {e}")
            return None

    async def update(
        self,
        table: str,
        filters: Dict[str, Any],
        updates: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Apply a partial update and return the first updated row."""
        try:
            query = self._apply_filters(self.client.table(table).update(updates), filters)
            response = query.execute()

            if response.data:
                logger.info(f"Updated {table} {filters}: {list(updates.keys())}")
                return response.data[0]

            logger.warning(f"Update returned no data for {table} {filters}")
            return None

        except Exception as e:
            logger.error(f"Failed to update {table} {filters}: {e}")
            return None

    async def upsert(
        self,
        table: str,
        data: Dict[str, Any],
        on_conflict: str
    ) -> Optional[Dict[str, Any]]:
        """Update-or-insert keyed by a unique column."""
        try:
            response = (
                self.client.table(table)
                .upsert(data, on_conflict=on_conflict)
                .execute()
            )

            if response.data:
                logger.info(f"Upserted {table} on {on_conflict}={data.get(on_conflict)}")
                return response.data[0]

            logger.error(f"Upsert into {table} returned no data")
            return None

        except Exception as e:
            logger.error(f"Failed to upsert into {table}: {e}")
            return None

    async def delete(self, table: str, filters: Dict[str, Any]) -> bool:
        """Hard delete matching rows."""
        try:
            query = self._apply_filters(self.client.table(table).delete(), filters)
            query.execute()
            logger.info(f"Deleted from {table} {filters}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete from {table} {filters}: {e}")
            return False

    # ===========================================
    # Auth
    # ===========================================

    async def get_user_id(self, access_token: str) -> Optional[str]:
        """Resolve a bearer token to the owning account id."""
        try:
            response = self.client.auth.get_user(access_token)
            if response and response.user:
                return response.user.id
            return None

        except Exception as e:
            logger.warning(f"Token verification failed: {e}")
            return None

    # ===========================================
    # Health Check
    # ===========================================

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            self.client.table("profiles").select("user_id").limit(1).execute()
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
