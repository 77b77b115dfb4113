"""
Content Repository

Read access to externally owned content tables (`articles`, `content_items`,
...). Table names arrive in task parameters, so they are validated as plain
SQL identifiers and addressed through lightweight `table()` / `column()`
constructs instead of mapped models.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy import DateTime, Text, cast, column, literal_column, select, table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import RecordFetchError, TaskValidationError

logger = logging.getLogger("content_ai.content")


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")

ContentRecord = Dict[str, Any]


def validate_table_name(name: str) -> str:
    """
    Return `name` if it is a safe, unqualified SQL identifier.

    Raises
    ------
    ValueError
        If the name is empty or contains anything but letters, digits and
        underscores.
    """
    if not isinstance(name, str) or not TABLE_NAME_PATTERN.match(name):
        raise ValueError(f"Invalid table_name '{name}'")
    return name


def parse_timestamp(value: Union[str, datetime], field: str = "published_at") -> datetime:
    """
    Parse an ISO 8601 date or timestamp into an aware datetime.

    A trailing `Z` is accepted and naive values are taken as UTC.

    Raises
    ------
    TaskValidationError
        If the value is not an ISO 8601 date or timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise TaskValidationError(
                f"Invalid {field} '{value}': expected an ISO 8601 date or timestamp"
            ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ContentRepository:
    """
    Fetches content records as plain dictionaries.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch_filtered(
        self,
        table_name: str,
        equals: Optional[Mapping[str, Any]] = None,
        published_from: Optional[Union[str, datetime]] = None,
        published_to: Optional[Union[str, datetime]] = None,
        limit: Optional[int] = None,
    ) -> List[ContentRecord]:
        """
        Fetch records matching simple column filters.

        Parameters
        ----------
        table_name : str
            Content table to read.
        equals : Mapping[str, Any], optional
            Column/value pairs that must match exactly.
        published_from, published_to : str or datetime, optional
            Inclusive bounds on `published_at`, ISO 8601 when given as text.
        limit : int, optional
            Maximum number of rows.
        """
        source = table(validate_table_name(table_name))
        stmt = select(literal_column("*")).select_from(source)

        for name, value in (equals or {}).items():
            target = column(validate_table_name(name))
            if isinstance(value, str):
                # text columns and enum columns both compare as text
                target = cast(target, Text)
            stmt = stmt.where(target == value)
        published_at = column("published_at", DateTime(timezone=True))
        if published_from:
            stmt = stmt.where(published_at >= parse_timestamp(published_from, "date_from"))
        if published_to:
            stmt = stmt.where(published_at <= parse_timestamp(published_to, "date_to"))
        if limit:
            stmt = stmt.limit(int(limit))

        return await self._fetch(stmt, table_name)

    async def fetch_by_ids(
        self,
        table_name: str,
        record_ids: Sequence[Any],
    ) -> List[ContentRecord]:
        """
        Fetch records by identifier, ordered as in `record_ids`.

        Identifiers with no matching row are skipped.
        """
        if not record_ids:
            return []

        source = table(validate_table_name(table_name))
        stmt = (
            select(literal_column("*"))
            .select_from(source)
            .where(cast(column("id"), Text).in_([str(rid) for rid in record_ids]))
        )
        rows = await self._fetch(stmt, table_name)

        by_id = {str(row.get("id")): row for row in rows}
        ordered = [by_id[str(rid)] for rid in record_ids if str(rid) in by_id]

        missing = len(record_ids) - len(ordered)
        if missing:
            logger.warning("%d of %d ids not found in %s", missing, len(record_ids), table_name)
        return ordered

    async def _fetch(self, stmt, table_name: str) -> List[ContentRecord]:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Query on %s failed: %s", table_name, exc)
            # the session is shared with the task store, which still has to record the failure
            await self._session.rollback()
            raise RecordFetchError(
                f"Failed to fetch records from {table_name}: {exc.__class__.__name__}"
            ) from exc
        return [dict(row) for row in result.mappings().all()]
