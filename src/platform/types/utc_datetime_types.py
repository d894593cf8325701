"""
https://docs.sqlalchemy.org/en/20/core/custom_types.html#store-timezone-aware-timestamps-as-timezone-naive-utc

Timezone-aware UTC timestamps on every backend.

PostgreSQL `timestamptz` round-trips offsets, SQLite stores naive strings. Hold deadlines are
compared in SQL (`reserved_until <= :now`), so every value is normalised to UTC before it is
bound and re-tagged as UTC when it is loaded.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import DateTime
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect: Dialect) -> Any:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f'Naive datetime is not allowed: {value!r}')
        value = value.astimezone(timezone.utc)
        if dialect.name == 'sqlite':
            # Stored as naive text so lexical comparison matches chronological order
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect: Dialect) -> Any:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
