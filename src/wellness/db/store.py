"""
SQL-backed key-value store.

Implements the get/set capability HydrationLedger persists through. Writes
commit before returning so a crash right after a mutation keeps it, and
set_many() commits all of its keys in one transaction or none of them.
"""
from datetime import datetime, timezone
from typing import Mapping, Optional

from sqlmodel import Session

from wellness.models.storage import StoredValue


class SqlKeyValueStore:
    """Key-value store over the StoredValue table."""

    def __init__(self, engine):
        """
        Args:
            engine: SQLAlchemy engine (SQLModel create_engine result).
        """
        self.engine = engine

    def get(self, key: str) -> Optional[str]:
        with Session(self.engine) as s:
            row = s.get(StoredValue, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        """Upsert every key in a single commit."""
        now = datetime.now(timezone.utc)
        with Session(self.engine) as s:
            for key, value in values.items():
                row = s.get(StoredValue, key)
                if row:
                    row.value = value
                    row.updated_at = now
                else:
                    row = StoredValue(key=key, value=value, updated_at=now)
                s.add(row)
            s.commit()
