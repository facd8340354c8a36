"""Statement persistence.

Statements are stored as opaque JSON documents, one row per statement,
owned by a single user. This module defines the repository contract the
service depends on and an in-memory implementation used by tests and local
development. Any class with matching methods satisfies the protocol; no
inheritance is required.

Example Usage:
    ```python
    repository = InMemoryStatementRepository()
    statement_id = repository.create("user-1", statement)
    record = repository.get_by_id(statement_id, "user-1")
    records, total = repository.list("user-1", page=1, limit=10)
    ```
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from math import ceil
from typing import Any, Optional, Protocol, runtime_checkable

import structlog
from pydantic import BaseModel, Field, computed_field

from .exceptions import StatementNotFoundError, ValidationError
from .models.statement import Statement

logger = structlog.get_logger()


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


# =============================================================================
# RECORDS
# =============================================================================

class StatementRecord(BaseModel):
    """A stored statement and its ownership metadata."""

    id: str
    user_id: str
    statement: Statement
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    def to_row(self) -> dict[str, Any]:
        """Render as an ``income_statements`` table row."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "statement_data": self.statement.to_json_dict(),
            "created_at": self.created_at.isoformat(),
        }


class StatementPage(BaseModel):
    """One page of a user's statement history, newest first."""

    items: list[StatementRecord] = Field(default_factory=list)
    total_count: int = 0
    page: int = 1
    limit: int = 10

    @computed_field
    @property
    def total_pages(self) -> int:
        """Number of pages needed for ``total_count`` rows."""
        return ceil(self.total_count / self.limit) if self.limit else 0


# =============================================================================
# PROTOCOL
# =============================================================================

@runtime_checkable
class StatementRepository(Protocol):
    """Contract for statement storage backends.

    ``update`` and ``delete`` affect at most one row: the statement with the
    given id owned by the given user.
    """

    def create(self, user_id: str, statement: Statement) -> str:
        """Store a new statement and return its id."""
        ...

    def update(self, statement_id: str, user_id: str, statement: Statement) -> str:
        """Replace a stored statement; raises StatementNotFoundError if absent."""
        ...

    def delete(self, statement_id: str, user_id: str) -> None:
        """Remove a stored statement; raises StatementNotFoundError if absent."""
        ...

    def get_by_id(self, statement_id: str, user_id: str) -> Optional[StatementRecord]:
        """Return the statement, or None when the user has no such statement."""
        ...

    def list(self, user_id: str, page: int = 1, limit: int = 10) -> tuple[list[StatementRecord], int]:
        """Return one page of the user's statements (newest first) and the total count."""
        ...


# =============================================================================
# IN-MEMORY IMPLEMENTATION
# =============================================================================

class InMemoryStatementRepository:
    """Thread-safe, process-local statement store."""

    def __init__(self) -> None:
        self._rows: dict[str, StatementRecord] = {}
        self._order: dict[str, int] = {}
        self._sequence = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._rows)

    def _owned(self, statement_id: str, user_id: str, operation: str) -> StatementRecord:
        record = self._rows.get(statement_id)
        if record is None or record.user_id != user_id:
            raise StatementNotFoundError(
                f"Statement {statement_id} not found",
                operation=operation,
                statement_id=statement_id,
            )
        return record

    def create(self, user_id: str, statement: Statement) -> str:
        statement_id = str(uuid.uuid4())
        record = StatementRecord(id=statement_id, user_id=user_id, statement=statement)
        with self._lock:
            self._sequence += 1
            self._rows[statement_id] = record
            self._order[statement_id] = self._sequence

        logger.info("statement_created", statement_id=statement_id, user_id=user_id)
        return statement_id

    def update(self, statement_id: str, user_id: str, statement: Statement) -> str:
        with self._lock:
            existing = self._owned(statement_id, user_id, "update")
            self._rows[statement_id] = existing.model_copy(
                update={"statement": statement, "updated_at": _utc_now()}
            )

        logger.info("statement_updated", statement_id=statement_id, user_id=user_id)
        return statement_id

    def delete(self, statement_id: str, user_id: str) -> None:
        with self._lock:
            self._owned(statement_id, user_id, "delete")
            del self._rows[statement_id]
            del self._order[statement_id]

        logger.info("statement_deleted", statement_id=statement_id, user_id=user_id)

    def get_by_id(self, statement_id: str, user_id: str) -> Optional[StatementRecord]:
        with self._lock:
            record = self._rows.get(statement_id)
        if record is None or record.user_id != user_id:
            return None
        return record

    def list(self, user_id: str, page: int = 1, limit: int = 10) -> tuple[list[StatementRecord], int]:
        if page < 1:
            raise ValidationError(
                "Page must be at least 1", field="page", value=page, constraint="page >= 1"
            )
        if limit < 1:
            raise ValidationError(
                "Limit must be at least 1", field="limit", value=limit, constraint="limit >= 1"
            )

        with self._lock:
            owned = [record for record in self._rows.values() if record.user_id == user_id]
            owned.sort(key=lambda r: (r.created_at, self._order[r.id]), reverse=True)

        start = (page - 1) * limit
        return owned[start:start + limit], len(owned)
