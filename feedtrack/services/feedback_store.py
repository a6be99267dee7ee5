"""
Feedback Stores
===============

Common async contract for the two places a FeedbackRecord can live:

- SQLFeedbackStore: the durable SQLModel-backed store.
- FallbackStore (fallback_store.py): process-lifetime memory, used while
  the durable store is unreachable.

Both answer list() newest-first by creation time and support exact-match
filters on FILTERABLE_FIELDS. Records are never copied between them.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Set

import structlog
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from feedtrack.core.database import create_tables, get_session_context
from feedtrack.models.feedback import FILTERABLE_FIELDS, FeedbackAnalysis, FeedbackRecord, FeedbackRow

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the durable store cannot be reached or queried."""

    code = "FT-DB-001"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


def validate_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    filters = dict(filters or {})
    unknown = set(filters) - set(FILTERABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported feedback filter field(s): {sorted(unknown)}")
    return filters


def plain_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class FeedbackStore(ABC):
    """Async read/write contract shared by the durable and fallback stores."""

    name: str = "store"

    @abstractmethod
    async def create(
        self,
        text: str,
        analysis: FeedbackAnalysis,
        student_id: Optional[str] = None,
        student_name: Optional[str] = None,
        is_critical: bool = False,
    ) -> FeedbackRecord:
        """Persist a new record, assigning its id and creation timestamp."""

    @abstractmethod
    async def list(self, filters: Optional[Dict[str, Any]] = None, limit: Optional[int] = None) -> List[FeedbackRecord]:
        """Records matching every filter, newest first."""

    @abstractmethod
    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        ...

    @abstractmethod
    async def distinct(self, field: str) -> Set[Any]:
        ...


class SQLFeedbackStore(FeedbackStore):
    """Durable store over the feedback_records table.

    Every SQLAlchemy failure surfaces as StoreUnavailableError so the
    service layer can switch to the fallback store. Tables are created
    on the first call that reaches the database, so a database that was
    down at startup is picked up once it comes back.
    """

    name = "durable"

    def __init__(self, timeout: float = 10.0):
        self._timeout = timeout
        self._tables_ready = False

    def _in_thread(self, fn):
        if not self._tables_ready:
            create_tables()
            self._tables_ready = True
        return fn()

    async def _run(self, fn):
        try:
            return await asyncio.wait_for(asyncio.to_thread(self._in_thread, fn), timeout=self._timeout)
        except asyncio.TimeoutError:
            raise StoreUnavailableError(f"database call timed out after {self._timeout}s")
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            raise StoreUnavailableError(f"{type(e).__name__}: {e}", original_error=e)

    @staticmethod
    def _apply_filters(statement, filters: Dict[str, Any]):
        for name, value in filters.items():
            statement = statement.where(getattr(FeedbackRow, name) == plain_value(value))
        return statement

    async def create(self, text, analysis, student_id=None, student_name=None, is_critical=False) -> FeedbackRecord:
        row = FeedbackRow.from_analysis(text, analysis, student_id, student_name, is_critical)

        def _insert() -> FeedbackRecord:
            with get_session_context() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return row.to_record()

        return await self._run(_insert)

    async def list(self, filters=None, limit=None) -> List[FeedbackRecord]:
        filters = validate_filters(filters)

        def _select() -> List[FeedbackRecord]:
            statement = self._apply_filters(select(FeedbackRow), filters).order_by(FeedbackRow.created_at.desc())
            if limit is not None:
                statement = statement.limit(limit)
            with get_session_context() as session:
                return [row.to_record() for row in session.exec(statement).all()]

        return await self._run(_select)

    async def count(self, filters=None) -> int:
        filters = validate_filters(filters)

        def _count() -> int:
            statement = self._apply_filters(select(func.count()).select_from(FeedbackRow), filters)
            with get_session_context() as session:
                return int(session.exec(statement).one())

        return await self._run(_count)

    async def distinct(self, field: str) -> Set[Any]:
        validate_filters({field: None})

        def _distinct() -> Set[Any]:
            statement = select(getattr(FeedbackRow, field)).distinct()
            with get_session_context() as session:
                return set(session.exec(statement).all())

        return await self._run(_distinct)


class ResilientFeedbackStore(FeedbackStore):
    """Durable store first, fallback store whenever the durable one fails.

    The switch is made per call, so the durable store is picked up again
    as soon as it answers. Records written to the fallback store stay
    there; the two are never reconciled.
    """

    def __init__(self, fallback: FeedbackStore, durable: Optional[FeedbackStore] = None):
        self._fallback = fallback
        self._durable = durable
        self._degraded = durable is None

    @property
    def name(self) -> str:
        return self._fallback.name if self._degraded else self._durable.name

    @property
    def degraded(self) -> bool:
        return self._degraded

    async def _call(self, op: str, *args, **kwargs):
        if self._durable is not None:
            try:
                with structlog.contextvars.bound_contextvars(store=self._durable.name):
                    result = await getattr(self._durable, op)(*args, **kwargs)
            except StoreUnavailableError as e:
                logger.warning(
                    "Durable store unreachable during %s - using in-memory fallback: %s",
                    op,
                    e.message,
                    extra={"error.code": e.code},
                )
                self._degraded = True
            else:
                if self._degraded:
                    logger.info("Durable store reachable again")
                self._degraded = False
                return result
        with structlog.contextvars.bound_contextvars(store=self._fallback.name):
            return await getattr(self._fallback, op)(*args, **kwargs)

    async def create(self, text, analysis, student_id=None, student_name=None, is_critical=False) -> FeedbackRecord:
        return await self._call(
            "create", text, analysis,
            student_id=student_id, student_name=student_name, is_critical=is_critical,
        )

    async def list(self, filters=None, limit=None) -> List[FeedbackRecord]:
        return await self._call("list", filters=filters, limit=limit)

    async def count(self, filters=None) -> int:
        return await self._call("count", filters=filters)

    async def distinct(self, field: str) -> Set[Any]:
        return await self._call("distinct", field)
