"""Record sources for data-backed training.

A record source returns complaint records projected to ``description``
and ``category``, limited to the two recognized categories and to
non-empty descriptions. Sources may raise anything; ``fetch_records``
turns every failure into a ``FetchResult`` carrying a ``FetchError`` so
the caller decides how to fall back.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from .models import Label

logger = logging.getLogger(__name__)

DEFAULT_FETCH_LIMIT = 2000

Record = Mapping[str, Any]

_CATEGORIES: tuple[str, ...] = (Label.FIR.value, Label.NON_FIR.value)


def is_usable_record(record: Any) -> bool:
    """Whether a record matches the training query contract."""
    if not isinstance(record, Mapping):
        return False
    category = record.get("category")
    description = record.get("description")
    return category in _CATEGORIES and isinstance(description, str) and description != ""


class RecordSource(ABC):
    """Abstract base class for complaint record sources."""

    name: str = "source"

    @abstractmethod
    async def fetch(self, limit: int) -> Sequence[Record]:
        """Fetch labeled complaint records.

        Args:
            limit: Maximum number of records to return.

        Returns:
            Records with ``description`` and ``category`` keys.
        """
        ...


class StaticRecordSource(RecordSource):
    """In-memory source over a fixed list of records."""

    name = "static"

    def __init__(self, records: Sequence[Record]) -> None:
        self._records = list(records)

    async def fetch(self, limit: int) -> Sequence[Record]:
        rows = [
            {"description": r["description"], "category": r["category"]}
            for r in self._records
            if is_usable_record(r)
        ]
        return rows[:limit]


class JsonFileRecordSource(StaticRecordSource):
    """Source reading a JSON array of records from a file."""

    name = "json"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__([])

    async def fetch(self, limit: int) -> Sequence[Record]:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array of records in {self.path}")
        self._records = [r for r in data if isinstance(r, Mapping)]
        return await super().fetch(limit)


class MongoRecordSource(RecordSource):
    """MongoDB source using PyMongo's asyncio client.

    Args:
        uri: MongoDB connection string.
        database: Database name.
        collection: Collection holding complaint documents.
        server_selection_timeout_ms: How long the driver waits for a
            reachable server before failing.
    """

    name = "mongo"

    QUERY: dict = {
        "category": {"$in": list(_CATEGORIES)},
        "description": {"$exists": True, "$ne": ""},
    }
    PROJECTION: dict = {"description": 1, "category": 1, "_id": 0}

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str = "complaints",
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        self.uri = uri
        self.database = database
        self.collection = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms

    async def fetch(self, limit: int) -> Sequence[Record]:
        try:
            from pymongo import AsyncMongoClient
        except ImportError as exc:
            raise ImportError(
                "pymongo is required for MongoDB training data. "
                "Install it with: pip install 'complaint-triage[mongo]'"
            ) from exc

        client = AsyncMongoClient(
            self.uri, serverSelectionTimeoutMS=self.server_selection_timeout_ms
        )
        try:
            cursor = (
                client[self.database][self.collection]
                .find(self.QUERY, self.PROJECTION)
                .limit(limit)
            )
            return await cursor.to_list(length=limit)
        finally:
            await client.close()


@dataclass
class FetchError:
    """A record-source failure, carried as a value rather than raised."""

    source: str
    cause: BaseException

    def __str__(self) -> str:
        return f"{self.source}: {type(self.cause).__name__}: {self.cause}"


@dataclass
class FetchResult:
    """Records retrieved from a source, or the error that prevented it."""

    records: list[Record] = field(default_factory=list)
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fetch_records(
    source: RecordSource,
    *,
    limit: int = DEFAULT_FETCH_LIMIT,
    timeout: Optional[float] = None,
    attempts: int = 1,
) -> FetchResult:
    """Fetch training records without ever raising.

    Each attempt is bounded by ``timeout`` seconds when given. Failed
    attempts are retried with exponential backoff up to ``attempts``
    times.

    Args:
        source: Record source to query.
        limit: Maximum number of records.
        timeout: Per-attempt timeout in seconds (``None`` = unbounded).
        attempts: Total number of attempts (at least 1).

    Returns:
        FetchResult with records, or with ``error`` set on failure.
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, attempts)),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            reraise=True,
        ):
            with attempt:
                rows = await asyncio.wait_for(source.fetch(limit), timeout)
                # rows that are not mappings are dropped; a non-iterable fails the attempt
                records = [r for r in rows if is_usable_record(r)][:limit]
    except Exception as exc:
        error = FetchError(source=source.name, cause=exc)
        logger.warning("Record fetch failed: %s", error)
        return FetchResult(error=error)

    logger.info("Fetched %d training records from %s", len(records), source.name)
    return FetchResult(records=records)
