"""Runtime settings read from the environment.

``.env`` files are loaded by the CLI via python-dotenv before
``Settings.from_env`` is called; library callers may build ``Settings``
directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .sources import DEFAULT_FETCH_LIMIT

ENV_PREFIX = "COMPLAINT_TRIAGE_"


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _get_float(env: Mapping[str, str], name: str) -> Optional[float]:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc


@dataclass
class Settings:
    """Configuration for data-backed training and logging.

    Attributes:
        mongo_uri: MongoDB connection string; ``None`` disables the
            MongoDB record source.
        mongo_db: Database holding complaints.
        collection: Complaint collection name.
        fetch_limit: Maximum records used for training.
        fetch_timeout: Per-attempt fetch timeout in seconds (``None`` =
            unbounded).
        fetch_attempts: Number of fetch attempts before falling back.
        log_level: Logging level name for the CLI.
    """

    mongo_uri: Optional[str] = None
    mongo_db: str = "complaints"
    collection: str = "complaints"
    fetch_limit: int = DEFAULT_FETCH_LIMIT
    fetch_timeout: Optional[float] = None
    fetch_attempts: int = 1
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``COMPLAINT_TRIAGE_*`` variables.

        Args:
            env: Mapping to read instead of ``os.environ``.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if env is None else env
        return cls(
            mongo_uri=env.get(ENV_PREFIX + "MONGO_URI") or None,
            mongo_db=env.get(ENV_PREFIX + "MONGO_DB") or cls.mongo_db,
            collection=env.get(ENV_PREFIX + "COLLECTION") or cls.collection,
            fetch_limit=_get_int(env, "FETCH_LIMIT", DEFAULT_FETCH_LIMIT),
            fetch_timeout=_get_float(env, "FETCH_TIMEOUT"),
            fetch_attempts=_get_int(env, "FETCH_ATTEMPTS", 1),
            log_level=(env.get(ENV_PREFIX + "LOG_LEVEL") or cls.log_level).upper(),
        )
