"""Usage statistics.

A :class:`StatementCompiler` reports every compile to an injected
:class:`UsageObserver`.  :class:`UsageStatistics` is the stock observer: it
counts compiled statements per kind and failures.  It is owned by whoever
creates the compiler; there is no process-wide instance.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime, timezone
from enum import Enum


class StatementKind(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    DYNAMIC = "dynamic"
    PROCEDURE = "procedure"


class UsageObserver(ABC):
    """Receives one notification per compile attempt."""

    @abstractmethod
    def compiled(self, alias: str, kind: StatementKind) -> None:
        """Called after ``kind`` was compiled for ``alias``."""

    @abstractmethod
    def failed(self, alias: str, kind: StatementKind, error: Exception) -> None:
        """Called when compiling ``kind`` for ``alias`` raised ``error``."""


class UsageStatistics(UsageObserver):
    """Thread-safe counters of compiled statements."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._compiled: Counter[str] = Counter()
        self._failed: Counter[str] = Counter()
        self._aliases: Counter[str] = Counter()
        self._started = datetime.now(timezone.utc)

    def compiled(self, alias: str, kind: StatementKind) -> None:
        with self._lock:
            self._compiled[kind.value] += 1
            self._aliases[alias] += 1

    def failed(self, alias: str, kind: StatementKind, error: Exception) -> None:
        with self._lock:
            self._failed[kind.value] += 1

    def snapshot(self) -> dict:
        """Return the counters as plain data."""
        with self._lock:
            return {
                "started": self._started.isoformat(),
                "compiled": {k.value: self._compiled[k.value] for k in StatementKind},
                "failed": {k.value: self._failed[k.value] for k in StatementKind},
                "aliases": dict(self._aliases),
                "total": sum(self._compiled.values()),
            }

    def reset(self) -> None:
        with self._lock:
            self._compiled.clear()
            self._failed.clear()
            self._aliases.clear()
            self._started = datetime.now(timezone.utc)
