# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Test suite for LookupAlchemy.

This package contains tests for all components of LookupAlchemy:
- Unit tests for the table cache and the manager
- Concurrency tests for singleflight loading and invalidation
- Integration tests against a real Kuzu database
"""

from __future__ import annotations

import threading
from typing import Any, Iterable, List, Optional


USER_TYPE_ROWS = [
    (1, "Administrator"),
    (2, "User"),
    (3, "Guest"),
]


class RecordingLoader:
    """
    Fake loader that serves a mutable row set and counts its calls.

    ``gate`` (when set) blocks every call until released, so tests can hold a load
    in flight. ``error`` (when set) is raised instead of returning rows.
    """

    def __init__(self, rows: Iterable[Any]) -> None:
        self.rows: List[Any] = list(rows)
        self.calls = 0
        self.table_keys: List[str] = []
        self.error: Optional[BaseException] = None
        self.gate: Optional[threading.Event] = None
        self.entered = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, table_key: str) -> List[Any]:
        with self._lock:
            self.calls += 1
            self.table_keys.append(table_key)
        self.entered.set()
        if self.gate is not None:
            assert self.gate.wait(timeout=10), "loader gate never released"
        if self.error is not None:
            raise self.error
        return list(self.rows)


__all__ = [
    "USER_TYPE_ROWS",
    "RecordingLoader",
]
