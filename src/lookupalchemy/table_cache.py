# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Per-table cache for one lookup table.

A :class:`TableCache` owns the bidirectional id/name mapping of exactly one lookup
table and the protocol that fills and empties it. The mapping lives in an immutable
:class:`LookupSnapshot`; loading publishes a new snapshot reference and invalidation
drops it, so a reader holding a snapshot always sees one complete load.

Concurrent first access is coordinated singleflight style: the first caller runs the
loader, every caller arriving while that load is in flight waits on the same pending
load and receives its snapshot or its error.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from types import MappingProxyType
from typing import Any, Hashable, Iterable, Mapping, Optional, Tuple

from .constants import LoaderConstants, LookupTableState
from .exceptions import DuplicateEntryError, LoadFailureError
from .types import Loader, LookupEntry, normalize_entries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupSnapshot:
    """Immutable, fully validated contents of one lookup table load."""

    table_key: str
    entries: Tuple[LookupEntry, ...]
    id_to_name: Mapping[Hashable, str]
    name_to_id: Mapping[str, Hashable]

    @classmethod
    def build(cls, table_key: str, rows: Iterable[Any]) -> "LookupSnapshot":
        """
        Build a snapshot from loader rows, enforcing the bijection between ids and names.

        :raises DuplicateEntryError: If two rows share an id or a name
        """
        entries = normalize_entries(rows)

        id_to_name: dict[Hashable, str] = {}
        name_to_id: dict[str, Hashable] = {}
        for entry in entries:
            # @@ STEP: Fail fast on the first row breaking the 1:1 correspondence
            if entry.id in id_to_name:
                raise DuplicateEntryError(table_key, LoaderConstants.DUPLICATE_KIND_ID, entry.id)
            if entry.name in name_to_id:
                raise DuplicateEntryError(table_key, LoaderConstants.DUPLICATE_KIND_NAME, entry.name)
            id_to_name[entry.id] = entry.name
            name_to_id[entry.name] = entry.id

        return cls(
            table_key=table_key,
            entries=tuple(entries),
            id_to_name=MappingProxyType(id_to_name),
            name_to_id=MappingProxyType(name_to_id),
        )

    def __len__(self) -> int:
        return len(self.entries)


class _PendingLoad:
    """One in-flight loader call that any number of callers can wait on."""

    __slots__ = ("_done", "snapshot", "error")

    def __init__(self) -> None:
        self._done = threading.Event()
        self.snapshot: Optional[LookupSnapshot] = None
        self.error: Optional[BaseException] = None

    def resolve(self, snapshot: LookupSnapshot) -> None:
        self.snapshot = snapshot
        self._done.set()

    def fail(self, error: BaseException) -> None:
        self.error = error
        self._done.set()

    def wait(self) -> LookupSnapshot:
        self._done.wait()
        if self.error is not None:
            raise self.error
        assert self.snapshot is not None
        return self.snapshot


class TableCache:
    """
    Lazily loaded id/name cache of a single lookup table.

    State transitions::

        UNLOADED --(first access)--> LOADING --(loader success)--> LOADED
        LOADING --(loader failure)--> UNLOADED
        LOADED --(invalidate)--> UNLOADED
    """

    def __init__(self, table_key: str, loader: Loader) -> None:
        self.table_key = table_key
        self._loader = loader
        # Guards only the snapshot/pending references, never held across a loader call
        self._lock = threading.Lock()
        self._snapshot: Optional[LookupSnapshot] = None
        self._pending: Optional[_PendingLoad] = None

    def __repr__(self) -> str:
        return f"TableCache(table_key={self.table_key!r}, state={self.state.value})"

    @property
    def loader(self) -> Loader:
        return self._loader

    @property
    def state(self) -> LookupTableState:
        if self._snapshot is not None:
            return LookupTableState.LOADED
        if self._pending is not None:
            return LookupTableState.LOADING
        return LookupTableState.UNLOADED

    @property
    def snapshot(self) -> Optional[LookupSnapshot]:
        """Currently published snapshot, or None when not loaded. Never triggers a load."""
        return self._snapshot

    def ensure_loaded(self) -> LookupSnapshot:
        """
        Return the loaded snapshot, running the loader at most once per load cycle.

        :raises LoadFailureError: If the loader failed (the table stays unloaded)
        :raises DuplicateEntryError: If the loader broke the id/name bijection
        """
        # @@ STEP 1: Fast path, no lock once loaded
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        # @@ STEP 2: Join the in-flight load or become its leader
        with self._lock:
            snapshot = self._snapshot
            if snapshot is not None:
                return snapshot
            pending = self._pending
            leader = pending is None
            if leader:
                pending = _PendingLoad()
                self._pending = pending
            loader = self._loader

        if not leader:
            logger.debug(f"Waiting for in-flight load of lookup table '{self.table_key}'")
            return pending.wait()

        # @@ STEP 3: Leader runs the loader outside the lock
        return self._run_load(pending, loader)

    def _run_load(self, pending: _PendingLoad, loader: Loader) -> LookupSnapshot:
        logger.debug(f"Loading lookup table '{self.table_key}'")
        try:
            snapshot = LookupSnapshot.build(self.table_key, loader(self.table_key))
        except DuplicateEntryError as exc:
            logger.warning(f"Load of lookup table '{self.table_key}' rejected: {exc}")
            self._abandon(pending, exc)
            raise
        except Exception as exc:
            failure = LoadFailureError(self.table_key, exc)
            failure.__cause__ = exc
            logger.warning(f"Load of lookup table '{self.table_key}' failed: {exc}")
            self._abandon(pending, failure)
            raise failure from exc
        except BaseException as exc:
            # Interrupts propagate as-is to the leader; waiters still get released
            self._abandon(pending, LoadFailureError(self.table_key, exc))
            raise

        # @@ STEP 4: Publish unless an invalidation superseded this load
        with self._lock:
            published = self._pending is pending
            if published:
                self._snapshot = snapshot
                self._pending = None
        pending.resolve(snapshot)

        if published:
            logger.debug(f"Loaded lookup table '{self.table_key}' ({len(snapshot)} rows)")
        else:
            logger.debug(f"Discarded superseded load of lookup table '{self.table_key}'")
        return snapshot

    def _abandon(self, pending: _PendingLoad, error: BaseException) -> None:
        with self._lock:
            if self._pending is pending:
                self._pending = None
        pending.fail(error)

    def lookup_name(self, key: Hashable, default: Optional[str] = None) -> Optional[str]:
        """Name for ``key``, or ``default`` when the loaded table has no such id."""
        return self.ensure_loaded().id_to_name.get(key, default)

    def lookup_id(self, name: str, default: Any = None) -> Any:
        """Id for ``name``, or ``default`` when the loaded table has no such name."""
        return self.ensure_loaded().name_to_id.get(name, default)

    def invalidate(self) -> None:
        """
        Drop the published snapshot; the next access reloads.

        Snapshots already handed out stay valid for their holders. A load in flight
        still answers its waiters but is not published.
        """
        with self._lock:
            self._snapshot = None
            self._pending = None
        logger.debug(f"Invalidated lookup table '{self.table_key}'")

    def replace_loader(self, loader: Loader) -> None:
        """Swap the loader and invalidate, so the next access reads through the new one."""
        with self._lock:
            self._loader = loader
            self._snapshot = None
            self._pending = None
        logger.debug(f"Replaced loader of lookup table '{self.table_key}'")


__all__ = [
    "LookupSnapshot",
    "TableCache",
]
