# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Lookup cache manager: the public id/name resolution API.

A :class:`LookupCacheManager` maps table keys to loaders and to one
:class:`~lookupalchemy.table_cache.TableCache` each. It is constructed explicitly and
passed to whoever needs it; there is no process-wide instance. Applications serving
several schemas or databases create one manager per schema.

Every resolution either returns a value that is really in the table or raises; a
misspelled name never turns into ``False`` or a default.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Dict, Hashable, List, Mapping, Tuple

from .constants import ErrorMessages, LookupTableState
from .exceptions import UnknownKeyError, UnknownNameError, UnregisteredTableError
from .table_cache import LookupSnapshot, TableCache
from .types import Loader, LookupEntry

logger = logging.getLogger(__name__)

# Sentinel object to distinguish missing entries from falsy ids
_MISSING = object()


class LookupCacheManager:
    """
    Registry of lookup table loaders and their lazily filled caches.

    Example::

        manager = LookupCacheManager()
        manager.register_table("UserType", load_user_types)
        manager.resolve_name("UserType", 1)        # 'Administrator'
        manager.resolve_id("UserType", "Guest")    # 3
        manager.matches("UserType", 1, "User")     # False
        manager.resolve_id("UserType", "Gest")     # raises UnknownNameError
    """

    def __init__(self, loaders: Mapping[str, Loader] | None = None) -> None:
        self._lock = RLock()
        self._loaders: Dict[str, Loader] = {}
        self._caches: Dict[str, TableCache] = {}
        if loaders:
            self.register_tables(loaders)

    def __repr__(self) -> str:
        return f"LookupCacheManager(tables={self.registered_tables()!r})"

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_table(self, table_key: str, loader: Loader) -> None:
        """
        Register the loader of a lookup table.

        Registering the same loader again is a no-op. Registering a different loader
        for a known key replaces it and invalidates the cached table.
        """
        if not isinstance(table_key, str) or not table_key:
            raise ValueError(ErrorMessages.INVALID_TABLE_KEY.format(table_key=table_key))
        if not callable(loader):
            raise TypeError(ErrorMessages.LOADER_NOT_CALLABLE.format(table_key=table_key, loader=loader))

        with self._lock:
            current = self._loaders.get(table_key)
            if current is loader:
                return
            self._loaders[table_key] = loader
            cache = self._caches.get(table_key)
            if cache is not None:
                cache.replace_loader(loader)

        if current is None:
            logger.debug(f"Registered lookup table '{table_key}'")
        else:
            logger.debug(f"Re-registered lookup table '{table_key}' with a new loader")

    def register_tables(self, loaders: Mapping[str, Loader]) -> None:
        for table_key, loader in loaders.items():
            self.register_table(table_key, loader)

    def is_registered(self, table_key: str) -> bool:
        return table_key in self._loaders

    def registered_tables(self) -> List[str]:
        with self._lock:
            return sorted(self._loaders)

    # -------------------------------------------------------------------------
    # Cache access
    # -------------------------------------------------------------------------

    def _cache_for(self, table_key: str) -> TableCache:
        # @@ STEP 1: Lock-free hit once the cache exists
        cache = self._caches.get(table_key)
        if cache is not None:
            return cache

        # @@ STEP 2: Create the single TableCache of this key on first ask
        with self._lock:
            cache = self._caches.get(table_key)
            if cache is None:
                loader = self._loaders.get(table_key)
                if loader is None:
                    raise UnregisteredTableError(table_key)
                cache = TableCache(table_key, loader)
                self._caches[table_key] = cache
            return cache

    def _snapshot(self, table_key: str) -> LookupSnapshot:
        return self._cache_for(table_key).ensure_loaded()

    def state(self, table_key: str) -> LookupTableState:
        """Load state of a registered table. Never triggers a load."""
        if table_key not in self._loaders:
            raise UnregisteredTableError(table_key)
        cache = self._caches.get(table_key)
        if cache is None:
            return LookupTableState.UNLOADED
        return cache.state

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve_name(self, table_key: str, key: Hashable) -> str:
        """
        Name of the row with id ``key``.

        :raises UnknownKeyError: If no row has that id (dangling foreign key)
        """
        name = self._snapshot(table_key).id_to_name.get(key, _MISSING)
        if name is _MISSING:
            raise UnknownKeyError(table_key, key)
        return name

    def resolve_id(self, table_key: str, name: str) -> Any:
        """
        Id of the row called ``name``.

        :raises UnknownNameError: If no row has that name
        """
        key = self._snapshot(table_key).name_to_id.get(name, _MISSING)
        if key is _MISSING:
            raise UnknownNameError(table_key, name)
        return key

    def matches(self, table_key: str, key: Hashable, name: str) -> bool:
        """
        True when the row called ``name`` has id ``key``.

        An unknown ``name`` raises :class:`UnknownNameError` rather than returning False.
        """
        return self.resolve_id(table_key, name) == key

    def entries(self, table_key: str) -> Tuple[LookupEntry, ...]:
        """All rows of the table, in loader order."""
        return self._snapshot(table_key).entries

    def names(self, table_key: str) -> Tuple[str, ...]:
        return tuple(entry.name for entry in self._snapshot(table_key).entries)

    # -------------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------------

    def invalidate(self, table_key: str) -> None:
        """Forget the cached contents of one table; the next access reloads it."""
        if table_key not in self._loaders:
            raise UnregisteredTableError(table_key)
        cache = self._caches.get(table_key)
        if cache is not None:
            cache.invalidate()

    def invalidate_all(self) -> None:
        with self._lock:
            caches = list(self._caches.values())
        for cache in caches:
            cache.invalidate()
        logger.debug(f"Invalidated {len(caches)} lookup tables")

    def reset(self) -> None:
        """
        Drop every table cache while keeping the registered loaders.

        Caches are recreated on next access. Meant for test isolation.
        """
        with self._lock:
            caches = list(self._caches.values())
            self._caches.clear()
        for cache in caches:
            cache.invalidate()
        logger.debug("Lookup cache manager reset")


__all__ = [
    "LookupCacheManager",
]
