# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by the lookup cache."""

from __future__ import annotations

from typing import Any, Hashable

from .constants import ErrorMessages


class LookupCacheError(Exception):
    """Base exception for lookup cache operations."""

    def __init__(self, table_key: str, message: str):
        self.table_key = table_key
        super().__init__(message)


class UnregisteredTableError(LookupCacheError):
    """Raised when no loader is registered for a table key."""

    def __init__(self, table_key: str):
        super().__init__(table_key, ErrorMessages.UNREGISTERED_TABLE.format(table_key=table_key))


class LoadFailureError(LookupCacheError):
    """Raised when the loader of a table fails. The table stays unloaded."""

    def __init__(self, table_key: str, cause: BaseException):
        self.cause = cause
        super().__init__(
            table_key,
            ErrorMessages.LOAD_FAILED.format(table_key=table_key, cause=cause),
        )


class DuplicateEntryError(LookupCacheError):
    """
    Raised when a loader returns two rows sharing an id or a name.

    ``kind`` is ``"id"`` or ``"name"``; ``value`` is the duplicated id or name.
    """

    def __init__(self, table_key: str, kind: str, value: Any):
        self.kind = kind
        self.value = value
        super().__init__(
            table_key,
            ErrorMessages.DUPLICATE_ENTRY.format(kind=kind, value=value, table_key=table_key),
        )


class UnknownKeyError(LookupCacheError):
    """Raised when an id is absent from a loaded table (dangling foreign key)."""

    def __init__(self, table_key: str, key: Hashable):
        self.key = key
        super().__init__(table_key, ErrorMessages.UNKNOWN_KEY.format(key=key, table_key=table_key))


class UnknownNameError(LookupCacheError):
    """Raised when a name is absent from a loaded table, usually a typo."""

    def __init__(self, table_key: str, name: str):
        self.name = name
        super().__init__(table_key, ErrorMessages.UNKNOWN_NAME.format(name=name, table_key=table_key))


__all__ = [
    "LookupCacheError",
    "UnregisteredTableError",
    "LoadFailureError",
    "DuplicateEntryError",
    "UnknownKeyError",
    "UnknownNameError",
]
