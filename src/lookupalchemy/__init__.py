# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
LookupAlchemy: cached, typo-safe id/name translation for lookup tables.

A lookup table is read in full the first time one of its values is needed and
served from memory afterwards, until it is explicitly invalidated.
"""

from __future__ import annotations

from .accessors import LookupAccessor, lookup_names_through
from .constants import LookupTableState
from .exceptions import (
    DuplicateEntryError,
    LoadFailureError,
    LookupCacheError,
    UnknownKeyError,
    UnknownNameError,
    UnregisteredTableError,
)
from .kuzu_loader import KuzuLookupLoader, LookupTableMapping
from .manager import LookupCacheManager
from .table_cache import LookupSnapshot, TableCache
from .types import Loader, LookupEntry

__version__ = "0.1.0"

__all__ = [
    "LookupCacheManager",
    "TableCache",
    "LookupSnapshot",
    "LookupEntry",
    "Loader",
    "LookupTableState",
    "LookupAccessor",
    "lookup_names_through",
    "KuzuLookupLoader",
    "LookupTableMapping",
    "LookupCacheError",
    "UnregisteredTableError",
    "LoadFailureError",
    "DuplicateEntryError",
    "UnknownKeyError",
    "UnknownNameError",
]
