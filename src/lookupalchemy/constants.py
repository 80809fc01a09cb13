# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Constants module for LookupAlchemy.

This module centralizes all constants, configuration values, and literal strings
used throughout the LookupAlchemy codebase. No magic values are allowed elsewhere.

:module: constants
:synopsis: Centralized constants and configuration for LookupAlchemy
:author: LookupAlchemy Contributors
"""

from __future__ import annotations

from enum import Enum
from typing import Final


# ============================================================================
# TABLE CACHE STATES
# ============================================================================

class LookupTableState(Enum):
    """
    Load state of one lookup table cache.

    :class: LookupTableState
    :synopsis: Enumeration of the table cache lifecycle states
    """

    UNLOADED = "unloaded"  # Nothing published, next access loads
    LOADING = "loading"    # One loader call in flight
    LOADED = "loaded"      # Snapshot published


# ============================================================================
# ERROR MESSAGES
# ============================================================================

class ErrorMessages:
    """Error message constants."""

    # @@ STEP 1: Define resolution errors
    UNKNOWN_NAME: Final[str] = "Bad name '{name}' for Lookup table '{table_key}'"
    UNKNOWN_KEY: Final[str] = "Bad id '{key}' for Lookup table '{table_key}'"
    UNREGISTERED_TABLE: Final[str] = "Lookup table '{table_key}' is not registered"

    # @@ STEP 2: Define load errors
    LOAD_FAILED: Final[str] = "Failed to load Lookup table '{table_key}': {cause}"
    DUPLICATE_ENTRY: Final[str] = "Duplicate {kind} '{value}' in Lookup table '{table_key}'"
    INVALID_ENTRY: Final[str] = "Invalid entry {entry!r}: expected LookupEntry, (id, name) pair or mapping"
    INVALID_NAME: Final[str] = "Lookup name must be a string, got {type_name} ({value!r})"
    LOADER_RETURNED_NONE: Final[str] = "Loader returned None instead of a row set"

    # @@ STEP 3: Define registration errors
    INVALID_TABLE_KEY: Final[str] = "Lookup table key must be a non-empty string, got {table_key!r}"
    LOADER_NOT_CALLABLE: Final[str] = "Loader for Lookup table '{table_key}' is not callable: {loader!r}"

    # @@ STEP 4: Define loader configuration errors
    INVALID_IDENTIFIER: Final[str] = "Invalid Cypher identifier {value!r} for {field_name}"
    LOADER_CLOSED: Final[str] = "Kuzu lookup loader is closed"


# ============================================================================
# LOADER CONSTANTS
# ============================================================================

class LoaderConstants:
    """Constants shared by loaders and entry normalization."""

    # @@ STEP 1: Mapping keys accepted for dict-shaped rows
    ENTRY_ID_KEY: Final[str] = "id"
    ENTRY_NAME_KEY: Final[str] = "name"

    # @@ STEP 2: Duplicate kinds reported by DuplicateEntryError
    DUPLICATE_KIND_ID: Final[str] = "id"
    DUPLICATE_KIND_NAME: Final[str] = "name"

    # @@ STEP 3: Default property names of a lookup node table
    DEFAULT_ID_PROPERTY: Final[str] = "id"
    DEFAULT_NAME_PROPERTY: Final[str] = "name"


# ============================================================================
# CYPHER CONSTANTS
# ============================================================================

class CypherConstants:
    """Cypher templates and identifier rules for the Kuzu loader."""

    IDENTIFIER_PATTERN: Final[str] = r"^[A-Za-z_][A-Za-z0-9_]*$"
    FETCH_ALL_TEMPLATE: Final[str] = (
        "MATCH (n:{label}) RETURN n.{id_property} AS id, n.{name_property} AS name"
    )


# ============================================================================
# EXPORT ALL CONSTANTS
# ============================================================================

__all__ = [
    "LookupTableState",
    "ErrorMessages",
    "LoaderConstants",
    "CypherConstants",
]
