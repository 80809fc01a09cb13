# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Core value types for lookup tables: the entry model, the loader signature and
the row normalization used on everything a loader returns.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Hashable, Iterable, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

from .constants import ErrorMessages, LoaderConstants


class LookupEntry(BaseModel):
    """
    One row of a lookup table as it was at load time.

    Immutable and hashable, so entries can be shared between threads and
    kept by callers after the table has been invalidated.
    """

    model_config = ConfigDict(frozen=True)

    id: Any
    name: StrictStr

    @field_validator("id")
    @classmethod
    def _require_hashable_id(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Lookup id must not be None")
        try:
            hash(value)
        except TypeError as exc:
            raise ValueError(f"Lookup id must be hashable, got {type(value).__name__}") from exc
        return value

    def as_pair(self) -> tuple[Hashable, str]:
        return (self.id, self.name)


EntryLike = Union[LookupEntry, Tuple[Hashable, str], Mapping[str, Any]]

# A loader receives the table key and returns the complete current row set.
Loader = Callable[[str], Iterable[EntryLike]]


def _coerce_name(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise TypeError(ErrorMessages.INVALID_NAME.format(type_name=type(value).__name__, value=value))


def normalize_entry(row: Any) -> LookupEntry:
    """
    Convert one loader row to a :class:`LookupEntry`.

    Accepts a ``LookupEntry``, a two-item ``(id, name)`` sequence or a mapping
    with ``id`` and ``name`` keys.
    """
    if isinstance(row, LookupEntry):
        return row

    if isinstance(row, Mapping):
        if LoaderConstants.ENTRY_ID_KEY not in row or LoaderConstants.ENTRY_NAME_KEY not in row:
            raise TypeError(ErrorMessages.INVALID_ENTRY.format(entry=row))
        key = row[LoaderConstants.ENTRY_ID_KEY]
        name = row[LoaderConstants.ENTRY_NAME_KEY]
        return LookupEntry(id=key, name=_coerce_name(name))

    if isinstance(row, (tuple, list)) and len(row) == 2:
        key, name = row
        return LookupEntry(id=key, name=_coerce_name(name))

    raise TypeError(ErrorMessages.INVALID_ENTRY.format(entry=row))


def normalize_entries(rows: Iterable[Any]) -> List[LookupEntry]:
    if rows is None:
        raise TypeError(ErrorMessages.LOADER_RETURNED_NONE)
    return [normalize_entry(row) for row in rows]


__all__ = [
    "LookupEntry",
    "EntryLike",
    "Loader",
    "normalize_entry",
    "normalize_entries",
]
