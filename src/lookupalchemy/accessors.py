# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Convenience accessors for entities holding a foreign key into a lookup table.

An accessor is bound to a manager, a table key and the name of the foreign-key
attribute on the entity. It does no caching of its own; every call goes through
:class:`~lookupalchemy.manager.LookupCacheManager`.

Example::

    user_type = LookupAccessor(manager, "UserType", "user_type_id")
    user_type.get_name(user)                 # 'Administrator'
    user_type.is_name(user, "Guest")         # False
    user_type.set_by_name(user, "User")      # user.user_type_id == 2
"""

from __future__ import annotations

from typing import Any, Iterable, List

from .manager import LookupCacheManager


class LookupAccessor:
    """Name-based access to one foreign-key attribute."""

    def __init__(self, manager: LookupCacheManager, table_key: str, foreign_key: str) -> None:
        self.manager = manager
        self.table_key = table_key
        self.foreign_key = foreign_key

    def __repr__(self) -> str:
        return f"LookupAccessor(table_key={self.table_key!r}, foreign_key={self.foreign_key!r})"

    def get_name(self, entity: Any) -> str:
        return self.manager.resolve_name(self.table_key, getattr(entity, self.foreign_key))

    def id_for(self, name: str) -> Any:
        return self.manager.resolve_id(self.table_key, name)

    def set_by_name(self, entity: Any, name: str) -> Any:
        """Point the entity's foreign key at the row called ``name`` and return its id."""
        key = self.manager.resolve_id(self.table_key, name)
        setattr(entity, self.foreign_key, key)
        return key

    def is_name(self, entity: Any, name: str) -> bool:
        return self.manager.matches(self.table_key, getattr(entity, self.foreign_key), name)


def lookup_names_through(
    manager: LookupCacheManager,
    table_key: str,
    rows: Iterable[Any],
    foreign_key: str,
) -> List[str]:
    """
    Names of the lookup rows referenced by each of ``rows``, in order.

    Covers many-to-many links through a join table, e.g. the permission names of a
    user given its ``UserPermission`` rows.
    """
    return [manager.resolve_name(table_key, getattr(row, foreign_key)) for row in rows]


__all__ = [
    "LookupAccessor",
    "lookup_names_through",
]
