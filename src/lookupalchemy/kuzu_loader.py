# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Lookup table loader reading node tables from a Kuzu database.

Each lookup table key is mapped to a node label plus the properties holding the
row id and the row name. Loading a table runs one ``MATCH ... RETURN`` over the
whole label and hands every row to the cache.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional, Union

import kuzu
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from .constants import CypherConstants, ErrorMessages, LoaderConstants
from .exceptions import UnregisteredTableError
from .manager import LookupCacheManager
from .types import LookupEntry

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(CypherConstants.IDENTIFIER_PATTERN)


class LookupTableMapping(BaseModel):
    """Where the rows of one lookup table live in the graph."""

    model_config = ConfigDict(frozen=True)

    label: str
    id_property: str = LoaderConstants.DEFAULT_ID_PROPERTY
    name_property: str = LoaderConstants.DEFAULT_NAME_PROPERTY

    @field_validator("label", "id_property", "name_property")
    @classmethod
    def _validate_identifier(cls, value: str, info: ValidationInfo) -> str:
        # Labels and properties are spliced into the query text, parameters cannot carry them
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(ErrorMessages.INVALID_IDENTIFIER.format(value=value, field_name=info.field_name))
        return value

    def fetch_query(self) -> str:
        return CypherConstants.FETCH_ALL_TEMPLATE.format(
            label=self.label,
            id_property=self.id_property,
            name_property=self.name_property,
        )


class KuzuLookupLoader:
    """
    Loader callable backed by a Kuzu connection.

    The instance itself is the loader: ``loader("UserType")`` returns the complete
    row set of the mapped node table as :class:`LookupEntry` objects.
    """

    def __init__(
        self,
        connection: kuzu.Connection,
        mappings: Mapping[str, Union[LookupTableMapping, str]],
    ) -> None:
        """
        Args:
            connection: Open Kuzu connection
            mappings: Table key to mapping; a bare string is taken as the node label
                with the default ``id``/``name`` properties
        """
        self._connection = connection
        self._database: Optional[kuzu.Database] = None
        self._mappings: Dict[str, LookupTableMapping] = {
            table_key: mapping if isinstance(mapping, LookupTableMapping) else LookupTableMapping(label=mapping)
            for table_key, mapping in mappings.items()
        }
        self._lock = RLock()
        self._closed = False

    @classmethod
    def from_path(
        cls,
        db_path: Union[str, Path],
        mappings: Mapping[str, Union[LookupTableMapping, str]],
        read_only: bool = True,
    ) -> "KuzuLookupLoader":
        """Open the database at ``db_path`` and own it until :meth:`close`."""
        database = kuzu.Database(str(Path(db_path)), read_only=read_only)
        loader = cls(kuzu.Connection(database), mappings)
        loader._database = database
        return loader

    @property
    def mappings(self) -> Dict[str, LookupTableMapping]:
        return dict(self._mappings)

    def __call__(self, table_key: str) -> List[LookupEntry]:
        mapping = self._mappings.get(table_key)
        if mapping is None:
            raise UnregisteredTableError(table_key)

        query = mapping.fetch_query()
        rows: List[Any] = []
        with self._lock:
            if self._closed:
                raise RuntimeError(ErrorMessages.LOADER_CLOSED)
            result = self._connection.execute(query)
            try:
                while result.has_next():
                    rows.append(result.get_next())
            finally:
                result.close()

        logger.debug(f"Fetched {len(rows)} rows for lookup table '{table_key}' from label '{mapping.label}'")
        return [LookupEntry(id=row[0], name=row[1]) for row in rows]

    def register_all(self, manager: LookupCacheManager) -> None:
        """Register this loader for every mapped table key."""
        for table_key in self._mappings:
            manager.register_table(table_key, self)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._connection.close()
            if self._database is not None:
                self._database.close()
                self._database = None

    def __enter__(self) -> "KuzuLookupLoader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    "LookupTableMapping",
    "KuzuLookupLoader",
]
