# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and shared fixtures for LookupAlchemy tests.
"""

from __future__ import annotations

from typing import Generator

import pytest

from lookupalchemy import LookupCacheManager

from . import USER_TYPE_ROWS, RecordingLoader


@pytest.fixture(scope="function")
def user_type_loader() -> RecordingLoader:
    """Loader for the UserType table: Administrator, User, Guest."""
    return RecordingLoader(USER_TYPE_ROWS)


@pytest.fixture(scope="function")
def manager(user_type_loader: RecordingLoader) -> Generator[LookupCacheManager, None, None]:
    """Isolated manager with UserType registered."""
    lookup_manager = LookupCacheManager()
    lookup_manager.register_table("UserType", user_type_loader)
    try:
        yield lookup_manager
    finally:
        lookup_manager.reset()
