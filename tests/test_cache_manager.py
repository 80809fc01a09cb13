# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the public resolution API of LookupCacheManager.

Covers:
- id/name resolution and round trips
- typo safety of resolve_id and matches
- registration, re-registration and unregistered tables
- invalidation and reset
- diagnostic payloads of the error types
"""

from __future__ import annotations

import pytest

from lookupalchemy import (
    DuplicateEntryError,
    LoadFailureError,
    LookupCacheError,
    LookupCacheManager,
    LookupEntry,
    LookupTableState,
    UnknownKeyError,
    UnknownNameError,
    UnregisteredTableError,
)

from . import USER_TYPE_ROWS, RecordingLoader


class TestResolution:
    """Test id to name and name to id resolution."""

    def test_resolve_name_and_id(self, manager):
        assert manager.resolve_name("UserType", 1) == "Administrator"
        assert manager.resolve_id("UserType", "Guest") == 3

    def test_round_trip_for_every_entry(self, manager):
        for key, name in USER_TYPE_ROWS:
            assert manager.resolve_id("UserType", manager.resolve_name("UserType", key)) == key
            assert manager.resolve_name("UserType", manager.resolve_id("UserType", name)) == name

    def test_single_load_serves_all_lookups(self, manager, user_type_loader):
        for _ in range(1000):
            manager.resolve_name("UserType", 2)
            manager.resolve_id("UserType", "User")
        assert user_type_loader.calls == 1

    def test_unknown_name_raises(self, manager):
        with pytest.raises(UnknownNameError) as exc_info:
            manager.resolve_id("UserType", "Superadmin")
        error = exc_info.value
        assert error.table_key == "UserType"
        assert error.name == "Superadmin"
        assert str(error) == "Bad name 'Superadmin' for Lookup table 'UserType'"

    def test_unknown_key_raises(self, manager):
        with pytest.raises(UnknownKeyError) as exc_info:
            manager.resolve_name("UserType", 42)
        assert exc_info.value.table_key == "UserType"
        assert exc_info.value.key == 42
        assert "42" in str(exc_info.value)

    def test_name_lookup_is_case_sensitive(self, manager):
        with pytest.raises(UnknownNameError):
            manager.resolve_id("UserType", "administrator")

    def test_falsy_id_resolves(self):
        manager = LookupCacheManager({"Flag": lambda table_key: [(0, "Off"), (1, "On")]})
        assert manager.resolve_id("Flag", "Off") == 0
        assert manager.resolve_name("Flag", 0) == "Off"

    def test_string_ids(self):
        manager = LookupCacheManager({"Currency": lambda table_key: [("EUR", "Euro"), ("USD", "US Dollar")]})
        assert manager.resolve_name("Currency", "EUR") == "Euro"
        assert manager.resolve_id("Currency", "US Dollar") == "USD"

    def test_entries_and_names_keep_loader_order(self, manager):
        assert manager.entries("UserType") == (
            LookupEntry(id=1, name="Administrator"),
            LookupEntry(id=2, name="User"),
            LookupEntry(id=3, name="Guest"),
        )
        assert manager.names("UserType") == ("Administrator", "User", "Guest")


class TestMatches:
    """Test the boolean predicate and its typo safety."""

    def test_matches_true_and_false(self, manager):
        assert manager.matches("UserType", 1, "Administrator") is True
        assert manager.matches("UserType", 1, "User") is False

    def test_matches_unknown_name_raises_instead_of_false(self, manager):
        with pytest.raises(UnknownNameError):
            manager.matches("UserType", 1, "Superadmin")

    def test_matches_with_dangling_id_is_false(self, manager):
        assert manager.matches("UserType", 99, "Guest") is False


class TestRegistration:
    """Test table registration rules."""

    def test_unregistered_table_raises(self, manager):
        with pytest.raises(UnregisteredTableError) as exc_info:
            manager.resolve_name("DocumentType", 1)
        assert exc_info.value.table_key == "DocumentType"
        with pytest.raises(UnregisteredTableError):
            manager.invalidate("DocumentType")
        with pytest.raises(UnregisteredTableError):
            manager.state("DocumentType")

    def test_same_loader_registration_is_idempotent(self, manager, user_type_loader):
        manager.resolve_name("UserType", 1)
        manager.register_table("UserType", user_type_loader)
        assert manager.state("UserType") is LookupTableState.LOADED
        manager.resolve_name("UserType", 1)
        assert user_type_loader.calls == 1

    def test_new_loader_replaces_and_invalidates(self, manager, user_type_loader):
        assert manager.resolve_name("UserType", 3) == "Guest"

        replacement = RecordingLoader([(1, "Administrator"), (2, "User"), (3, "Visitor")])
        manager.register_table("UserType", replacement)
        assert manager.state("UserType") is LookupTableState.UNLOADED
        assert manager.resolve_name("UserType", 3) == "Visitor"
        assert user_type_loader.calls == 1
        assert replacement.calls == 1

    def test_invalid_registrations_rejected(self):
        manager = LookupCacheManager()
        with pytest.raises(ValueError):
            manager.register_table("", lambda table_key: [])
        with pytest.raises(TypeError):
            manager.register_table("UserType", ["not", "callable"])

    def test_bulk_registration(self, user_type_loader):
        document_types = RecordingLoader([(10, "Invoice"), (11, "Receipt")])
        manager = LookupCacheManager({"UserType": user_type_loader, "DocumentType": document_types})
        assert manager.registered_tables() == ["DocumentType", "UserType"]
        assert manager.is_registered("DocumentType")
        assert not manager.is_registered("PermissionType")
        assert manager.resolve_id("DocumentType", "Receipt") == 11
        assert user_type_loader.calls == 0

    def test_tables_are_independent(self, manager, user_type_loader):
        document_types = RecordingLoader([(1, "Invoice")])
        manager.register_table("DocumentType", document_types)
        assert manager.resolve_name("DocumentType", 1) == "Invoice"
        assert manager.resolve_name("UserType", 1) == "Administrator"
        assert document_types.table_keys == ["DocumentType"]
        assert user_type_loader.table_keys == ["UserType"]

    def test_managers_are_isolated(self, user_type_loader):
        first = LookupCacheManager({"UserType": user_type_loader})
        second = LookupCacheManager({"UserType": RecordingLoader([(1, "Root")])})
        assert first.resolve_name("UserType", 1) == "Administrator"
        assert second.resolve_name("UserType", 1) == "Root"


class TestInvalidation:
    """Test administrative invalidation."""

    def test_state_transitions(self, manager):
        assert manager.state("UserType") is LookupTableState.UNLOADED
        manager.resolve_name("UserType", 1)
        assert manager.state("UserType") is LookupTableState.LOADED
        manager.invalidate("UserType")
        assert manager.state("UserType") is LookupTableState.UNLOADED

    def test_invalidate_picks_up_renamed_row(self, manager, user_type_loader):
        captured = manager.resolve_name("UserType", 3)
        user_type_loader.rows = [(1, "Administrator"), (2, "User"), (3, "Visitor")]

        # Still served from the cache until invalidated
        assert manager.resolve_name("UserType", 3) == "Guest"

        manager.invalidate("UserType")
        assert manager.resolve_name("UserType", 3) == "Visitor"
        assert captured == "Guest"
        with pytest.raises(UnknownNameError):
            manager.resolve_id("UserType", "Guest")

    def test_invalidate_before_first_load(self, manager, user_type_loader):
        manager.invalidate("UserType")
        assert user_type_loader.calls == 0

    def test_invalidate_all(self, manager, user_type_loader):
        document_types = RecordingLoader([(1, "Invoice")])
        manager.register_table("DocumentType", document_types)
        manager.resolve_name("UserType", 1)
        manager.resolve_name("DocumentType", 1)

        manager.invalidate_all()
        assert manager.state("UserType") is LookupTableState.UNLOADED
        assert manager.state("DocumentType") is LookupTableState.UNLOADED

        manager.resolve_name("UserType", 1)
        manager.resolve_name("DocumentType", 1)
        assert user_type_loader.calls == 2
        assert document_types.calls == 2

    def test_reset_keeps_registrations(self, manager, user_type_loader):
        manager.resolve_name("UserType", 1)
        manager.reset()
        assert manager.is_registered("UserType")
        assert manager.state("UserType") is LookupTableState.UNLOADED
        assert manager.resolve_name("UserType", 2) == "User"
        assert user_type_loader.calls == 2


class TestLoadErrors:
    """Test propagation of loader failures."""

    def test_load_failure_propagates_and_retries(self, manager, user_type_loader):
        user_type_loader.error = TimeoutError("query timed out")
        with pytest.raises(LoadFailureError) as exc_info:
            manager.resolve_name("UserType", 1)
        assert exc_info.value.table_key == "UserType"
        assert isinstance(exc_info.value.cause, TimeoutError)
        assert "query timed out" in str(exc_info.value)
        assert manager.state("UserType") is LookupTableState.UNLOADED

        user_type_loader.error = None
        assert manager.resolve_name("UserType", 1) == "Administrator"
        assert user_type_loader.calls == 2

    def test_duplicate_name_leaves_table_unloaded(self, manager, user_type_loader):
        user_type_loader.rows = [(1, "Administrator"), (2, "User"), (3, "User")]
        with pytest.raises(DuplicateEntryError) as exc_info:
            manager.resolve_name("UserType", 1)
        assert exc_info.value.value == "User"
        assert manager.state("UserType") is LookupTableState.UNLOADED

        user_type_loader.rows = list(USER_TYPE_ROWS)
        assert manager.resolve_id("UserType", "User") == 2

    def test_all_errors_share_base_class(self, manager, user_type_loader):
        with pytest.raises(LookupCacheError):
            manager.resolve_id("UserType", "Superadmin")
        with pytest.raises(LookupCacheError):
            manager.resolve_name("UserType", 99)
        with pytest.raises(LookupCacheError):
            manager.resolve_name("Nope", 1)
