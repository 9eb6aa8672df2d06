"""Tests for the JSON-backed local store and preferences."""

import json
import os
import stat
from unittest.mock import patch

import pytest

from expense_client.errors.internal import StorageError
from expense_client.storage.json_file import atomic_write_json, read_json
from expense_client.storage.local_store import LocalStore
from expense_client.storage.preferences import Preferences


class TestLocalStore:
    def setup_method(self):
        self.store = None

    def _store(self, tmp_path):
        self.store = LocalStore(tmp_path / "state" / "local_storage.json")
        return self.store

    def test_missing_file_reads_empty(self, tmp_path):
        store = self._store(tmp_path)
        assert store.get("authToken") is None
        assert store.keys() == []

    def test_set_persists_to_disk(self, tmp_path):
        store = self._store(tmp_path)
        store.set("theme", "dark")
        reopened = LocalStore(store.path)
        assert reopened.get("theme") == "dark"

    def test_remove_deletes_key(self, tmp_path):
        store = self._store(tmp_path)
        store.set("theme", "dark")
        store.remove("theme")
        store.remove("theme")
        assert LocalStore(store.path).get("theme") is None

    def test_non_string_value_rejected(self, tmp_path):
        store = self._store(tmp_path)
        with pytest.raises(TypeError):
            store.set("userBudget", 100)

    def test_non_string_entries_on_disk_ignored(self, tmp_path):
        path = tmp_path / "local_storage.json"
        path.write_text(json.dumps({"theme": "dark", "userBudget": 5}))
        store = LocalStore(path)
        assert store.keys() == ["theme"]

    def test_write_failure_raises_storage_error(self, tmp_path):
        store = self._store(tmp_path)
        with patch(
            "expense_client.storage.local_store.atomic_write_json",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(StorageError, match="disk full"):
                store.set("theme", "dark")
        assert store.get("theme") is None


def test_atomic_write_sets_owner_only_permissions(tmp_path):
    target = tmp_path / "file.json"
    atomic_write_json(target, {"a": "b"})
    assert read_json(target) == {"a": "b"}
    if os.name == "posix":
        assert stat.S_IMODE(target.stat().st_mode) == 0o600


def test_atomic_write_cleans_temp_file_on_failure(tmp_path):
    target = tmp_path / "file.json"
    with pytest.raises(TypeError):
        atomic_write_json(target, {"bad": object()})
    assert list(tmp_path.iterdir()) == []


def test_read_json_non_object_returns_empty(tmp_path):
    target = tmp_path / "file.json"
    target.write_text("[1, 2]")
    assert read_json(target) == {}


class TestPreferences:
    def test_defaults(self, tmp_path):
        prefs = Preferences(LocalStore(tmp_path / "s.json"))
        assert prefs.theme == "light"
        assert prefs.preferred_view == "card"
        assert prefs.budget is None

    def test_toggle_theme(self, tmp_path):
        store = LocalStore(tmp_path / "s.json")
        prefs = Preferences(store)
        assert prefs.toggle_theme() == "dark"
        assert store.get("theme") == "dark"
        assert prefs.toggle_theme() == "light"

    def test_invalid_stored_view_falls_back(self, tmp_path):
        store = LocalStore(tmp_path / "s.json")
        store.set("preferredView", "grid")
        assert Preferences(store).preferred_view == "card"

    def test_set_preferred_view_validates(self, tmp_path):
        prefs = Preferences(LocalStore(tmp_path / "s.json"))
        prefs.set_preferred_view("table")
        assert prefs.preferred_view == "table"
        with pytest.raises(ValueError):
            prefs.set_preferred_view("grid")

    def test_budget_round_trip_as_string(self, tmp_path):
        store = LocalStore(tmp_path / "s.json")
        prefs = Preferences(store)
        prefs.set_budget(1500.5)
        assert store.get("userBudget") == "1500.5"
        assert prefs.budget == 1500.5
        prefs.set_budget(None)
        assert prefs.budget is None

    @pytest.mark.parametrize("raw", ["abc", "-5", "nan", "inf"])
    def test_unusable_cached_budget_reads_none(self, tmp_path, raw):
        store = LocalStore(tmp_path / "s.json")
        store.set("userBudget", raw)
        assert Preferences(store).budget is None

    def test_negative_budget_rejected(self, tmp_path):
        prefs = Preferences(LocalStore(tmp_path / "s.json"))
        with pytest.raises(ValueError):
            prefs.set_budget(-1)
