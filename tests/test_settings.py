"""Tests for the settings and recent files store."""

from duckbench import settings
from duckbench.settings import MAX_RECENT_FILES, SettingsStore


class TestSettings:
    def test_creates_parent_directory(self, settings_path):
        SettingsStore(settings_path)
        assert settings_path.exists()

    def test_builtin_defaults(self, settings_path):
        store = SettingsStore(settings_path)
        assert store.get_setting("page_size") == "25"
        assert store.get_int_setting("column_width") == 150
        assert store.get_bool_setting("dark_mode") is True
        assert store.get_bool_setting("read_only") is False

    def test_explicit_default_wins_over_builtin(self, settings_path):
        store = SettingsStore(settings_path)
        assert store.get_setting("page_size", "50") == "50"
        assert store.get_setting("no_such_key") is None

    def test_set_and_get(self, settings_path):
        store = SettingsStore(settings_path)
        store.set_setting("page_size", 100)
        store.set_setting("read_only", "1")
        assert store.get_int_setting("page_size") == 100
        assert store.get_bool_setting("read_only") is True

    def test_persists_across_instances(self, settings_path):
        SettingsStore(settings_path).set_setting("font_size", "16")
        assert SettingsStore(settings_path).get_int_setting("font_size") == 16

    def test_bad_int_falls_back(self, settings_path):
        store = SettingsStore(settings_path)
        store.set_setting("page_size", "lots")
        assert store.get_int_setting("page_size", 25) == 25


class TestRecentFiles:
    def test_most_recent_first(self, settings_path):
        store = SettingsStore(settings_path)
        store.add_recent_file("/a.duckdb")
        store.add_recent_file("/b.duckdb")
        assert store.get_recent_files() == ["/b.duckdb", "/a.duckdb"]

    def test_reopening_moves_to_top(self, settings_path):
        store = SettingsStore(settings_path)
        for name in ("/a.duckdb", "/b.duckdb", "/a.duckdb"):
            store.add_recent_file(name)
        assert store.get_recent_files() == ["/a.duckdb", "/b.duckdb"]

    def test_list_is_capped(self, settings_path):
        store = SettingsStore(settings_path)
        for i in range(MAX_RECENT_FILES + 5):
            store.add_recent_file(f"/db{i}.duckdb")
        recent = store.get_recent_files()
        assert len(recent) == MAX_RECENT_FILES
        assert recent[0] == f"/db{MAX_RECENT_FILES + 4}.duckdb"

    def test_remove_and_clear(self, settings_path):
        store = SettingsStore(settings_path)
        store.add_recent_file("/a.duckdb")
        store.add_recent_file("/b.duckdb")
        store.remove_recent_file("/a.duckdb")
        assert store.get_recent_files() == ["/b.duckdb"]
        store.clear_recent_files()
        assert store.get_recent_files() == []


class TestModuleHelpers:
    def test_recent_file_helpers_use_shared_store(self, settings_store):
        settings.add_recent_file("/a.duckdb")
        settings.add_recent_file("/b.duckdb")
        assert settings.get_recent_files() == ["/b.duckdb", "/a.duckdb"]
        assert settings_store.get_recent_files() == ["/b.duckdb", "/a.duckdb"]

        settings.remove_recent_file("/b.duckdb")
        assert settings.get_recent_files() == ["/a.duckdb"]
        settings.clear_recent_files()
        assert settings.get_recent_files() == []
