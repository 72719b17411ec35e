"""Tests for the key/value backends and the preference store."""

from __future__ import annotations

import threading

import pytest

from catwiki.errors import StorageError
from catwiki.storage.backend import JsonFileStorage, MemoryStorage
from catwiki.storage.preferences import Preferences


@pytest.fixture(params=["memory", "file"])
def storage(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    return JsonFileStorage(tmp_path / "storage")


@pytest.fixture(autouse=True)
def _pref_defaults(monkeypatch):
    monkeypatch.setattr("catwiki.config.settings.auto_update_default", True)
    monkeypatch.setattr("catwiki.config.settings.auto_update_interval_days", 1)


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------

class TestBackends:
    async def test_missing_key(self, storage) -> None:
        assert await storage.get("absent") is None

    async def test_set_then_get(self, storage) -> None:
        await storage.set("cachedPagesDB", {"Company": [], "n": 1})
        assert await storage.get("cachedPagesDB") == {"Company": [], "n": 1}

    async def test_overwrite(self, storage) -> None:
        await storage.set("k", 1)
        await storage.set("k", 2)
        assert await storage.get("k") == 2

    async def test_set_many(self, storage) -> None:
        await storage.set_many({"a": True, "b": 1700000000000})
        assert await storage.get("a") is True
        assert await storage.get("b") == 1700000000000

    async def test_remove(self, storage) -> None:
        await storage.set("k", "v")
        await storage.remove("k")
        await storage.remove("k")
        assert await storage.get("k") is None

    async def test_unserialisable_value(self, storage) -> None:
        with pytest.raises(StorageError) as excinfo:
            await storage.set("k", {1, 2, 3})
        assert excinfo.value.key == "k"

    async def test_memory_values_are_copies(self) -> None:
        storage = MemoryStorage()
        value = {"list": [1]}
        await storage.set("k", value)
        value["list"].append(2)
        assert await storage.get("k") == {"list": [1]}


class TestJsonFileStorage:
    async def test_one_file_per_key(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        await storage.set("autoUpdatePagesDB", False)
        assert (tmp_path / "autoUpdatePagesDB.json").read_text(encoding="utf-8") == "false"
        assert [p.name for p in tmp_path.iterdir()] == ["autoUpdatePagesDB.json"]

    async def test_persists_across_instances(self, tmp_path) -> None:
        await JsonFileStorage(tmp_path).set("k", [1, 2])
        assert await JsonFileStorage(tmp_path).get("k") == [1, 2]

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "with space"])
    async def test_rejects_unsafe_keys(self, tmp_path, key) -> None:
        with pytest.raises(StorageError):
            await JsonFileStorage(tmp_path).set(key, 1)

    async def test_corrupt_record(self, tmp_path) -> None:
        (tmp_path / "k.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError, match="read failed"):
            await JsonFileStorage(tmp_path).get("k")

    async def test_file_access_runs_off_the_event_loop(self, tmp_path, monkeypatch) -> None:
        loop_thread = threading.get_ident()
        threads: list[int] = []
        read, write, unlink = JsonFileStorage._read, JsonFileStorage._write, JsonFileStorage._unlink

        def _read(key, path):
            threads.append(threading.get_ident())
            return read(key, path)

        def _write(self, key, path, payload):
            threads.append(threading.get_ident())
            return write(self, key, path, payload)

        def _unlink(key, path):
            threads.append(threading.get_ident())
            return unlink(key, path)

        monkeypatch.setattr(JsonFileStorage, "_read", staticmethod(_read))
        monkeypatch.setattr(JsonFileStorage, "_write", _write)
        monkeypatch.setattr(JsonFileStorage, "_unlink", staticmethod(_unlink))

        storage = JsonFileStorage(tmp_path)
        await storage.set("k", {"a": 1})
        assert await storage.get("k") == {"a": 1}
        await storage.remove("k")

        assert len(threads) == 3
        assert loop_thread not in threads

    async def test_write_failure(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(StorageError, match="write failed"):
            await JsonFileStorage(blocker / "sub").set("k", 1)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

class TestPreferences:
    async def test_defaults_written_once(self) -> None:
        storage = MemoryStorage({Preferences.AUTO_UPDATE_PAGESDB_KEY: False})
        prefs = Preferences(storage)
        await prefs.init_defaults()
        assert await storage.get(Preferences.AUTO_UPDATE_PAGESDB_KEY) is False
        assert await storage.get(Preferences.AUTO_UPDATE_PAGESDB_INTERVAL_KEY) == 1

    async def test_read_falls_back_to_default(self) -> None:
        prefs = Preferences(MemoryStorage())
        assert await prefs.auto_update_enabled() is True
        assert await prefs.auto_update_interval_days() == 1

    async def test_set_and_read(self) -> None:
        prefs = Preferences(MemoryStorage())
        await prefs.set_preference(Preferences.AUTO_UPDATE_PAGESDB_INTERVAL_KEY, 7)
        await prefs.set_preference(Preferences.AUTO_UPDATE_PAGESDB_KEY, False)
        assert await prefs.as_dict() == {
            "autoUpdatePagesDB": False,
            "autoUpdatePagesDBInterval": 7,
        }

    async def test_unknown_key(self) -> None:
        with pytest.raises(KeyError):
            await Preferences(MemoryStorage()).set_preference("theme", "dark")

    async def test_defaults_follow_settings(self, monkeypatch) -> None:
        monkeypatch.setattr("catwiki.config.settings.auto_update_interval_days", 14)
        assert await Preferences(MemoryStorage()).auto_update_interval_days() == 14
