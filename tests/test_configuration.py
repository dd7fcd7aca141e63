from unittest.mock import MagicMock

import pytest

from core.configuration import ConfigMirror, ConfigStore, ConfigurationRegistry
from core.exceptions import MalformedConfigDataError
from utils.file_utils import DataDirectory

from fakes import FakeContext


def _store(tmp_path, name="configuration.cfg") -> ConfigStore:
    return ConfigStore(DataDirectory(tmp_path / "store"), name)


def test_set_then_get(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("greeting", "hello world")

    assert store.get("greeting") == "hello world"
    assert (tmp_path / "store" / "configuration.cfg").read_text(encoding="utf-8") == "greeting hello world\n"


def test_values_survive_reload_from_disk(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("a", "1")
    store.set("b", "two words")

    reopened = _store(tmp_path)
    assert reopened.items() == [("a", "1"), ("b", "two words")]


def test_remove_then_get_returns_default(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("k", "v")

    assert store.remove("k") is True
    assert store.remove("k") is False
    assert store.get("k") is None
    assert store.get("k", "fallback") == "fallback"


def test_absent_key_with_default_is_written_back(tmp_path) -> None:
    store = _store(tmp_path)
    changes = []
    store.add_listener(changes.append)

    assert store.get("colour", "blue") == "blue"
    assert "colour=blue" in store.format_listing()
    assert _store(tmp_path).get("colour") == "blue"
    assert len(changes) == 1
    assert changes[0].just_created is True
    assert changes[0].old_value is None


def test_absent_key_without_default_is_not_written(tmp_path) -> None:
    store = _store(tmp_path)

    assert store.get("missing") is None
    assert store.keys() == []
    assert not (tmp_path / "store" / "configuration.cfg").exists()


def test_change_notifications(tmp_path) -> None:
    store = _store(tmp_path)
    changes = []
    store.add_listener(changes.append)

    store.set("k", "1")
    store.set("k", "2")
    store.remove("k")

    assert [(c.old_value, c.new_value, c.just_created) for c in changes] == [
        (None, "1", True),
        ("1", "2", False),
        ("2", None, False),
    ]


def test_failing_listener_does_not_undo_mutation(tmp_path) -> None:
    store = _store(tmp_path)
    store.logger = MagicMock()

    def broken(change):
        raise RuntimeError("boom")

    store.add_listener(broken)
    store.set("k", "v")

    assert store.get("k") == "v"
    store.logger.error.assert_called_once()


def test_deferred_writes_need_explicit_save(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("a", "1", save=False)
    store.set("b", "2", save=False)

    assert store.has_unsaved_changes
    assert _store(tmp_path).keys() == []
    assert store.reload() is False

    store.save()
    assert not store.has_unsaved_changes
    assert _store(tmp_path).keys() == ["a", "b"]


def test_rejects_keys_with_whitespace_and_multiline_values(tmp_path) -> None:
    store = _store(tmp_path)

    with pytest.raises(ValueError):
        store.set("two words", "x")
    with pytest.raises(ValueError):
        store.set("k", "line one\nline two")


def test_values_round_trip_through_the_file(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("greeting", "hi there  ")
    store.set("blank", "")

    with pytest.raises(ValueError):
        store.set("padded", "  hi there")

    reloaded = _store(tmp_path)
    assert reloaded.get("greeting") == "hi there  "
    assert reloaded.get("blank") == ""
    assert not reloaded.contains("padded")
    assert reloaded.items() == store.items()


def test_booleans_are_lowercase(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("enabled", True)

    assert store.get("enabled") == "true"
    assert store.try_get_type("enabled", False) is True


def test_try_get_type_resets_bad_values(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("limit", "lots")

    assert store.try_get_type("limit", 5) == 5
    assert store.get("limit") == "5"


def test_get_and_mandate_type_resets_and_raises(tmp_path) -> None:
    store = _store(tmp_path)
    store.set("limit", "lots")

    with pytest.raises(MalformedConfigDataError) as excinfo:
        store.get_and_mandate_type("limit", 5)
    assert "reset to its default value of 5" in excinfo.value.message
    assert store.get_and_mandate_type("limit", 5) == 5


def test_mirror_copies_file_on_change(tmp_path) -> None:
    registry = ConfigurationRegistry(tmp_path / "data")
    store = registry.get(FakeContext())
    mirror = ConfigMirror(store, tmp_path / "mirror")

    store.set("k", "v")
    mirrored = tmp_path / "mirror" / "ctxTest" / "configuration.cfg"
    assert mirrored.read_text(encoding="utf-8") == "k v\n"

    mirror.detach()
    store.set("k", "w")
    assert mirrored.read_text(encoding="utf-8") == "k v\n"


def test_mirror_failure_is_logged_only(tmp_path) -> None:
    store = _store(tmp_path)
    mirror = ConfigMirror(store, tmp_path / "mirror")
    mirror.logger = MagicMock()
    mirror.target = MagicMock()
    mirror.target.path_for.side_effect = OSError("disk gone")

    store.set("k", "v")

    assert store.get("k") == "v"
    mirror.logger.error.assert_called_once()


def test_registry_caches_one_store_per_context_and_file(tmp_path) -> None:
    registry = ConfigurationRegistry(tmp_path)
    context = FakeContext()

    assert registry.get(context) is registry.get(context)
    assert registry.get(context) is not registry.get(None)
    assert registry.get(context) is not registry.get(context, "other.cfg")
    assert registry.get(None).persistence_name == "GlobalStorageContext"
    assert registry.get(context).directory.base_path == tmp_path / "ctxTest"
