from unittest.mock import MagicMock

import pytest

from core.configuration import ConfigurationRegistry
from core.exceptions import MalformedConfigDataError
from core.permissions import PermissionStore

from fakes import FakeContext

BOT_ID = 900


def _permissions(tmp_path, default_level=2, context_defaults=None):
    configurations = ConfigurationRegistry(tmp_path)
    store = PermissionStore(configurations, default_level, bot_user_id=BOT_ID)
    store.logger = MagicMock()
    return store, FakeContext(default_permissions=context_defaults)


def _stored(store, context):
    return store.configurations.get(context, store.file_name)


def test_fallback_chain(tmp_path) -> None:
    store, context = _permissions(tmp_path, default_level=2, context_defaults={7: 63})

    assert store.get(context, 7) == 63
    assert store.get(context, 8) == 2


def test_no_default_level_means_zero(tmp_path) -> None:
    store, context = _permissions(tmp_path, default_level=None)

    assert store.get(context, 8) == 0


def test_stored_level_wins_over_context_default(tmp_path) -> None:
    store, context = _permissions(tmp_path, context_defaults={7: 63})

    assert store.set(context, 7, 3) is True
    assert store.get(context, 7) == 3
    assert _stored(store, context).get("7") == "3"


def test_setting_same_level_is_a_no_op(tmp_path) -> None:
    store, context = _permissions(tmp_path)
    config = _stored(store, context)
    config.save = MagicMock(wraps=config.save)

    assert store.set(context, 10, 2) is False
    config.save.assert_not_called()
    store.logger.info.assert_not_called()

    assert store.set(context, 10, 5) is True
    config.save.assert_called_once()
    store.logger.info.assert_called_once()
    assert "from 2 to 5" in store.logger.info.call_args[0][0]


def test_bot_always_reads_255_and_cannot_change(tmp_path) -> None:
    store, context = _permissions(tmp_path)
    _stored(store, context).set(str(BOT_ID), "1")

    assert store.get(context, BOT_ID) == 255
    assert store.set(context, BOT_ID, 0) is False
    assert store.get(context, BOT_ID) == 255
    assert _stored(store, context).get(str(BOT_ID)) == "1"


def test_batched_changes_wait_for_flush(tmp_path) -> None:
    store, context = _permissions(tmp_path)

    store.set(context, 10, 5, save_now=False)
    store.set(context, 11, 6, save_now=False)

    assert store.get(context, 10) == 5
    assert store.has_pending_changes
    assert _stored(store, context).get("10") is None

    store.flush_all()
    assert not store.has_pending_changes
    assert _stored(store, context).get("10") == "5"
    assert _stored(store, context).get("11") == "6"


def test_malformed_level_is_reset_and_reported(tmp_path) -> None:
    store, context = _permissions(tmp_path)
    _stored(store, context).set("10", "admin")

    with pytest.raises(MalformedConfigDataError):
        store.get(context, 10)
    assert _stored(store, context).get("10") == "2"
    assert store.get(context, 10) == 2


def test_out_of_range_stored_level_is_malformed(tmp_path) -> None:
    store, context = _permissions(tmp_path)
    _stored(store, context).set("10", "300")

    with pytest.raises(MalformedConfigDataError):
        store.get(context, 10)


def test_rejects_out_of_range_levels(tmp_path) -> None:
    store, context = _permissions(tmp_path)

    with pytest.raises(ValueError):
        store.set(context, 10, 256)
    with pytest.raises(ValueError):
        store.set(context, 10, -1)


def test_levels_are_per_context(tmp_path) -> None:
    store, context = _permissions(tmp_path)
    other = FakeContext()
    other.data_persistence_name = "ctxOther"

    store.set(context, 10, 63)
    assert store.get(other, 10) == 2
