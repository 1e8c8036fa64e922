import asyncio
import json
from unittest.mock import patch

import pytest

from soundpoint.errors import ConfigurationError, InsufficientFundsError
from soundpoint.storage import InMemoryPointStore, JsonPointStore, SettingsAudioCatalog
from soundpoint.config.model import AudioReference
from tests.fakes import YieldingPointStore


@pytest.mark.asyncio
async def test_first_reference_creates_zero_balance():
    store = InMemoryPointStore()
    assert await store.get_balance(" @Viewer ") == 0
    assert store.snapshot() == {"viewer": 0}


@pytest.mark.asyncio
async def test_initial_balances_are_normalized():
    store = InMemoryPointStore({"Viewer": 12})
    assert await store.get_balance("viewer") == 12


@pytest.mark.asyncio
async def test_set_balance_rejects_negative():
    store = InMemoryPointStore()
    with pytest.raises(ValueError):
        await store.set_balance("viewer", -1)


@pytest.mark.asyncio
async def test_adjust_refuses_to_go_negative():
    store = InMemoryPointStore({"viewer": 30})
    with pytest.raises(InsufficientFundsError) as excinfo:
        await store.adjust_balance("viewer", -50)
    assert excinfo.value.balance == 30
    assert excinfo.value.delta == -50
    assert await store.get_balance("viewer") == 30
    assert await store.adjust_balance("viewer", -30) == 0


@pytest.mark.asyncio
async def test_concurrent_adjustments_are_serialized():
    store = YieldingPointStore()
    await asyncio.gather(*(store.adjust_balance("viewer", 1) for _ in range(25)))
    assert await store.get_balance("viewer") == 25


@pytest.mark.asyncio
async def test_idle_user_locks_are_pruned():
    store = InMemoryPointStore()
    with patch("soundpoint.storage.memory.time.monotonic", return_value=0.0):
        await store.get_balance("old")
    with patch("soundpoint.storage.memory.time.monotonic", return_value=10_000.0):
        await store.get_balance("new")
    assert "old" not in store._locks
    assert "new" in store._locks


@pytest.mark.asyncio
async def test_json_store_persists_every_change(tmp_path):
    path = tmp_path / "points.json"
    store = JsonPointStore(path)
    await store.set_balance("Viewer", 80)
    await store.adjust_balance("viewer", -50)
    assert json.loads(path.read_text(encoding="utf-8")) == {"balances": {"viewer": 30}}
    reloaded = JsonPointStore(path)
    assert await reloaded.get_balance("viewer") == 30
    assert list(tmp_path.glob("*.tmp")) == []


@pytest.mark.asyncio
async def test_json_store_missing_file_starts_empty(tmp_path):
    store = JsonPointStore(tmp_path / "nested" / "points.json")
    assert store.snapshot() == {}
    await store.get_balance("viewer")
    assert (tmp_path / "nested" / "points.json").exists()


def test_json_store_skips_non_integer_balances(tmp_path):
    path = tmp_path / "points.json"
    path.write_text(
        json.dumps({"balances": {"a": 5, "b": "x", "c": True, "d": 1.5}}), encoding="utf-8"
    )
    assert JsonPointStore(path).snapshot() == {"a": 5}


def test_json_store_corrupt_file_is_configuration_error(tmp_path):
    path = tmp_path / "points.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        JsonPointStore(path)


def test_catalog_lookup_is_case_insensitive():
    reference = AudioReference(price=10, file_name="horn.wav")
    catalog = SettingsAudioCatalog({"Horn": reference})
    assert catalog.get_audio_reference(" HORN ") is reference
    assert catalog.get_audio_reference("missing") is None


@pytest.mark.asyncio
async def test_json_store_write_failure_leaves_balance_unchanged(tmp_path):
    path = tmp_path / "points.json"
    store = JsonPointStore(path)
    await store.set_balance("viewer", 80)
    with patch.object(store, "_atomic_write", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            await store.adjust_balance("viewer", -50)
        with pytest.raises(OSError):
            await store.get_balance("newcomer")
    assert store.snapshot() == {"viewer": 80}
    assert json.loads(path.read_text(encoding="utf-8")) == {"balances": {"viewer": 80}}
    await store.set_balance("other", 5)
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "balances": {"other": 5, "viewer": 80}
    }


@pytest.mark.asyncio
async def test_concurrent_users_all_reach_the_file(tmp_path):
    path = tmp_path / "points.json"
    store = JsonPointStore(path)
    await asyncio.gather(*(store.set_balance(f"user{i}", i) for i in range(5)))
    assert json.loads(path.read_text(encoding="utf-8"))["balances"] == {
        f"user{i}": i for i in range(5)
    }
