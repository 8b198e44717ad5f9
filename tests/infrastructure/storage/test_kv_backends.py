"""Tests for the memory and file key-value backends."""

import os

import pytest

from possync.core.exceptions import StorageCorruptError, StorageReadError, StorageWriteError
from possync.infrastructure.storage import FileKeyValueStore, MemoryKeyValueStore


class TestMemoryKeyValueStore:
    async def test_get_missing(self):
        assert await MemoryKeyValueStore().get("k") is None

    async def test_set_and_get(self):
        kv = MemoryKeyValueStore()
        await kv.set("k", "v1")
        await kv.set("k", "v2")
        assert await kv.get("k") == "v2"
        assert kv.keys() == ["k"]

    async def test_initial_contents_are_copied(self):
        initial = {"k": "v"}
        kv = MemoryKeyValueStore(initial)
        await kv.set("k", "changed")
        assert initial == {"k": "v"}


class TestFileKeyValueStore:
    async def test_get_missing(self, tmp_path):
        assert await FileKeyValueStore(tmp_path).get("pos_offline_queue_v1") is None

    async def test_set_and_get(self, tmp_path):
        kv = FileKeyValueStore(tmp_path)

        await kv.set("pos_offline_queue_v1", '[{"ticketId": "a"}]')

        assert await kv.get("pos_offline_queue_v1") == '[{"ticketId": "a"}]'
        assert kv.path_for("pos_offline_queue_v1") == tmp_path / "pos_offline_queue_v1.json"

    async def test_survives_new_instance(self, tmp_path):
        await FileKeyValueStore(tmp_path).set("k", "durable")
        assert await FileKeyValueStore(tmp_path).get("k") == "durable"

    async def test_overwrite_leaves_no_temp_files(self, tmp_path):
        kv = FileKeyValueStore(tmp_path)
        await kv.set("k", "one")
        await kv.set("k", "two")

        assert await kv.get("k") == "two"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    async def test_creates_directory(self, tmp_path):
        kv = FileKeyValueStore(tmp_path / "nested" / "data")
        await kv.set("k", "v")
        assert await kv.get("k") == "v"

    def test_unsafe_key_characters_are_replaced(self, tmp_path):
        kv = FileKeyValueStore(tmp_path)
        path = kv.path_for("../etc/passwd")
        assert path.parent == tmp_path
        assert "/" not in path.name

    async def test_unicode_round_trip(self, tmp_path):
        kv = FileKeyValueStore(tmp_path)
        await kv.set("k", '{"customerName": "Śrī Café"}')
        assert await kv.get("k") == '{"customerName": "Śrī Café"}'

    async def test_read_error(self, tmp_path):
        kv = FileKeyValueStore(tmp_path)
        kv.path_for("k").mkdir()

        with pytest.raises(StorageReadError):
            await kv.get("k")

    async def test_invalid_utf8_is_corrupt_not_unreadable(self, tmp_path):
        kv = FileKeyValueStore(tmp_path)
        kv.path_for("k").write_bytes(b'[{"ticketId": "a\xff"}]')

        with pytest.raises(StorageCorruptError) as exc_info:
            await kv.get("k")

        assert exc_info.value.code == "STORAGE_CORRUPT"
        assert exc_info.value.blob == '[{"ticketId": "a\\xff"}]'

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions")
    async def test_write_error(self, tmp_path):
        target = tmp_path / "readonly"
        target.mkdir()
        target.chmod(0o500)
        kv = FileKeyValueStore(target)

        try:
            with pytest.raises(StorageWriteError):
                await kv.set("k", "v")
        finally:
            target.chmod(0o700)
