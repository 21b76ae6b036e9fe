"""
Тесты хранилища документа трекера.
"""

import asyncio
import json
import time

import pytest

from tabletop_bot.services import tracker as model
from tabletop_bot.services.blob_store import FileBlobStore, BlobNotFound
from tabletop_bot.services.errors import StoreError
from tabletop_bot.services.storage import TrackerStorage, document_key

from conftest import SlowBlobStore


class TestDocumentKey:
    """Ключ документа чата."""

    def test_private_chat(self):
        assert document_key(12345) == "12345/store.json"

    def test_group_chat(self):
        """Отрицательный id группы превращается в '_<id>'."""
        assert document_key(-100123) == "_100123/store.json"


class TestTrackerStorage:
    """Загрузка, сохранение и сброс."""

    def test_load_missing_returns_empty(self, blob_store):
        storage = TrackerStorage(blob_store, 1)
        assert asyncio.run(storage.load()) == model.empty_tracker()
        assert blob_store.puts == 0

    def test_save_and_load(self, blob_store):
        storage = TrackerStorage(blob_store, 1)
        tracker = asyncio.run(storage.load())
        model.create_timer(tracker, "Fuse", 3)
        model.create_player(tracker, "Алиса")
        tracker['players_view'] = {'list_message_id': 10, 'keyboard_message_id': 11, 'layout': 'harm'}
        asyncio.run(storage.save(tracker))

        assert asyncio.run(TrackerStorage(blob_store, 1).load()) == tracker
        # Не-ASCII имена пишутся как есть
        assert "Алиса" in blob_store.objects["1/store.json"].decode('utf-8')

    def test_wipe(self, blob_store):
        """После сброса документ равен никогда не создававшемуся."""
        storage = TrackerStorage(blob_store, -5)
        tracker = asyncio.run(storage.load())
        model.create_timer(tracker, "Fuse", 3)
        asyncio.run(storage.save(tracker))

        asyncio.run(storage.wipe())
        assert "_5/store.json" in blob_store.objects
        assert asyncio.run(storage.load()) == asyncio.run(TrackerStorage(blob_store, 99).load())

    def test_chats_are_isolated(self, blob_store):
        first = TrackerStorage(blob_store, 1)
        tracker = asyncio.run(first.load())
        model.create_player(tracker, "Alice")
        asyncio.run(first.save(tracker))
        assert asyncio.run(TrackerStorage(blob_store, 2).load())['players'] == []

    def test_slow_backend_does_not_block_other_chats(self):
        """Чтение документа одного чата не задерживает другой чат."""
        blob_store = SlowBlobStore(delay=0.3)

        async def load_two_chats():
            started = time.monotonic()
            await asyncio.gather(
                TrackerStorage(blob_store, 1).load(),
                TrackerStorage(blob_store, 2).load(),
            )
            return time.monotonic() - started

        assert asyncio.run(load_two_chats()) < 0.5

    def test_backend_error(self, blob_store):
        blob_store.fail = True
        with pytest.raises(StoreError):
            asyncio.run(TrackerStorage(blob_store, 1).load())

    @pytest.mark.parametrize("payload", [b"not json", b"[1, 2]", b"\xff\xfe", b'{"timers": [{"name": "x"}]}'])
    def test_corrupt_payload(self, blob_store, payload):
        blob_store.objects["1/store.json"] = payload
        with pytest.raises(StoreError):
            asyncio.run(TrackerStorage(blob_store, 1).load())

    def test_legacy_document(self, blob_store):
        """Документ без counters и полей view читается с умолчаниями."""
        blob_store.objects["1/store.json"] = json.dumps({
            'timers': [{'id': 3, 'name': "Fuse", 'value': 2}],
            'players': [],
        }).encode()
        tracker = asyncio.run(TrackerStorage(blob_store, 1).load())
        assert tracker['timers_view'] is None
        assert tracker['players_view'] is None
        assert model.create_timer(tracker, "Clock", 4)['id'] == 4


class TestFileBlobStore:
    """Файловый бэкенд."""

    def test_put_get_delete(self, tmp_path):
        store = FileBlobStore(str(tmp_path))
        store.put("_1/store.json", b"{}")
        assert store.get("_1/store.json") == b"{}"
        assert not (tmp_path / "_1" / "store.json.tmp").exists()

        store.delete("_1/store.json")
        with pytest.raises(BlobNotFound):
            store.get("_1/store.json")

    def test_missing_key(self, tmp_path):
        with pytest.raises(BlobNotFound):
            FileBlobStore(str(tmp_path)).get("nope/store.json")

    def test_key_outside_root(self, tmp_path):
        with pytest.raises(StoreError):
            FileBlobStore(str(tmp_path / "data")).get("../secret")

    def test_with_tracker_storage(self, tmp_path):
        storage = TrackerStorage(FileBlobStore(str(tmp_path)), -42)
        tracker = asyncio.run(storage.load())
        model.create_timer(tracker, "Fuse", 3)
        asyncio.run(storage.save(tracker))
        assert (tmp_path / "_42" / "store.json").exists()
        assert asyncio.run(storage.load())['timers'][0]['name'] == "Fuse"
