"""
JSON-хранилище документа трекера для одного чата.
"""

import asyncio
import json

from ..types import Tracker
from .blob_store import BlobStore, BlobNotFound
from .errors import StoreError
from .logger import get_logger
from .tracker import empty_tracker, normalize_tracker
from .util import chat_dir_name

logger = get_logger('storage')

DOCUMENT_NAME = 'store.json'


def document_key(chat_id: int) -> str:
    """Ключ документа чата в хранилище."""
    return f"{chat_dir_name(chat_id)}/{DOCUMENT_NAME}"


class TrackerStorage:
    """
    Загрузка и сохранение документа чата.

    Документ всегда читается и пишется целиком, без проверки версии:
    при одновременной записи побеждает последний.
    Вызовы BlobStore блокирующие, поэтому выполняются в отдельном потоке,
    чтобы не задерживать события других чатов.
    """

    def __init__(self, blob_store: BlobStore, chat_id: int):
        self.blob_store = blob_store
        self.chat_id = chat_id
        self.key = document_key(chat_id)

    async def load(self) -> Tracker:
        """Загружает документ. Если его еще нет - возвращает пустой."""
        try:
            payload = await asyncio.to_thread(self.blob_store.get, self.key)
        except BlobNotFound:
            logger.info(f"Документ {self.key} не найден, создаем пустой")
            return empty_tracker()

        try:
            raw = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StoreError(f"Corrupt document {self.key}: {e}") from e
        if not isinstance(raw, dict):
            raise StoreError(f"Corrupt document {self.key}: expected an object")

        try:
            return normalize_tracker(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Corrupt document {self.key}: {e}") from e

    async def save(self, tracker: Tracker) -> None:
        """Сохраняет документ целиком."""
        payload = json.dumps(tracker, ensure_ascii=False, indent=2).encode('utf-8')
        await asyncio.to_thread(self.blob_store.put, self.key, payload)
        logger.debug(f"Документ {self.key} сохранен")

    async def wipe(self) -> None:
        """Сбрасывает документ к пустому состоянию."""
        await self.save(empty_tracker())
        logger.info(f"Документ {self.key} сброшен")
