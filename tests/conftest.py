"""
Общие фикстуры: хранилище в памяти и фейковый Telegram-бот.
"""

import time
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
from aiogram.exceptions import TelegramBadRequest

from tabletop_bot.services.blob_store import BlobStore, BlobNotFound
from tabletop_bot.services.errors import StoreError

CHAT_ID = -100123


class MemoryBlobStore(BlobStore):
    """Хранилище объектов в словаре."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.fail = False
        self.puts = 0

    def get(self, key: str) -> bytes:
        if self.fail:
            raise StoreError("backend unavailable")
        if key not in self.objects:
            raise BlobNotFound(key)
        return self.objects[key]

    def put(self, key: str, data: bytes) -> None:
        if self.fail:
            raise StoreError("backend unavailable")
        self.puts += 1
        self.objects[key] = data

    def delete(self, key: str) -> None:
        if key not in self.objects:
            raise BlobNotFound(key)
        del self.objects[key]


class SlowBlobStore(MemoryBlobStore):
    """Хранилище с блокирующей задержкой чтения, как у сетевого бэкенда."""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay

    def get(self, key: str) -> bytes:
        time.sleep(self.delay)
        return super().get(key)


class FakeBot:
    """Записывает вызовы Telegram API вместо отправки."""

    def __init__(self):
        self.next_message_id = 100
        self.sent: List[Dict[str, Any]] = []
        self.edited_texts: List[Dict[str, Any]] = []
        self.edited_markups: List[Dict[str, Any]] = []
        self.deleted: List[int] = []
        self.dice: List[int] = []
        self.fail_edits = False
        self.fail_deletes = False

    async def send_message(self, chat_id, text, reply_markup=None, **kwargs):
        self.next_message_id += 1
        self.sent.append({
            'chat_id': chat_id,
            'message_id': self.next_message_id,
            'text': text,
            'reply_markup': reply_markup,
        })
        return SimpleNamespace(message_id=self.next_message_id, chat=SimpleNamespace(id=chat_id))

    async def edit_message_text(self, text, chat_id=None, message_id=None, reply_markup=None, **kwargs):
        if self.fail_edits:
            raise TelegramBadRequest(method=None, message="Bad Request: message to edit not found")
        self.edited_texts.append({
            'chat_id': chat_id,
            'message_id': message_id,
            'text': text,
            'reply_markup': reply_markup,
        })
        return True

    async def edit_message_reply_markup(self, chat_id=None, message_id=None, reply_markup=None, **kwargs):
        if self.fail_edits:
            raise TelegramBadRequest(method=None, message="Bad Request: message to edit not found")
        self.edited_markups.append({
            'chat_id': chat_id,
            'message_id': message_id,
            'reply_markup': reply_markup,
        })
        return True

    async def delete_message(self, chat_id, message_id, **kwargs):
        if self.fail_deletes:
            raise TelegramBadRequest(method=None, message="Bad Request: message can't be deleted")
        self.deleted.append(message_id)
        return True

    async def send_dice(self, chat_id, **kwargs):
        self.dice.append(chat_id)


class FakeCallback:
    """Нажатие кнопки: записывает ответы на callback query."""

    def __init__(self, bot: FakeBot, data: str, full_name: str = "Tester", with_message: bool = True):
        self.bot = bot
        self.data = data
        self.from_user = SimpleNamespace(id=7, full_name=full_name)
        self.message = SimpleNamespace(chat=SimpleNamespace(id=CHAT_ID)) if with_message else None
        self.answers: List[Dict[str, Any]] = []

    async def answer(self, text=None, show_alert=False, **kwargs):
        self.answers.append({'text': text, 'show_alert': show_alert})


def callback_actions(markup) -> List[List[str]]:
    """callback_data всех кнопок клавиатуры по рядам."""
    return [[button.callback_data for button in row] for row in markup.inline_keyboard]


@pytest.fixture
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def bot() -> FakeBot:
    return FakeBot()
