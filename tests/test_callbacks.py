"""
Тесты обработчика нажатий на кнопки.
"""

import asyncio

from tabletop_bot.handlers.callbacks import callback_tracker_action
from tabletop_bot.services.callback_codec import ActionKind, encode_callback
from tabletop_bot.services.tracker_handler import make_tracker_handler

from conftest import CHAT_ID, FakeCallback


def add_player(bot, blob_store, name="Alice"):
    handler = make_tracker_handler(bot, blob_store, CHAT_ID)
    asyncio.run(handler.handle_create_player("<b>Tester</b>", name))


class TestCallbackTrackerAction:

    def test_unknown_payload_gets_alert(self, bot, blob_store):
        """Неразбираемая кнопка: алерт, документ не трогается."""
        callback = FakeCallback(bot, "1|Explode")
        asyncio.run(callback_tracker_action(callback, blob_store))

        assert callback.answers == [{'text': "Unknown button, please open the list again.", 'show_alert': True}]
        assert blob_store.puts == 0
        assert bot.sent == []

    def test_confirmation_is_posted_to_chat(self, bot, blob_store):
        add_player(bot, blob_store)
        callback = FakeCallback(bot, encode_callback(1, ActionKind.ADD_HARM), full_name="Tom & <Jerry>")

        asyncio.run(callback_tracker_action(callback, blob_store))

        assert bot.sent[-1]['chat_id'] == CHAT_ID
        assert bot.sent[-1]['text'] == "<b>Tom &amp; &lt;Jerry&gt;</b>: <b>Alice</b> now has <b>1</b> harm"
        assert callback.answers == [{'text': None, 'show_alert': False}]

    def test_no_action_is_answered_silently(self, bot, blob_store):
        add_player(bot, blob_store)
        puts = blob_store.puts
        callback = FakeCallback(bot, encode_callback(1, ActionKind.NO_ACTION))

        asyncio.run(callback_tracker_action(callback, blob_store))

        assert bot.sent == []
        assert blob_store.puts == puts
        assert callback.answers == [{'text': None, 'show_alert': False}]

    def test_entity_error_is_posted(self, bot, blob_store):
        callback = FakeCallback(bot, encode_callback(42, ActionKind.DELETE_TIMER))
        asyncio.run(callback_tracker_action(callback, blob_store))

        assert "not found" in bot.sent[-1]['text']
        assert blob_store.puts == 0
        assert len(callback.answers) == 1

    def test_without_message(self, bot, blob_store):
        """Кнопка без исходного сообщения просто подтверждается."""
        callback = FakeCallback(bot, encode_callback(1, ActionKind.ADD_HARM), with_message=False)
        asyncio.run(callback_tracker_action(callback, blob_store))

        assert callback.answers == [{'text': None, 'show_alert': False}]
        assert bot.sent == []
