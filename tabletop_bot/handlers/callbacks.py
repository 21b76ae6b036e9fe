"""
Обработчик нажатий на кнопки списков таймеров и игроков.
"""

from aiogram import Router, html
from aiogram.types import CallbackQuery

from ..services.blob_store import BlobStore
from ..services.callback_codec import decode_callback
from ..services.errors import InvalidCallbackError
from ..services.logger import get_logger
from ..services.tracker_handler import make_tracker_handler

logger = get_logger('callbacks')
router = Router()


@router.callback_query()
async def callback_tracker_action(callback: CallbackQuery, blob_store: BlobStore):
    """Декодирует действие кнопки и выполняет его."""
    if not callback.message:
        await callback.answer()
        return

    try:
        action = decode_callback(callback.data or '')
    except InvalidCallbackError as e:
        logger.warning(f"Неверный callback от {callback.from_user.id}: {e}")
        await callback.answer("Unknown button, please open the list again.", show_alert=True)
        return

    chat_id = callback.message.chat.id
    actor = html.bold(html.quote(callback.from_user.full_name))
    handler = make_tracker_handler(callback.bot, blob_store, chat_id)

    text = await handler.handle_action(actor, action)
    if text:
        await callback.bot.send_message(chat_id=chat_id, text=text)
    await callback.answer()
