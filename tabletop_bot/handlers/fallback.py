"""
Fallback обработчик для неизвестных сообщений.
"""

from aiogram import Router
from aiogram.types import Message

from ..services.logger import get_logger

logger = get_logger('fallback')
router = Router()

UNKNOWN_COMMAND_TEXT = "I don't know this command. Send /help to see what I can do."


@router.message()
async def handle_unknown_message(message: Message):
    """Обработчик для всех неизвестных сообщений."""
    logger.debug(f"📝 Необработанное сообщение в чате {message.chat.id}: {message.text}")

    # Обычные реплики игроков бот молча пропускает
    if not message.text or not message.text.startswith('/'):
        return
    # Команды, адресованные другим ботам группы
    if '@' in message.text.split(maxsplit=1)[0]:
        return

    await message.reply(UNKNOWN_COMMAND_TEXT)
