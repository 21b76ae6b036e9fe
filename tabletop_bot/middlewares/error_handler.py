"""
Middleware для обработки ошибок и логирования.
"""

import time
from typing import Callable, Dict, Any, Awaitable, Optional
from aiogram import BaseMiddleware
from aiogram.exceptions import TelegramAPIError
from aiogram.types import TelegramObject, Message, CallbackQuery

from ..services.logger import get_logger, log_message, log_callback, log_error, log_timing

logger = get_logger('middleware')

ERROR_TEXT = "⚠️ Error handling your request. Please try again later."


class ErrorHandlerMiddleware(BaseMiddleware):
    """
    Middleware для глобальной обработки ошибок.

    Ошибка, вышедшая из обработчика, логируется с контекстом, пользователь
    получает общее сообщение об ошибке, а в ops-чат (если задан) уходит отчет.
    """

    def __init__(self, ops_chat_id: Optional[int] = None, slow_threshold_ms: float = 500):
        super().__init__()
        self.ops_chat_id = ops_chat_id
        self.slow_threshold_ms = slow_threshold_ms
        self.error_count = 0

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        start_time = time.time()
        user_id = None
        chat_id = None
        handler_name = None

        # Извлекаем информацию о пользователе и чате
        if getattr(event, 'from_user', None):
            user_id = event.from_user.id
        if isinstance(event, Message):
            chat_id = event.chat.id
        elif isinstance(event, CallbackQuery) and event.message:
            chat_id = event.message.chat.id

        handler_object = data.get('handler')
        if handler_object is not None and hasattr(handler_object, 'callback'):
            handler_name = getattr(handler_object.callback, '__name__', None)

        if isinstance(event, Message):
            log_message(user_id or 0, chat_id or 0, event.text or 'non-text', handler_name)
        elif isinstance(event, CallbackQuery):
            log_callback(user_id or 0, chat_id or 0, event.data or 'no-data', handler_name)

        try:
            result = await handler(event, data)
        except Exception as e:
            self.error_count += 1
            duration_ms = (time.time() - start_time) * 1000

            error_context = {
                'handler_name': handler_name,
                'duration_ms': duration_ms,
                'chat_id': chat_id,
            }
            if isinstance(event, Message):
                error_context['event_type'] = 'message'
            elif isinstance(event, CallbackQuery):
                error_context['event_type'] = 'callback'
            log_error(e, error_context, user_id)

            await self._notify_user(event)
            await self._notify_ops(data.get('bot'), e, chat_id, handler_name)
            return None

        duration_ms = (time.time() - start_time) * 1000
        log_timing(handler_name or 'unknown_handler', duration_ms, user_id, self.slow_threshold_ms)
        return result

    async def _notify_user(self, event: TelegramObject) -> None:
        try:
            if isinstance(event, Message):
                await event.reply(ERROR_TEXT)
            elif isinstance(event, CallbackQuery):
                await event.answer(ERROR_TEXT, show_alert=True)
        except TelegramAPIError as reply_error:
            logger.error(f"❌ Не удалось отправить сообщение об ошибке: {reply_error}")

    async def _notify_ops(self, bot, error: Exception, chat_id: Optional[int], handler_name: Optional[str]) -> None:
        if not self.ops_chat_id or bot is None:
            return
        try:
            await bot.send_message(
                chat_id=self.ops_chat_id,
                text=(
                    f"❌ Error #{self.error_count} in {handler_name or 'unknown handler'}\n"
                    f"chat: {chat_id}\n"
                    f"{type(error).__name__}: {error}"
                ),
                parse_mode=None
            )
        except TelegramAPIError as ops_error:
            logger.error(f"❌ Не удалось отправить отчет в ops-чат: {ops_error}")
