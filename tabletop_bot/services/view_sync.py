"""
Синхронизация сообщений со списками и клавиатурами с документом трекера.

Для каждой коллекции (таймеры, игроки) в чате живут два сообщения бота:
список и клавиатура. Их id хранятся в документе (timers_view / players_view).
После каждого изменения документа сообщения редактируются на месте.
"""

import asyncio
from typing import Awaitable, Optional, Tuple

from aiogram.exceptions import TelegramAPIError

from ..types import Tracker, TimersView, PlayersView, PlayersLayout
from .errors import TransportError
from .logger import get_logger
from .navigation import nav, timers_caption, players_caption
from .render import render_timers, render_players

logger = get_logger('view_sync')


class ViewSynchronizer:
    """Редактирует, удаляет и пересоздает сообщения списков в одном чате."""

    def __init__(self, bot, chat_id: int):
        self.bot = bot
        self.chat_id = chat_id

    async def attempt(self, what: str, call: Awaitable) -> bool:
        """
        Выполняет вызов Telegram API, ошибка которого не должна прерывать обработку.

        Ошибка логируется и отбрасывается. Возвращает True, если вызов прошел.
        """
        try:
            await call
            return True
        except TelegramAPIError as e:
            if "message is not modified" in str(e).lower():
                logger.debug(f"Сообщение не изменилось ({what}) в чате {self.chat_id}")
            else:
                logger.warning(f"Не удалось выполнить '{what}' в чате {self.chat_id}: {e}")
            return False

    async def _send(self, text: str, reply_markup=None) -> int:
        try:
            message = await self.bot.send_message(chat_id=self.chat_id, text=text, reply_markup=reply_markup)
        except TelegramAPIError as e:
            raise TransportError(f"Error sending message to chat {self.chat_id}: {e}") from e
        return message.message_id

    async def _send_pair(self, list_text: str, caption: str, keyboard) -> Tuple[int, int]:
        """Отправляет список и клавиатуру. Если клавиатура не ушла, список удаляется."""
        list_message_id = await self._send(list_text)
        try:
            keyboard_message_id = await self._send(caption, reply_markup=keyboard)
        except TransportError:
            await self.attempt("delete orphaned list", self.bot.delete_message(
                chat_id=self.chat_id, message_id=list_message_id))
            raise
        return list_message_id, keyboard_message_id

    async def _delete_pair(self, list_message_id: int, keyboard_message_id: int) -> None:
        await asyncio.gather(
            self.attempt("delete list", self.bot.delete_message(
                chat_id=self.chat_id, message_id=list_message_id)),
            self.attempt("delete keyboard", self.bot.delete_message(
                chat_id=self.chat_id, message_id=keyboard_message_id)),
        )

    async def _refresh(self, list_message_id: int, list_text: str,
                       keyboard_message_id: int, keyboard) -> None:
        await asyncio.gather(
            self.attempt("edit list", self.bot.edit_message_text(
                text=list_text, chat_id=self.chat_id, message_id=list_message_id)),
            self.attempt("edit keyboard", self.bot.edit_message_reply_markup(
                chat_id=self.chat_id, message_id=keyboard_message_id, reply_markup=keyboard)),
        )

    # ----- Таймеры -----

    async def open_timers_view(self, tracker: Tracker) -> TimersView:
        """Удаляет старую пару сообщений таймеров и отправляет новую."""
        old_view = tracker['timers_view']
        if old_view:
            await self._delete_pair(old_view['list_message_id'], old_view['keyboard_message_id'])
            tracker['timers_view'] = None

        list_message_id, keyboard_message_id = await self._send_pair(
            render_timers(tracker['timers']),
            timers_caption(False),
            nav.timers_keyboard(tracker['timers'], False)
        )

        view = TimersView(
            list_message_id=list_message_id,
            keyboard_message_id=keyboard_message_id,
            keyboard_expanded=False
        )
        tracker['timers_view'] = view
        logger.info(f"Открыт список таймеров в чате {self.chat_id}: {list_message_id}/{keyboard_message_id}")
        return view

    async def refresh_timers(self, tracker: Tracker) -> None:
        """Обновляет список и кнопки таймеров, если список открыт."""
        view = tracker['timers_view']
        if not view:
            return
        await self._refresh(
            view['list_message_id'], render_timers(tracker['timers']),
            view['keyboard_message_id'], nav.timers_keyboard(tracker['timers'], view['keyboard_expanded'])
        )

    async def set_timers_layout(self, tracker: Tracker, expanded: bool) -> Optional[TimersView]:
        """Переключает клавиатуру таймеров, не трогая сообщение со списком."""
        view = tracker['timers_view']
        if not view:
            return None
        view['keyboard_expanded'] = expanded
        await self.attempt("switch timers keyboard", self.bot.edit_message_text(
            text=timers_caption(expanded),
            chat_id=self.chat_id,
            message_id=view['keyboard_message_id'],
            reply_markup=nav.timers_keyboard(tracker['timers'], expanded)
        ))
        return view

    # ----- Игроки -----

    async def open_players_view(self, tracker: Tracker) -> PlayersView:
        """Удаляет старую пару сообщений игроков и отправляет новую."""
        old_view = tracker['players_view']
        if old_view:
            await self._delete_pair(old_view['list_message_id'], old_view['keyboard_message_id'])
            tracker['players_view'] = None

        list_message_id, keyboard_message_id = await self._send_pair(
            render_players(tracker['players']),
            players_caption('none'),
            nav.players_keyboard(tracker['players'], 'none')
        )

        view = PlayersView(
            list_message_id=list_message_id,
            keyboard_message_id=keyboard_message_id,
            layout='none'
        )
        tracker['players_view'] = view
        logger.info(f"Открыт список игроков в чате {self.chat_id}: {list_message_id}/{keyboard_message_id}")
        return view

    async def refresh_players(self, tracker: Tracker) -> None:
        """Обновляет список и кнопки игроков, если список открыт."""
        view = tracker['players_view']
        if not view:
            return
        await self._refresh(
            view['list_message_id'], render_players(tracker['players']),
            view['keyboard_message_id'], nav.players_keyboard(tracker['players'], view['layout'])
        )

    async def set_players_layout(self, tracker: Tracker, layout: PlayersLayout) -> Optional[PlayersView]:
        """Переключает вид клавиатуры игроков, не трогая сообщение со списком."""
        view = tracker['players_view']
        if not view:
            return None
        view['layout'] = layout
        await self.attempt("switch players keyboard", self.bot.edit_message_text(
            text=players_caption(layout),
            chat_id=self.chat_id,
            message_id=view['keyboard_message_id'],
            reply_markup=nav.players_keyboard(tracker['players'], layout)
        ))
        return view

    async def close_views(self, tracker: Tracker) -> None:
        """Удаляет все сообщения списков (перед сбросом документа)."""
        pairs = []
        for view in (tracker['timers_view'], tracker['players_view']):
            if view:
                pairs.append(self._delete_pair(view['list_message_id'], view['keyboard_message_id']))
        if pairs:
            await asyncio.gather(*pairs)
        tracker['timers_view'] = None
        tracker['players_view'] = None
