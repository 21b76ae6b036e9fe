"""
Обработка команд и нажатий кнопок трекера.

Каждая изменяющая операция проходит один цикл:
загрузка документа -> изменение в памяти -> обновление сообщений -> сохранение.
Методы возвращают текст подтверждения для чата (или None, если отвечать не нужно).
"""

from typing import Awaitable, Callable, Optional

from aiogram import html

from ..types import Tracker, PlayersLayout
from . import tracker as model
from .blob_store import BlobStore
from .callback_codec import ActionKind, CallbackData
from .errors import EntityError, InvalidCallbackError
from .logger import get_logger
from .storage import TrackerStorage
from .view_sync import ViewSynchronizer

logger = get_logger('tracker_handler')

RESET_CONFIRMATION = 'yes'

RESET_PROMPT_TEXT = "Are you sure? If so, send <code>/reset yes</code>"
RESET_DONE_TEXT = "🧹 {actor} reset the tracker"
RESET_REJECTED_TEXT = "Only '{token}' is accepted as confirmation, but received '{received}'"
OUTDATED_KEYBOARD_TEXT = "This keyboard is outdated, open the list again with /t or /p"
EMPTY_NAME_TEXT = "{kind} name can't be empty"


class TrackerHandler:
    """Точка входа для всех операций трекера в одном чате."""

    def __init__(self, bot, storage: TrackerStorage, chat_id: int):
        self.bot = bot
        self.storage = storage
        self.chat_id = chat_id
        self.views = ViewSynchronizer(bot, chat_id)

    async def _mutate(
        self,
        mutation: Callable[[Tracker], str],
        refresh: Callable[[Tracker], Awaitable[None]]
    ) -> str:
        """
        Загружает документ, применяет изменение, обновляет сообщения и сохраняет.

        Ошибка модели превращается в текст ответа, документ при этом не сохраняется.
        """
        tracker = await self.storage.load()
        try:
            text = mutation(tracker)
        except EntityError as e:
            logger.info(f"Операция отклонена в чате {self.chat_id}: {e}")
            return f"⚠️ {html.quote(str(e))}"

        await refresh(tracker)
        await self.storage.save(tracker)
        return text

    # ----- Сброс -----

    async def handle_reset(self, actor: str, confirm: str) -> str:
        """Двухшаговый сброс: без аргумента - вопрос, с 'yes' - очистка."""
        confirm = confirm.strip()
        if not confirm:
            return RESET_PROMPT_TEXT
        if confirm != RESET_CONFIRMATION:
            return RESET_REJECTED_TEXT.format(token=RESET_CONFIRMATION, received=html.quote(confirm))

        tracker = await self.storage.load()
        await self.views.close_views(tracker)
        await self.storage.wipe()
        logger.info(f"Трекер чата {self.chat_id} сброшен")
        return RESET_DONE_TEXT.format(actor=actor)

    # ----- Таймеры -----

    async def handle_list_timers(self) -> None:
        tracker = await self.storage.load()
        await self.views.open_timers_view(tracker)
        await self.storage.save(tracker)

    async def handle_create_timer(self, actor: str, name: str, start_value: int) -> str:
        name = name.strip()
        if not name:
            return EMPTY_NAME_TEXT.format(kind='Timer')

        def mutation(tracker: Tracker) -> str:
            timer = model.create_timer(tracker, name, start_value)
            return f"{actor}: timer {html.bold(html.quote(timer['name']))} added with {html.bold(timer['value'])} ticks"

        return await self._mutate(mutation, self.views.refresh_timers)

    async def handle_adjust_timer(self, actor: str, timer_id: int, delta: int) -> str:
        """Изменяет таймер. Таймер со значением <= 0 срабатывает и удаляется."""
        def mutation(tracker: Tracker) -> str:
            timer = model.adjust_timer(tracker, timer_id, delta)
            if timer['value'] <= 0:
                model.delete_timer(tracker, timer_id)
                return f"{actor}: timer {html.bold(html.quote(timer['name']))} has fired!"
            return f"{actor}: timer {html.bold(html.quote(timer['name']))} has {html.bold(timer['value'])} ticks left"

        return await self._mutate(mutation, self.views.refresh_timers)

    async def handle_delete_timer(self, actor: str, timer_id: int) -> str:
        def mutation(tracker: Tracker) -> str:
            timer = model.delete_timer(tracker, timer_id)
            return f"{actor}: timer {html.bold(html.quote(timer['name']))} removed"

        return await self._mutate(mutation, self.views.refresh_timers)

    async def handle_set_timers_layout(self, expanded: bool) -> Optional[str]:
        tracker = await self.storage.load()
        if await self.views.set_timers_layout(tracker, expanded) is None:
            return OUTDATED_KEYBOARD_TEXT
        await self.storage.save(tracker)
        return None

    # ----- Игроки -----

    async def handle_list_players(self) -> None:
        tracker = await self.storage.load()
        await self.views.open_players_view(tracker)
        await self.storage.save(tracker)

    async def handle_create_player(self, actor: str, name: str) -> str:
        name = name.strip()
        if not name:
            return EMPTY_NAME_TEXT.format(kind='Player')

        def mutation(tracker: Tracker) -> str:
            player = model.create_player(tracker, name)
            return f"{actor}: player {html.bold(html.quote(player['name']))} added"

        return await self._mutate(mutation, self.views.refresh_players)

    async def handle_adjust_harm(self, actor: str, player_id: int, delta: int) -> str:
        def mutation(tracker: Tracker) -> str:
            player = model.adjust_harm(tracker, player_id, delta)
            return f"{actor}: {html.bold(html.quote(player['name']))} now has {html.bold(player['harm'])} harm"

        return await self._mutate(mutation, self.views.refresh_players)

    async def handle_adjust_stress(self, actor: str, player_id: int, delta: int) -> str:
        def mutation(tracker: Tracker) -> str:
            player = model.adjust_stress(tracker, player_id, delta)
            return f"{actor}: {html.bold(html.quote(player['name']))} now has {html.bold(player['stress'])} stress"

        return await self._mutate(mutation, self.views.refresh_players)

    async def handle_delete_player(self, actor: str, player_id: int) -> str:
        def mutation(tracker: Tracker) -> str:
            player = model.delete_player(tracker, player_id)
            return f"{actor}: player {html.bold(html.quote(player['name']))} removed"

        return await self._mutate(mutation, self.views.refresh_players)

    async def handle_set_players_layout(self, layout: PlayersLayout) -> Optional[str]:
        tracker = await self.storage.load()
        if await self.views.set_players_layout(tracker, layout) is None:
            return OUTDATED_KEYBOARD_TEXT
        await self.storage.save(tracker)
        return None

    # ----- Кнопки -----

    async def handle_action(self, actor: str, callback: CallbackData) -> Optional[str]:
        """Выполняет действие нажатой кнопки."""
        action = callback.action
        item_id = callback.item_id

        if action is ActionKind.NO_ACTION:
            return None
        elif action is ActionKind.ADD_TIMER:
            return await self.handle_adjust_timer(actor, item_id, 1)
        elif action is ActionKind.SUB_TIMER:
            return await self.handle_adjust_timer(actor, item_id, -1)
        elif action is ActionKind.DELETE_TIMER:
            return await self.handle_delete_timer(actor, item_id)
        elif action is ActionKind.ADD_HARM:
            return await self.handle_adjust_harm(actor, item_id, 1)
        elif action is ActionKind.SUB_HARM:
            return await self.handle_adjust_harm(actor, item_id, -1)
        elif action is ActionKind.ADD_STRESS:
            return await self.handle_adjust_stress(actor, item_id, 1)
        elif action is ActionKind.SUB_STRESS:
            return await self.handle_adjust_stress(actor, item_id, -1)
        elif action is ActionKind.DELETE_PLAYER:
            return await self.handle_delete_player(actor, item_id)
        elif action is ActionKind.SHOW_TIMERS_KB:
            return await self.handle_set_timers_layout(True)
        elif action is ActionKind.HIDE_TIMERS_KB:
            return await self.handle_set_timers_layout(False)
        elif action is ActionKind.SHOW_PLAYERS_KB:
            return await self.handle_set_players_layout('manage_players')
        elif action is ActionKind.SHOW_HARM_KB:
            return await self.handle_set_players_layout('harm')
        elif action is ActionKind.SHOW_STRESS_KB:
            return await self.handle_set_players_layout('stress')
        elif action is ActionKind.HIDE_PLAYERS_KB:
            return await self.handle_set_players_layout('none')

        raise InvalidCallbackError(f"Unhandled action: {action}")


def make_tracker_handler(bot, blob_store: BlobStore, chat_id: int) -> TrackerHandler:
    """Создает обработчик трекера для чата."""
    return TrackerHandler(bot, TrackerStorage(blob_store, chat_id), chat_id)
