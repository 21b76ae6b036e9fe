"""
Клавиатуры управления таймерами и игроками.
"""

from typing import List

from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from ..types import Timer, Player, PlayersLayout
from .callback_codec import ActionKind, encode_callback

# Подписи сообщения с клавиатурой для каждого вида
TIMERS_CAPTION = "⏳ Timers"
TIMERS_EXPANDED_CAPTION = "⏳ Manage timers"

PLAYERS_CAPTIONS = {
    'none': "🎭 Players",
    'manage_players': "🎭 Manage players",
    'harm': "🩸 Manage harm",
    'stress': "😰 Manage stress",
}


class NavigationService:
    """Сервис для создания клавиатур с кнопками навигации."""

    @staticmethod
    def button(item_id: int, text: str, action: ActionKind) -> InlineKeyboardButton:
        """Кнопка с закодированным действием."""
        return InlineKeyboardButton(text=text, callback_data=encode_callback(item_id, action))

    @staticmethod
    def add_back_button(
        buttons: List[List[InlineKeyboardButton]],
        back_action: ActionKind,
        text: str = "🔙 Back"
    ) -> List[List[InlineKeyboardButton]]:
        """Добавляет кнопку 'Назад' в конец списка кнопок."""
        result = buttons.copy()
        result.append([NavigationService.button(0, text, back_action)])
        return result

    @staticmethod
    def timers_keyboard(timers: List[Timer], expanded: bool) -> InlineKeyboardMarkup:
        """Клавиатура таймеров: одна кнопка "Manage" или ряд на каждый таймер."""
        if not expanded:
            return InlineKeyboardMarkup(inline_keyboard=[
                [nav.button(0, "Manage", ActionKind.SHOW_TIMERS_KB)]
            ])

        buttons = [
            [
                nav.button(timer['id'], timer['name'], ActionKind.NO_ACTION),
                nav.button(timer['id'], "+1", ActionKind.ADD_TIMER),
                nav.button(timer['id'], "-1", ActionKind.SUB_TIMER),
                nav.button(timer['id'], "Delete", ActionKind.DELETE_TIMER),
            ]
            for timer in timers
        ]
        return InlineKeyboardMarkup(
            inline_keyboard=nav.add_back_button(buttons, ActionKind.HIDE_TIMERS_KB, "Hide")
        )

    @staticmethod
    def players_keyboard(players: List[Player], layout: PlayersLayout) -> InlineKeyboardMarkup:
        """Клавиатура игроков для одного из четырех видов."""
        if layout == 'none':
            return InlineKeyboardMarkup(inline_keyboard=[[
                nav.button(0, "Manage harm", ActionKind.SHOW_HARM_KB),
                nav.button(0, "Manage stress", ActionKind.SHOW_STRESS_KB),
                nav.button(0, "Manage players", ActionKind.SHOW_PLAYERS_KB),
            ]])

        if layout == 'harm':
            buttons = [
                [
                    nav.button(p['id'], p['name'], ActionKind.NO_ACTION),
                    nav.button(p['id'], "+1 harm", ActionKind.ADD_HARM),
                    nav.button(p['id'], "-1 harm", ActionKind.SUB_HARM),
                ]
                for p in players
            ]
        elif layout == 'stress':
            buttons = [
                [
                    nav.button(p['id'], p['name'], ActionKind.NO_ACTION),
                    nav.button(p['id'], "+1 stress", ActionKind.ADD_STRESS),
                    nav.button(p['id'], "-1 stress", ActionKind.SUB_STRESS),
                ]
                for p in players
            ]
        else:
            buttons = [
                [
                    nav.button(p['id'], p['name'], ActionKind.NO_ACTION),
                    nav.button(p['id'], "Delete", ActionKind.DELETE_PLAYER),
                ]
                for p in players
            ]
        return InlineKeyboardMarkup(
            inline_keyboard=nav.add_back_button(buttons, ActionKind.HIDE_PLAYERS_KB)
        )


def timers_caption(expanded: bool) -> str:
    return TIMERS_EXPANDED_CAPTION if expanded else TIMERS_CAPTION


def players_caption(layout: PlayersLayout) -> str:
    return PLAYERS_CAPTIONS[layout]


# Глобальный экземпляр сервиса навигации
nav = NavigationService()
