"""
Кодирование действий кнопок в callback_data и обратно.

Формат: "<item_id>|<ActionKind>", например "12|AddHarm".
Telegram ограничивает callback_data 64 байтами.
"""

from enum import Enum
from typing import NamedTuple

from .errors import InvalidCallbackError

DELIMITER = '|'
MAX_CALLBACK_BYTES = 64
MAX_ITEM_ID = 2 ** 64 - 1


class ActionKind(str, Enum):
    """Действие кнопки. Значение - символ, который передается в callback_data."""
    NO_ACTION = 'NoAction'
    ADD_TIMER = 'AddTimer'
    SUB_TIMER = 'SubTimer'
    DELETE_TIMER = 'DeleteTimer'
    ADD_HARM = 'AddHarm'
    SUB_HARM = 'SubHarm'
    ADD_STRESS = 'AddStress'
    SUB_STRESS = 'SubStress'
    DELETE_PLAYER = 'DeletePlayer'
    SHOW_TIMERS_KB = 'ShowTimersKb'
    HIDE_TIMERS_KB = 'HideTimersKb'
    SHOW_PLAYERS_KB = 'ShowPlayersKb'
    SHOW_HARM_KB = 'ShowHarmKb'
    SHOW_STRESS_KB = 'ShowStressKb'
    HIDE_PLAYERS_KB = 'HidePlayersKb'


class CallbackData(NamedTuple):
    item_id: int
    action: ActionKind


def encode_callback(item_id: int, action: ActionKind) -> str:
    """Кодирует пару (id, действие) в строку для кнопки."""
    if item_id < 0 or item_id > MAX_ITEM_ID:
        raise ValueError(f"item_id out of range: {item_id}")
    data = f"{item_id}{DELIMITER}{action.value}"
    if len(data.encode('utf-8')) > MAX_CALLBACK_BYTES:
        raise ValueError(f"Callback data too long: {data}")
    return data


def decode_callback(data: str) -> CallbackData:
    """
    Разбирает callback_data кнопки.

    Raises:
        InvalidCallbackError: строка не состоит ровно из двух полей,
            id не является целым из диапазона 0..2**64-1 или действие неизвестно.
    """
    fields = data.split(DELIMITER)
    if len(fields) != 2:
        raise InvalidCallbackError(f"Invalid callback data: {data!r}")

    raw_id, raw_action = fields
    if not (raw_id.isascii() and raw_id.isdigit()):
        raise InvalidCallbackError(f"Invalid item id in callback data: {data!r}")

    try:
        action = ActionKind(raw_action)
    except ValueError:
        raise InvalidCallbackError(f"Unknown action in callback data: {data!r}")

    item_id = int(raw_id)
    if item_id > MAX_ITEM_ID:
        raise InvalidCallbackError(f"Item id out of range in callback data: {data!r}")

    return CallbackData(item_id, action)
