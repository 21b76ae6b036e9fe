"""
Операции над документом трекера: создание, изменение и удаление таймеров и игроков.

Все функции синхронные и работают только с документом в памяти.
Загрузка и сохранение документа - забота TrackerStorage.
"""

from typing import Any, Dict, List, Optional

from ..types import Tracker, Timer, Player, TimersView, PlayersView, PLAYERS_LAYOUTS
from .errors import DuplicateNameError, NotFoundError, CounterOverflowError

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def empty_tracker() -> Tracker:
    """Возвращает пустой документ."""
    return {
        'timers': [],
        'players': [],
        'counters': {'timerSeq': 0, 'playerSeq': 0},
        'timers_view': None,
        'players_view': None
    }


def normalize_tracker(raw: Dict[str, Any]) -> Tracker:
    """
    Приводит загруженный JSON к актуальной схеме документа.

    Отсутствующие поля заполняются значениями по умолчанию, неизвестные
    ключи верхнего уровня отбрасываются.
    """
    tracker = empty_tracker()

    for item in raw.get('timers') or []:
        tracker['timers'].append(Timer(
            id=int(item['id']),
            name=str(item['name']),
            value=int(item.get('value', 0))
        ))

    for item in raw.get('players') or []:
        tracker['players'].append(Player(
            id=int(item['id']),
            name=str(item['name']),
            harm=int(item.get('harm', 0)),
            stress=int(item.get('stress', 0))
        ))

    counters = raw.get('counters') or {}
    tracker['counters']['timerSeq'] = max(
        int(counters.get('timerSeq', 0)),
        max((t['id'] for t in tracker['timers']), default=0)
    )
    tracker['counters']['playerSeq'] = max(
        int(counters.get('playerSeq', 0)),
        max((p['id'] for p in tracker['players']), default=0)
    )

    timers_view = raw.get('timers_view')
    if timers_view:
        tracker['timers_view'] = TimersView(
            list_message_id=int(timers_view['list_message_id']),
            keyboard_message_id=int(timers_view['keyboard_message_id']),
            keyboard_expanded=bool(timers_view.get('keyboard_expanded', False))
        )

    players_view = raw.get('players_view')
    if players_view:
        layout = players_view.get('layout')
        tracker['players_view'] = PlayersView(
            list_message_id=int(players_view['list_message_id']),
            keyboard_message_id=int(players_view['keyboard_message_id']),
            layout=layout if layout in PLAYERS_LAYOUTS else 'none'
        )

    _sort(tracker['timers'])
    _sort(tracker['players'])
    return tracker


def _sort(items: List[Any]) -> None:
    items.sort(key=lambda item: (item['name'], item['id']))


def _next_id(items: List[Any], counters: Dict[str, int], seq_key: str) -> int:
    """Следующий id: больше всех существующих и всех когда-либо выданных."""
    highest = max((item['id'] for item in items), default=0)
    next_id = max(highest, counters.get(seq_key, 0)) + 1
    counters[seq_key] = next_id
    return next_id


def _find(items: List[Any], item_id: int) -> Optional[Any]:
    for item in items:
        if item['id'] == item_id:
            return item
    return None


def _checked_add(value: int, delta: int, name: str, field: str) -> int:
    result = value + delta
    if result < INT_MIN or result > INT_MAX:
        raise CounterOverflowError(name, field)
    return result


# ----- Таймеры -----

def create_timer(tracker: Tracker, name: str, start_value: int) -> Timer:
    """Создает таймер. Имя должно быть уникальным среди таймеров."""
    if any(t['name'] == name for t in tracker['timers']):
        raise DuplicateNameError('Timer', name)
    if start_value < INT_MIN or start_value > INT_MAX:
        raise CounterOverflowError(name, 'value')

    timer = Timer(
        id=_next_id(tracker['timers'], tracker['counters'], 'timerSeq'),
        name=name,
        value=start_value
    )
    tracker['timers'].append(timer)
    _sort(tracker['timers'])
    return Timer(**timer)


def get_timer(tracker: Tracker, timer_id: int) -> Timer:
    timer = _find(tracker['timers'], timer_id)
    if timer is None:
        raise NotFoundError('Timer', timer_id)
    return Timer(**timer)


def adjust_timer(tracker: Tracker, timer_id: int, delta: int) -> Timer:
    """
    Изменяет значение таймера на delta.

    Таймер с value <= 0 не удаляется: решение о срабатывании принимает
    вызывающий код.
    """
    timer = _find(tracker['timers'], timer_id)
    if timer is None:
        raise NotFoundError('Timer', timer_id)
    timer['value'] = _checked_add(timer['value'], delta, timer['name'], 'value')
    return Timer(**timer)


def delete_timer(tracker: Tracker, timer_id: int) -> Timer:
    """Удаляет таймер и возвращает его."""
    timer = _find(tracker['timers'], timer_id)
    if timer is None:
        raise NotFoundError('Timer', timer_id)
    tracker['timers'].remove(timer)
    _sort(tracker['timers'])
    return timer


# ----- Игроки -----

def create_player(tracker: Tracker, name: str) -> Player:
    """Создает игрока с нулевыми harm и stress."""
    if any(p['name'] == name for p in tracker['players']):
        raise DuplicateNameError('Player', name)

    player = Player(
        id=_next_id(tracker['players'], tracker['counters'], 'playerSeq'),
        name=name,
        harm=0,
        stress=0
    )
    tracker['players'].append(player)
    _sort(tracker['players'])
    return Player(**player)


def get_player(tracker: Tracker, player_id: int) -> Player:
    player = _find(tracker['players'], player_id)
    if player is None:
        raise NotFoundError('Player', player_id)
    return Player(**player)


def _adjust_player(tracker: Tracker, player_id: int, field: str, delta: int) -> Player:
    player = _find(tracker['players'], player_id)
    if player is None:
        raise NotFoundError('Player', player_id)
    player[field] = _checked_add(player[field], delta, player['name'], field)
    return Player(**player)


def adjust_harm(tracker: Tracker, player_id: int, delta: int) -> Player:
    return _adjust_player(tracker, player_id, 'harm', delta)


def adjust_stress(tracker: Tracker, player_id: int, delta: int) -> Player:
    return _adjust_player(tracker, player_id, 'stress', delta)


def delete_player(tracker: Tracker, player_id: int) -> Player:
    """Удаляет игрока и возвращает его."""
    player = _find(tracker['players'], player_id)
    if player is None:
        raise NotFoundError('Player', player_id)
    tracker['players'].remove(player)
    _sort(tracker['players'])
    return player
