"""
Модели данных трекера: таймеры, игроки и состояние отображения списков.
"""

from typing import TypedDict, List, Dict, Literal, Optional

PlayersLayout = Literal['none', 'manage_players', 'harm', 'stress']

PLAYERS_LAYOUTS = ('none', 'manage_players', 'harm', 'stress')


class Timer(TypedDict):
    """Таймер обратного отсчета."""
    id: int
    name: str
    value: int


class Player(TypedDict):
    """Игрок с двумя шкалами: harm и stress."""
    id: int
    name: str
    harm: int
    stress: int


class TimersView(TypedDict):
    """Какие сообщения чата показывают список таймеров и его клавиатуру."""
    list_message_id: int
    keyboard_message_id: int
    keyboard_expanded: bool  # False - одна кнопка "Manage", True - ряд на каждый таймер


class PlayersView(TypedDict):
    """Какие сообщения чата показывают список игроков и его клавиатуру."""
    list_message_id: int
    keyboard_message_id: int
    layout: PlayersLayout


class Tracker(TypedDict):
    """Документ чата: все таймеры, игроки и состояние их отображения."""
    timers: List[Timer]
    players: List[Player]
    counters: Dict[str, int]  # {"timerSeq": 0, "playerSeq": 0}
    timers_view: Optional[TimersView]
    players_view: Optional[PlayersView]
