"""
Тексты списков таймеров и игроков (HTML).
"""

from typing import List

from aiogram import html

from ..types import Timer, Player

EMPTY_TIMERS_TEXT = "No timers yet. Add one with /ta &lt;name&gt; &lt;start value&gt;"
EMPTY_PLAYERS_TEXT = "No players yet. Add one with /pa &lt;name&gt;"


def render_timers(timers: List[Timer]) -> str:
    """Текст списка таймеров в порядке сортировки документа."""
    lines = [html.bold("Active timers:")]
    if not timers:
        lines.append(EMPTY_TIMERS_TEXT)
    for timer in timers:
        lines.append(f"{html.bold(html.quote(timer['name']))}: {html.bold(timer['value'])} ticks left")
    return "\n".join(lines)


def render_players(players: List[Player]) -> str:
    """Текст списка игроков с harm и stress."""
    lines = [html.bold("Players:")]
    if not players:
        lines.append(EMPTY_PLAYERS_TEXT)
    for player in players:
        lines.append(
            f"{html.bold(html.quote(player['name']))}: "
            f"harm {html.bold(player['harm'])}, stress {html.bold(player['stress'])}"
        )
    return "\n".join(lines)
