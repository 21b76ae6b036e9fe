"""
Тесты клавиатур и текстов списков.
"""

from tabletop_bot.services import tracker as model
from tabletop_bot.services.navigation import nav, timers_caption, players_caption
from tabletop_bot.services.render import render_timers, render_players

from conftest import callback_actions


def make_tracker():
    tracker = model.empty_tracker()
    model.create_timer(tracker, "Fuse", 3)
    model.create_timer(tracker, "Alarm", 1)
    model.create_player(tracker, "Bob")
    model.create_player(tracker, "Alice")
    return tracker


class TestTimersKeyboard:
    """Клавиатура таймеров."""

    def test_collapsed(self):
        markup = nav.timers_keyboard(make_tracker()['timers'], False)
        assert callback_actions(markup) == [["0|ShowTimersKb"]]

    def test_expanded_rows_follow_sort_order(self):
        markup = nav.timers_keyboard(make_tracker()['timers'], True)
        assert callback_actions(markup) == [
            ["2|NoAction", "2|AddTimer", "2|SubTimer", "2|DeleteTimer"],
            ["1|NoAction", "1|AddTimer", "1|SubTimer", "1|DeleteTimer"],
            ["0|HideTimersKb"],
        ]
        assert markup.inline_keyboard[0][0].text == "Alarm"

    def test_expanded_without_timers(self):
        markup = nav.timers_keyboard([], True)
        assert callback_actions(markup) == [["0|HideTimersKb"]]

    def test_captions(self):
        assert timers_caption(False) != timers_caption(True)


class TestPlayersKeyboard:
    """Четыре вида клавиатуры игроков."""

    def test_none(self):
        markup = nav.players_keyboard(make_tracker()['players'], 'none')
        assert callback_actions(markup) == [["0|ShowHarmKb", "0|ShowStressKb", "0|ShowPlayersKb"]]

    def test_harm(self):
        markup = nav.players_keyboard(make_tracker()['players'], 'harm')
        assert callback_actions(markup) == [
            ["2|NoAction", "2|AddHarm", "2|SubHarm"],
            ["1|NoAction", "1|AddHarm", "1|SubHarm"],
            ["0|HidePlayersKb"],
        ]

    def test_stress(self):
        markup = nav.players_keyboard(make_tracker()['players'], 'stress')
        assert callback_actions(markup)[0] == ["2|NoAction", "2|AddStress", "2|SubStress"]
        assert callback_actions(markup)[-1] == ["0|HidePlayersKb"]

    def test_manage_players(self):
        markup = nav.players_keyboard(make_tracker()['players'], 'manage_players')
        assert callback_actions(markup) == [
            ["2|NoAction", "2|DeletePlayer"],
            ["1|NoAction", "1|DeletePlayer"],
            ["0|HidePlayersKb"],
        ]

    def test_captions_are_distinct(self):
        captions = {players_caption(layout) for layout in ('none', 'manage_players', 'harm', 'stress')}
        assert len(captions) == 4


class TestRender:
    """Тексты списков."""

    def test_timers(self):
        text = render_timers(make_tracker()['timers'])
        assert text.splitlines() == [
            "<b>Active timers:</b>",
            "<b>Alarm</b>: <b>1</b> ticks left",
            "<b>Fuse</b>: <b>3</b> ticks left",
        ]

    def test_players(self):
        tracker = make_tracker()
        model.adjust_harm(tracker, 1, 2)
        text = render_players(tracker['players'])
        assert text.splitlines()[1:] == [
            "<b>Alice</b>: harm <b>0</b>, stress <b>0</b>",
            "<b>Bob</b>: harm <b>2</b>, stress <b>0</b>",
        ]

    def test_names_are_escaped(self):
        tracker = model.empty_tracker()
        model.create_timer(tracker, "<Boom & Co>", 2)
        assert "&lt;Boom &amp; Co&gt;" in render_timers(tracker['timers'])

    def test_empty_lists(self):
        assert "/ta" in render_timers([])
        assert "/pa" in render_players([])
