import asyncio

import pytest
from textual.widgets import Button

from app import (
    ConfirmScreen,
    LeaderboardScreen,
    NameScreen,
    OptionsScreen,
    SessionScreen,
    SummaryScreen,
    TypingTrainerApp,
    format_live_stats,
    parse_word_count,
    render_target,
)
from leaderboard import Leaderboard, ScoreRecord
from session import TypingSession
from text_source import TextOptions


def test_render_target_marks_progress():
    markup = render_target("cat dog", "cx")
    assert markup.startswith("[#ff6b35]c[/][bold red]a[/][reverse]t[/]")
    assert markup.endswith(" dog")


def test_render_target_shows_skipped_letters_as_wrong():
    markup = render_target("a_b", "a_", [False, True])
    assert "[bold red]_[/]" in markup


def test_format_live_stats():
    assert format_live_stats(None) == "WPM: -- | Accuracy: --% | Time: 0s"
    stats = {"wpm": 42.26, "accuracy": 97.04, "elapsed": 12}
    assert format_live_stats(stats) == "WPM: 42.3 | Accuracy: 97.0% | Time: 12s"


@pytest.mark.parametrize(
    "raw, expected",
    [("25", 25), (" 1 ", 1), ("1000", 1000), ("0", None), ("1001", None), ("ten", None), ("", None)],
)
def test_parse_word_count(raw, expected):
    assert parse_word_count(raw) == expected


def run(coro):
    return asyncio.run(coro)


def make_app(tmp_path, records=()):
    board = Leaderboard(tmp_path / "lb.txt", records)
    board.save()
    app = TypingTrainerApp(board)
    app.player_name = "ann"
    return app


def test_session_keys_drive_typing_and_record_score(tmp_path):
    app = make_app(tmp_path)
    session = TypingSession(TextOptions(word_count=2), target="ab cd")

    async def scenario():
        async with app.run_test() as pilot:
            await app.push_screen(SessionScreen(session))
            await pilot.pause()

            await pilot.press("a", "space")
            assert session.typed == "a_ "
            await pilot.press("backspace")
            assert session.typed == "a"
            assert isinstance(app.screen, SessionScreen)

            await pilot.press("b", "space", "c", "d")
            await pilot.pause()
            assert isinstance(app.screen, SummaryScreen)
            assert app.screen.rank == 1

    run(scenario())
    assert session.completed
    saved = (tmp_path / "lb.txt").read_text(encoding="utf-8")
    assert saved.startswith("ANN|")
    assert len(Leaderboard.load(tmp_path / "lb.txt")) == 1


def test_keys_after_completion_do_not_record_again(tmp_path):
    app = make_app(tmp_path)
    session = TypingSession(TextOptions(word_count=1), target="ab")
    session.handle_event("a")
    session.handle_event("b")

    async def scenario():
        async with app.run_test() as pilot:
            await app.push_screen(SessionScreen(session))
            await pilot.pause()
            await pilot.press("x")
            await pilot.pause()
            assert isinstance(app.screen, SessionScreen)

    run(scenario())
    assert len(app.leaderboard) == 0


def test_clear_after_confirmation(tmp_path):
    app = make_app(tmp_path, [ScoreRecord("bob", 50.0, 90.0, 20.0)])

    async def scenario():
        async with app.run_test() as pilot:
            await app.switch_screen(OptionsScreen())
            await app.push_screen(LeaderboardScreen())
            await pilot.pause()

            await pilot.press("c")
            await pilot.pause()
            assert isinstance(app.screen, ConfirmScreen)
            app.screen.query_one("#yes", Button).press()
            await pilot.pause()
            assert isinstance(app.screen, LeaderboardScreen)

    run(scenario())
    assert len(app.leaderboard) == 0
    assert (tmp_path / "lb.txt").read_text(encoding="utf-8") == ""


def test_declining_clear_keeps_scores(tmp_path):
    app = make_app(tmp_path, [ScoreRecord("bob", 50.0, 90.0, 20.0)])

    async def scenario():
        async with app.run_test() as pilot:
            await app.switch_screen(OptionsScreen())
            await app.push_screen(LeaderboardScreen())
            await pilot.pause()
            await pilot.press("c")
            await pilot.pause()
            app.screen.query_one("#no", Button).press()
            await pilot.pause()

    run(scenario())
    assert len(Leaderboard.load(tmp_path / "lb.txt")) == 1


def test_change_name_from_leaderboard(tmp_path):
    app = make_app(tmp_path)

    async def scenario():
        async with app.run_test() as pilot:
            await app.switch_screen(OptionsScreen())
            await app.push_screen(LeaderboardScreen())
            await pilot.pause()
            await pilot.press("n")
            await pilot.pause()
            assert isinstance(app.screen, NameScreen)

    run(scenario())
