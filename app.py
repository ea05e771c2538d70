from __future__ import annotations

import logging
import sys

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Checkbox, Footer, Header, Input, Static
from rich.markup import escape
from rich.console import Group
from rich.table import Table

import config
from leaderboard import Leaderboard, ScoreRecord, normalize_name
from session import SKIP_MARK, TypingSession
from text_source import TextOptions

logger = logging.getLogger(__name__)

SESSION_KEYS = ("backspace", "enter", "space")


def setup_logging(level: str = config.LOG_LEVEL) -> None:
    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.FileHandler(config.LOG_FILE, encoding="utf-8")],
    )

    def excepthook(exctype, value, tb):
        logging.critical("Unhandled exception", exc_info=(exctype, value, tb))
        sys.__excepthook__(exctype, value, tb)

    sys.excepthook = excepthook


def render_target(target: str, typed: str, skipped: list[bool] | None = None) -> str:
    skipped = skipped or []
    rendered = []
    for i, ch in enumerate(target):
        if i < len(typed):
            ok = typed[i] == ch and not (i < len(skipped) and skipped[i])
            shown = ch if ch != " " or ok else SKIP_MARK
            if ok:
                rendered.append(f"[#ff6b35]{escape(shown)}[/]")
            else:
                rendered.append(f"[bold red]{escape(shown)}[/]")
        elif i == len(typed):
            rendered.append(f"[reverse]{escape(ch)}[/]")
        else:
            rendered.append(escape(ch))
    return "".join(rendered)


def format_live_stats(metrics: dict | None) -> str:
    if not metrics or metrics["wpm"] is None:
        return "WPM: -- | Accuracy: --% | Time: 0s"
    return (
        f"WPM: {metrics['wpm']:.1f} | Accuracy: {metrics['accuracy']:.1f}% "
        f"| Time: {metrics['elapsed']}s"
    )


def parse_word_count(raw: str) -> int | None:
    raw = raw.strip()
    if not raw.isdigit():
        return None
    count = int(raw)
    if config.MIN_WORD_COUNT <= count <= config.MAX_WORD_COUNT:
        return count
    return None


class NameScreen(Screen):
    BINDINGS = [("escape", "quit", "Quit")]

    def compose(self) -> ComposeResult:
        names = self.app.leaderboard.unique_names()[: config.MAX_NAMES_SHOWN]
        yield Header()
        with Container(id="names"):
            yield Static("Select Your Name", id="title")
            with Vertical(id="name-buttons"):
                for i, name in enumerate(names):
                    yield Button(escape(name), id=f"name-{i}", name=name)
            yield Input(placeholder=f"New name (max {config.MAX_NAME_LENGTH})", id="new-name")
            with Horizontal(id="home-buttons"):
                yield Button("Continue", id="continue", variant="success")
                yield Button("Quit", id="quit", variant="error")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "quit":
            self.app.exit()
        elif event.button.id == "continue":
            self._submit(self.query_one("#new-name", Input).value)
        elif event.button.name:
            self._choose(event.button.name)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit(event.value)

    def _submit(self, raw: str) -> None:
        name = normalize_name(raw)
        if not name:
            self.notify("Enter a name first.", severity="warning")
            return
        if len(name) > config.MAX_NAME_LENGTH:
            self.notify(f"Names are at most {config.MAX_NAME_LENGTH} characters.", severity="warning")
            return
        self._choose(name)

    def _choose(self, name: str) -> None:
        self.app.player_name = name
        logger.info("Player is %s", name)
        self.app.switch_screen(OptionsScreen())

    def action_quit(self) -> None:
        self.app.exit()


class OptionsScreen(Screen):
    BINDINGS = [("escape", "quit", "Quit"), ("l", "leaderboard", "Leaderboard")]

    def compose(self) -> ComposeResult:
        options = self.app.options
        yield Header()
        with Container(id="options"):
            yield Static(f"Player: {escape(self.app.player_name)}", id="title")
            yield Static(f"Word count: {options.word_count}", id="word-count")
            with Horizontal(id="preset-buttons"):
                for count in config.WORD_COUNT_PRESETS:
                    yield Button(f"{count} words", id=f"preset-{count}")
            yield Input(
                placeholder=f"Custom word count ({config.MIN_WORD_COUNT}-{config.MAX_WORD_COUNT})",
                id="custom-count",
            )
            yield Checkbox("Punctuation", options.include_punctuation, id="punctuation")
            yield Checkbox("Numbers", options.include_numbers, id="numbers")
            with Horizontal(id="home-buttons"):
                yield Button("Start", id="start", variant="success")
                yield Button("Leaderboard", id="leaderboard")
                yield Button("Change Name", id="change-name")
                yield Button("Quit", id="quit", variant="error")
        yield Footer()

    def _set_word_count(self, count: int) -> None:
        options = self.app.options
        self.app.options = TextOptions(count, options.include_punctuation, options.include_numbers)
        self.query_one("#word-count", Static).update(f"Word count: {count}")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self._apply_custom_count():
            self._start()

    def _apply_custom_count(self) -> bool:
        raw = self.query_one("#custom-count", Input).value
        if not raw.strip():
            return True
        count = parse_word_count(raw)
        if count is None:
            self.notify(
                f"Word count must be {config.MIN_WORD_COUNT}-{config.MAX_WORD_COUNT}.",
                severity="warning",
            )
            self.query_one("#custom-count", Input).value = ""
            return False
        self._set_word_count(count)
        self.query_one("#custom-count", Input).value = ""
        return True

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        options = self.app.options
        if event.checkbox.id == "punctuation":
            self.app.options = TextOptions(options.word_count, event.value, options.include_numbers)
        elif event.checkbox.id == "numbers":
            self.app.options = TextOptions(options.word_count, options.include_punctuation, event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("preset-"):
            self._set_word_count(int(button_id.removeprefix("preset-")))
        elif button_id == "start":
            if self._apply_custom_count():
                self._start()
        elif button_id == "leaderboard":
            self.action_leaderboard()
        elif button_id == "change-name":
            self.app.switch_screen(NameScreen())
        elif button_id == "quit":
            self.app.exit()

    def _start(self) -> None:
        logger.info("Starting session with %s", self.app.options)
        self.app.push_screen(SessionScreen(TypingSession(self.app.options)))

    def action_leaderboard(self) -> None:
        self.app.push_screen(LeaderboardScreen())

    def action_quit(self) -> None:
        self.app.exit()


class SessionScreen(Screen):
    BINDINGS = [("escape", "back", "Back")]

    def __init__(self, session: TypingSession) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="session"):
            yield Static("Type this:", id="lesson-title")
            yield Static("", id="lesson-text")
            yield Static("", id="progress")
            yield Static("", id="metrics")
            yield Static("ENTER: restart | ESC: back", id="help")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh()
        self.set_interval(1.0, self._refresh_metrics)

    def on_key(self, event: events.Key) -> None:
        if event.key in SESSION_KEYS:
            key = event.key
        elif event.character and event.is_printable:
            key = event.character
        else:
            return
        event.stop()
        was_completed = self.session.completed
        self.session.handle_event(key)
        self._refresh()
        if self.session.completed and not was_completed:
            self._finish_session()

    def _refresh(self) -> None:
        session = self.session
        self.query_one("#lesson-text", Static).update(
            render_target(session.target, session.typed, session.skipped)
        )
        self.query_one("#progress", Static).update(
            f"Progress: {len(session.typed)}/{len(session.target)}"
        )
        self._refresh_metrics()

    def _refresh_metrics(self) -> None:
        self.query_one("#metrics", Static).update(format_live_stats(self.session.live_metrics()))

    def _finish_session(self) -> None:
        record = self.session.to_record(self.app.player_name)
        rank = self.app.leaderboard.record_score(record)
        self.app.switch_screen(SummaryScreen(record, rank))

    def action_back(self) -> None:
        self.app.pop_screen()


class SummaryScreen(Screen):
    BINDINGS = [("enter", "leaderboard", "Leaderboard"), ("escape", "home", "Home")]

    def __init__(self, record: ScoreRecord, rank: int | None) -> None:
        super().__init__()
        self.record = record
        self.rank = rank

    def compose(self) -> ComposeResult:
        placed = f"Rank #{self.rank}" if self.rank else "Not in the top scores"
        yield Header()
        with Vertical(id="summary"):
            yield Static("COMPLETE!", id="summary-title")
            yield Static(f"WPM: {self.record.wpm:.1f}", id="summary-wpm")
            yield Static(f"Accuracy: {self.record.accuracy_pct:.1f}%", id="summary-accuracy")
            yield Static(f"Time: {self.record.elapsed_seconds:.0f}s", id="summary-duration")
            yield Static(placed, id="summary-rank")
            with Horizontal(id="session-buttons"):
                yield Button("Leaderboard", id="leaderboard", variant="success")
                yield Button("Home", id="home")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "leaderboard":
            self.action_leaderboard()
        elif event.button.id == "home":
            self.action_home()

    def action_leaderboard(self) -> None:
        self.app.switch_screen(LeaderboardScreen())

    def action_home(self) -> None:
        self.app.pop_screen()


class ConfirmScreen(ModalScreen[bool]):
    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm"):
            yield Static(self.question)
            with Horizontal():
                yield Button("Yes", id="yes", variant="error")
                yield Button("No", id="no", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")


class LeaderboardScreen(Screen):
    BINDINGS = [
        ("escape", "back", "Back"),
        ("c", "clear", "Clear"),
        ("n", "change_name", "Change name"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="stats"):
            yield Static("Leaderboard", id="stats-title")
            yield Static("", id="stats-body")
            with Horizontal(id="session-buttons"):
                yield Button("Back", id="back")
                yield Button("Clear", id="clear", variant="error")
        yield Footer()

    def on_mount(self) -> None:
        self._render_table()

    def _render_table(self) -> None:
        leaderboard = self.app.leaderboard
        if not len(leaderboard):
            self.query_one("#stats-body", Static).update("No scores yet!")
            return

        table = Table(show_header=True, box=None, show_edge=False, pad_edge=False)
        table.add_column("#", justify="right", width=3, no_wrap=True)
        table.add_column("Name", width=14, no_wrap=True)
        table.add_column("WPM", justify="right", width=6, no_wrap=True)
        table.add_column("Acc", justify="right", width=7, no_wrap=True)
        table.add_column("Time", justify="right", width=6, no_wrap=True)
        table.add_column("Words", justify="right", width=6, no_wrap=True)
        table.add_column("Mode", width=4, no_wrap=True)
        table.add_column("Date", width=17, no_wrap=True)

        for rank, record in enumerate(leaderboard, start=1):
            name = record.player_name
            if len(name) > 14:
                name = name[:11] + "..."
            table.add_row(
                str(rank),
                escape(name),
                f"{record.wpm:.1f}",
                f"{record.accuracy_pct:.1f}%",
                f"{record.elapsed_seconds:.0f}s",
                str(record.word_count),
                record.mode,
                escape(record.completion_date),
            )

        summary = f"Top {len(leaderboard)} of {leaderboard.capacity}\n"
        self.query_one("#stats-body", Static).update(Group(summary, table))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back":
            self.action_back()
        elif event.button.id == "clear":
            self.action_clear()

    def action_clear(self) -> None:
        def _confirmed(yes: bool) -> None:
            if yes:
                self.app.leaderboard.clear()
                self._render_table()

        self.app.push_screen(ConfirmScreen("Clear all leaderboard data?"), _confirmed)

    def action_change_name(self) -> None:
        self.app.pop_screen()
        self.app.switch_screen(NameScreen())

    def action_back(self) -> None:
        self.app.pop_screen()


class TypingTrainerApp(App):
    CSS = """
    #names, #options, #session, #summary, #stats {
        padding: 1 2;
    }

    #title {
        content-align: center middle;
        text-style: bold;
        margin-bottom: 1;
    }

    #name-buttons {
        height: auto;
    }

    #home-buttons, #session-buttons, #preset-buttons {
        height: auto;
        margin-top: 1;
    }

    #lesson-text {
        height: 12;
        border: solid $primary;
        padding: 1;
        overflow: auto;
    }

    #progress, #metrics {
        height: auto;
        margin: 1 0 0 0;
    }

    #help {
        color: $text-muted;
        margin-top: 1;
    }

    #summary-title, #stats-title {
        text-style: bold;
        margin-bottom: 1;
    }

    ConfirmScreen {
        align: center middle;
    }

    #confirm {
        width: 40;
        height: auto;
        border: thick $error;
        padding: 1 2;
        background: $surface;
    }
    """

    TITLE = "Terminal Typer"

    def __init__(self, leaderboard: Leaderboard | None = None) -> None:
        super().__init__()
        self.leaderboard = leaderboard if leaderboard is not None else Leaderboard.load()
        self.player_name = ""
        self.options = TextOptions()

    def on_mount(self) -> None:
        self.push_screen(NameScreen())


def main() -> None:
    setup_logging()
    logger.info("Starting %s, data in %s", config.APP_NAME, config.DATA_DIR)
    TypingTrainerApp().run()


if __name__ == "__main__":
    main()
