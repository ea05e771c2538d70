from __future__ import annotations

import enum
import logging
import math
import random
import time
from typing import Callable

from leaderboard import ScoreRecord, now_stamp
from metrics import compute_metrics
from text_source import TextOptions, generate_for

logger = logging.getLogger(__name__)

SKIP_MARK = "_"
SPACE_KEYS = (" ", "space")
BACKSPACE_KEYS = ("backspace", "ctrl+h")
RESTART_KEYS = ("enter", "\r", "\n")


class SessionState(enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def _is_printable(key: str) -> bool:
    return len(key) == 1 and 33 <= ord(key) <= 126


class TypingSession:
    """One typing attempt against a generated target.

    Key names are the ones textual reports (`"backspace"`, `"enter"`,
    `"space"`); any other single printable ASCII character is typed as-is.
    Positions filled by a word skip are tracked in `skipped` and never count
    as correct, whatever the target holds there.
    """

    def __init__(
        self,
        options: TextOptions,
        target: str | None = None,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        self.options = options
        self._clock = clock
        self._rng = rng
        self.target = target if target is not None else generate_for(options, rng)
        self._reset()

    def _reset(self) -> None:
        self.typed = ""
        self.skipped: list[bool] = []
        self.started = False
        self.start_time: float | None = None
        self.jump_anchor: int | None = None
        self.final_metrics: dict | None = None

    @property
    def state(self) -> SessionState:
        if self.final_metrics is not None:
            return SessionState.COMPLETED
        if self.started:
            return SessionState.IN_PROGRESS
        return SessionState.NOT_STARTED

    @property
    def completed(self) -> bool:
        return self.state is SessionState.COMPLETED

    @property
    def cursor(self) -> int:
        return len(self.typed)

    def handle_event(self, key: str) -> tuple[SessionState, int]:
        if key in RESTART_KEYS:
            self.restart()
        elif self.completed:
            pass
        elif key in BACKSPACE_KEYS:
            self._backspace()
        elif key in SPACE_KEYS:
            self._space()
        elif _is_printable(key):
            self._type_char(key)
        return self.state, self.cursor

    def restart(self) -> None:
        self._reset()
        self.target = generate_for(self.options, self._rng)
        logger.debug("Session restarted with %d chars", len(self.target))

    def _start_timer(self) -> None:
        if not self.started:
            self.started = True
            self.start_time = self._clock()

    def _append(self, text: str, skipped: bool = False) -> None:
        self.typed += text
        self.skipped.extend([skipped] * len(text))

    def _type_char(self, ch: str) -> None:
        if len(self.typed) >= len(self.target):
            return
        self._start_timer()
        self._append(ch)
        self.jump_anchor = None
        self._check_completion()

    def _space(self) -> None:
        if len(self.typed) >= len(self.target):
            return
        self._start_timer()

        if self.target[len(self.typed)] == " ":
            self._append(" ")
            self.jump_anchor = None
        else:
            self.jump_anchor = len(self.typed)
            next_word = self.next_word_start(len(self.typed))
            while len(self.typed) < next_word:
                if self.target[len(self.typed)] == " ":
                    self._append(" ")
                else:
                    self._append(SKIP_MARK, skipped=True)
            logger.debug("Skipped from %d to %d", self.jump_anchor, next_word)
        self._check_completion()

    def _backspace(self) -> None:
        if self.jump_anchor is not None and len(self.typed) > self.jump_anchor:
            del self.skipped[self.jump_anchor:]
            self.typed = self.typed[: self.jump_anchor]
        elif self.typed:
            self.typed = self.typed[:-1]
            self.skipped.pop()
        self.jump_anchor = None

    def next_word_start(self, pos: int) -> int:
        space = self.target.find(" ", pos)
        if space == -1:
            return len(self.target)
        while space < len(self.target) and self.target[space] == " ":
            space += 1
        return space

    def elapsed(self) -> int:
        if not self.started:
            return 0
        return max(0, math.floor(self._clock() - self.start_time))

    def live_metrics(self) -> dict | None:
        if self.final_metrics is not None:
            return self.final_metrics
        if not self.started or not self.typed:
            return None
        return compute_metrics(self.target, self.typed, self.elapsed(), self.skipped)

    def _check_completion(self) -> None:
        if len(self.typed) != len(self.target):
            return
        # a sub-second run still needs a rate for the leaderboard
        elapsed = max(1, self.elapsed())
        self.final_metrics = compute_metrics(self.target, self.typed, elapsed, self.skipped)
        logger.info(
            "Session completed: %.1f wpm, %.1f%% accuracy in %ds",
            self.final_metrics["wpm"],
            self.final_metrics["accuracy"],
            elapsed,
        )

    def to_record(self, player_name: str, date: str | None = None) -> ScoreRecord:
        if self.final_metrics is None:
            raise ValueError("session is not completed")
        return ScoreRecord(
            player_name=player_name,
            wpm=self.final_metrics["wpm"],
            accuracy_pct=self.final_metrics["accuracy"],
            elapsed_seconds=float(self.final_metrics["elapsed"]),
            completion_date=date or now_stamp(),
            word_count=self.options.word_count,
            has_punctuation=self.options.include_punctuation,
            has_numbers=self.options.include_numbers,
        )
