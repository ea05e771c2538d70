from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
import logging
from pathlib import Path
from typing import Callable, Iterable

import config

logger = logging.getLogger(__name__)

FIELD_SEP = "|"


def now_stamp() -> str:
    return dt.datetime.now().strftime(config.DATE_FORMAT)


def normalize_name(name: str) -> str:
    return name.strip().replace(FIELD_SEP, "").upper()


@dataclass(frozen=True)
class ScoreRecord:
    player_name: str
    wpm: float
    accuracy_pct: float
    elapsed_seconds: float
    completion_date: str = config.UNKNOWN_DATE
    word_count: int = config.LEGACY_WORD_COUNT
    has_punctuation: bool = False
    has_numbers: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "player_name", normalize_name(self.player_name))

    @property
    def mode(self) -> str:
        return ("P" if self.has_punctuation else "") + ("N" if self.has_numbers else "")

    def to_line(self) -> str:
        return FIELD_SEP.join(
            (
                self.player_name,
                repr(float(self.wpm)),
                repr(float(self.accuracy_pct)),
                repr(float(self.elapsed_seconds)),
                self.completion_date,
                str(self.word_count),
                "1" if self.has_punctuation else "0",
                "1" if self.has_numbers else "0",
            )
        )


def rank_key(record: ScoreRecord) -> tuple[float, float]:
    return (-record.wpm, -record.accuracy_pct)


def _flag(value: str) -> bool:
    return int(value) == 1


def _date(value: str) -> str:
    return value or config.UNKNOWN_DATE


# Fields after NAME|WPM|ACCURACY|TIME, keyed by how many fields a line has.
# The tail is parsed as one unit; any failure falls back to the legacy defaults
# for the whole tail.
_TAIL_FIELDS: dict[int, tuple[tuple[str, Callable[[str], object]], ...]] = {
    4: (),
    5: (("completion_date", _date),),
    6: (("completion_date", _date), ("word_count", int)),
    8: (
        ("completion_date", _date),
        ("word_count", int),
        ("has_punctuation", _flag),
        ("has_numbers", _flag),
    ),
}


def _schema_for(field_count: int) -> int:
    if field_count >= 8:
        return 8
    if field_count == 7:
        return 6
    return max(field_count, 4)


def _float_or_default(value: str, field: str, line_no: int) -> float:
    try:
        return float(value)
    except ValueError:
        logger.warning("Line %d: bad %s %r, using 0", line_no, field, value)
        return 0.0


def parse_line(line: str, line_no: int = 0) -> ScoreRecord | None:
    """Parse one stored line in any of the known shapes.

    Returns None for lines that cannot be a score at all (blank, no name,
    fewer than three fields).
    """
    parts = line.rstrip("\r\n").split(FIELD_SEP)
    if len(parts) < 3 or not parts[0].strip():
        if line.strip():
            logger.warning("Line %d: not a score record, skipped", line_no)
        return None

    schema = _schema_for(len(parts))
    head = parts[1:4] + [""] * (4 - len(parts))  # a bare NAME|WPM|ACCURACY has no time
    wpm = _float_or_default(head[0], "wpm", line_no)
    accuracy = _float_or_default(head[1], "accuracy", line_no)
    elapsed = _float_or_default(head[2], "time", line_no) if head[2] else 0.0

    tail: dict[str, object] = {}
    try:
        for (field, convert), raw in zip(_TAIL_FIELDS[schema], parts[4:]):
            tail[field] = convert(raw)
    except ValueError:
        logger.warning("Line %d: bad trailing fields, using defaults", line_no)
        tail = {}

    return ScoreRecord(
        player_name=parts[0],
        wpm=wpm,
        accuracy_pct=accuracy,
        elapsed_seconds=elapsed,
        **tail,
    )


class Leaderboard:
    """Top scores, best first, persisted to a single line-oriented file."""

    def __init__(
        self,
        path: Path = config.LEADERBOARD_FILE,
        records: Iterable[ScoreRecord] = (),
        capacity: int = config.LEADERBOARD_CAPACITY,
    ) -> None:
        self.path = Path(path)
        self.capacity = capacity
        self.records: list[ScoreRecord] = list(records)
        self._rank()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def __getitem__(self, index: int) -> ScoreRecord:
        return self.records[index]

    def _rank(self) -> None:
        self.records.sort(key=rank_key)
        del self.records[self.capacity:]

    def insert(self, record: ScoreRecord) -> int | None:
        """Add a score and keep the best `capacity`.

        Returns the 1-based rank of the new score, or None if it didn't make the cut.
        """
        self.records.append(record)
        self._rank()
        for i, kept in enumerate(self.records):
            if kept is record:
                return i + 1
        return None

    def record_score(self, record: ScoreRecord) -> int | None:
        rank = self.insert(record)
        self.save()
        logger.info("Recorded %s at %.1f wpm (rank %s)", record.player_name, record.wpm, rank)
        return rank

    def clear(self) -> None:
        self.records.clear()
        self.save()
        logger.info("Leaderboard cleared")

    def unique_names(self) -> list[str]:
        names: list[str] = []
        for record in self.records:
            if record.player_name not in names:
                names.append(record.player_name)
        return names

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            "".join(record.to_line() + "\n" for record in self.records),
            encoding="utf-8",
        )

    @classmethod
    def load(cls, path: Path = config.LEADERBOARD_FILE) -> "Leaderboard":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            logger.debug("No leaderboard at %s, starting empty", path)
            return cls(path)

        records = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            record = parse_line(line, line_no)
            if record is not None:
                records.append(record)
        logger.debug("Loaded %d scores from %s", len(records), path)
        return cls(path, records)
