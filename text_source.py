from __future__ import annotations

from dataclasses import dataclass
import random

import config


BASE_WORDS = (
    "the", "quick", "brown", "fox", "jumps", "over", "lazy", "dog",
    "hello", "world", "typing", "test", "program", "simple", "fast", "computer",
    "keyboard", "screen", "mouse", "software", "hardware", "internet", "website", "email",
    "password", "username", "login", "download", "upload", "file", "folder", "document",
    "window", "button", "click", "double", "right", "left", "center", "top",
    "bottom", "middle", "side", "front", "back", "forward", "backward", "up",
    "down", "north", "south", "east", "west", "morning", "afternoon", "evening",
    "night", "today", "tomorrow", "yesterday", "week", "month", "year", "time",
    "clock", "watch", "minute", "second", "hour", "schedule", "appointment", "meeting",
    "conference", "presentation", "project", "task", "work", "job", "career", "business",
    "company", "office", "desk", "chair", "table", "phone", "mobile", "tablet",
    "laptop", "desktop", "server", "network", "wireless", "bluetooth", "cable", "connection",
    "signal", "data", "information", "knowledge", "learning", "education", "school", "university",
    "student", "teacher", "book", "page", "chapter", "paragraph", "sentence", "word",
    "letter", "number", "count", "calculate", "mathematics", "science", "technology", "innovation",
    "development", "progress", "improvement", "solution", "problem", "challenge", "opportunity",
)

PUNCTUATION_WORDS = (
    "hello,", "world!", "it's", "don't", "can't", "won't", "we're", "they're",
    "you'll", "I'll", "she'll", "he'll", "we'll", "they'll", "isn't", "aren't",
    "wasn't", "weren't", "hasn't", "haven't", "doesn't", "didn't", "shouldn't", "wouldn't",
    "couldn't", "mustn't", "needn't", "shan't", "hello.", "goodbye!", "really?", "amazing!",
    "yes,", "no,", "wait...", "stop!", "go!", "help!", "wow!", "oh!",
)

NUMBER_WORDS = (
    "123", "456", "789", "101", "202", "303", "404", "505",
    "2024", "2025", "1995", "2000", "42", "99", "100", "1000",
    "test1", "test2", "file1", "file2", "user1", "user2", "admin123", "pass123",
    "v1.0", "v2.0", "v3.1", "v4.2", "room101", "room202", "apt3b", "unit4a",
    "level1", "level2", "step1", "step2", "page1", "page2", "item1", "item2",
)

PURE_NUMBERS = (
    "0", "1", "2", "3", "4", "5", "6", "7", "8", "9",
    "10", "11", "12", "13", "14", "15", "16", "17", "18", "19",
    "20", "25", "30", "42", "50", "75", "99", "100",
    "123", "456", "789", "1000", "2024", "2025", "3000", "5000",
)


@dataclass(frozen=True)
class TextOptions:
    word_count: int = 25
    include_punctuation: bool = False
    include_numbers: bool = False

    @property
    def numbers_only(self) -> bool:
        return self.include_numbers and not self.include_punctuation

    @property
    def mode_label(self) -> str:
        return ("P" if self.include_punctuation else "") + ("N" if self.include_numbers else "")


def build_pool(include_punctuation: bool, include_numbers: bool) -> tuple[str, ...]:
    if include_numbers and not include_punctuation:
        return PURE_NUMBERS

    pool = BASE_WORDS
    if include_punctuation:
        pool += PUNCTUATION_WORDS
    if include_numbers:
        pool += NUMBER_WORDS
    return pool


def generate_text(
    word_count: int,
    include_punctuation: bool = False,
    include_numbers: bool = False,
    rng: random.Random | None = None,
) -> str:
    """Draw `word_count` tokens (with replacement) and join them with single spaces.

    Numbers without punctuation switches to the pure numeric pool; every other
    combination extends the base word list with the selected extras.
    """
    if not config.MIN_WORD_COUNT <= word_count <= config.MAX_WORD_COUNT:
        raise ValueError(
            f"word count must be between {config.MIN_WORD_COUNT} and "
            f"{config.MAX_WORD_COUNT}, got {word_count}"
        )

    rng = rng or random
    pool = build_pool(include_punctuation, include_numbers)
    return " ".join(rng.choice(pool) for _ in range(word_count))


def generate_for(options: TextOptions, rng: random.Random | None = None) -> str:
    return generate_text(
        options.word_count,
        options.include_punctuation,
        options.include_numbers,
        rng=rng,
    )
