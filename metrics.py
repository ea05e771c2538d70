from __future__ import annotations

from typing import Sequence

import config


def compute_correct_chars(
    target_text: str, typed_text: str, skipped: Sequence[bool] = ()
) -> int:
    correct = 0
    for i, ch in enumerate(typed_text):
        if i >= len(target_text):
            break
        if i < len(skipped) and skipped[i]:
            continue
        if ch == target_text[i]:
            correct += 1
    return correct


def accuracy_multiplier(accuracy: float) -> float:
    """Linear WPM penalty below the accuracy threshold.

    Keeps key-mashing from inflating the rate: at 25% accuracy only half the
    raw WPM is kept.
    """
    if accuracy >= config.ACCURACY_PENALTY_THRESHOLD:
        return 1.0
    return accuracy / config.ACCURACY_PENALTY_THRESHOLD


def raw_wpm(correct_chars: int, elapsed_s: int) -> float | None:
    if elapsed_s <= 0:
        return None
    return (correct_chars / config.CHARS_PER_WORD) / (elapsed_s / 60.0)


def compute_metrics(
    target_text: str,
    typed_text: str,
    elapsed_s: int,
    skipped: Sequence[bool] = (),
) -> dict:
    total_typed = len(typed_text)
    correct_chars = compute_correct_chars(target_text, typed_text, skipped)
    accuracy = (correct_chars * 100.0 / total_typed) if total_typed > 0 else 0.0
    rate = raw_wpm(correct_chars, elapsed_s)
    wpm = rate * accuracy_multiplier(accuracy) if rate is not None else None

    return {
        "total_typed": total_typed,
        "correct_chars": correct_chars,
        "accuracy": accuracy,
        "elapsed": elapsed_s,
        "raw_wpm": rate,
        "wpm": wpm,
    }
