import pytest

from metrics import accuracy_multiplier, compute_correct_chars, compute_metrics, raw_wpm


def test_correct_chars_is_positional_and_case_sensitive():
    assert compute_correct_chars("Hello", "hello") == 4
    assert compute_correct_chars("cat", "cat dog") == 3


def test_skipped_positions_never_count():
    assert compute_correct_chars("a_b", "a_b", [False, True, False]) == 2


def test_no_rate_before_a_full_second():
    assert raw_wpm(10, 0) is None
    metrics = compute_metrics("cat", "ca", 0)
    assert metrics["wpm"] is None
    assert metrics["accuracy"] == 100.0


def test_raw_wpm_formula():
    # 50 correct chars = 10 words in 30 seconds
    assert raw_wpm(50, 30) == pytest.approx(20.0)


def test_accuracy_at_or_above_threshold_keeps_rate():
    target = "abcdefghij"
    metrics = compute_metrics(target, "abcdeXXXXX", 60)
    assert metrics["accuracy"] == 50.0
    assert metrics["wpm"] == metrics["raw_wpm"]


def test_accuracy_below_threshold_scales_rate():
    target = "abcdefghij"
    metrics = compute_metrics(target, "abXXXXXXXX", 60)
    assert metrics["accuracy"] == pytest.approx(20.0)
    assert metrics["wpm"] == pytest.approx(metrics["raw_wpm"] * 20.0 / 50.0)
    assert accuracy_multiplier(25.0) == 0.5
    assert accuracy_multiplier(80.0) == 1.0
