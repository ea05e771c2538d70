import random
import string

import pytest

from text_source import (
    BASE_WORDS,
    NUMBER_WORDS,
    PUNCTUATION_WORDS,
    PURE_NUMBERS,
    TextOptions,
    build_pool,
    generate_for,
    generate_text,
)


@pytest.mark.parametrize("count", [1, 2, 15, 50, 1000])
@pytest.mark.parametrize("punctuation", [False, True])
@pytest.mark.parametrize("numbers", [False, True])
def test_generate_text_token_count(count, punctuation, numbers):
    text = generate_text(count, punctuation, numbers, rng=random.Random(count))
    assert text == text.strip()
    assert "  " not in text
    assert len(text.split(" ")) == count


def test_numbers_only_mode_has_only_digits():
    text = generate_text(500, include_punctuation=False, include_numbers=True, rng=random.Random(7))
    for token in text.split(" "):
        assert token in PURE_NUMBERS
        assert all(ch in string.digits for ch in token)


def test_plain_mode_uses_base_words():
    text = generate_text(300, rng=random.Random(3))
    assert set(text.split(" ")) <= set(BASE_WORDS)


def test_combined_pool_contents():
    assert build_pool(True, False) == BASE_WORDS + PUNCTUATION_WORDS
    assert build_pool(True, True) == BASE_WORDS + PUNCTUATION_WORDS + NUMBER_WORDS
    assert build_pool(False, True) == PURE_NUMBERS


@pytest.mark.parametrize("count", [0, -1, 1001])
def test_out_of_range_count_rejected(count):
    with pytest.raises(ValueError):
        generate_text(count)


def test_generate_for_uses_options():
    options = TextOptions(word_count=12, include_numbers=True)
    text = generate_for(options, rng=random.Random(1))
    assert len(text.split(" ")) == 12
    assert set(text.split(" ")) <= set(PURE_NUMBERS)
    assert options.numbers_only
    assert options.mode_label == "N"
