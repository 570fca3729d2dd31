import sys

import pytest

from livescore.score import (
    DEFAULT_SCORE,
    Score,
    ScoreFormatError,
    is_valid_score,
    normalize_score,
    parse_score,
    step_score,
)


@pytest.mark.parametrize("raw", ["2:1", " 2 : 1 ", "2  :1", "2\t:\t1"])
def test_whitespace_variants_normalize(raw):
    assert normalize_score(raw) == "2 : 1"


@pytest.mark.parametrize("raw", ["two:one", "1-0", "1:", ":1", "", "-1:0", "1:2:3", "1.5:0"])
def test_malformed_scores_rejected(raw):
    assert not is_valid_score(raw)
    with pytest.raises(ScoreFormatError):
        parse_score(raw)


def test_non_ascii_digits_rejected():
    # Arabic-Indic digits match \d but are not accepted as a score
    assert not is_valid_score("\u0662:\u0661")


def test_normalize_keeps_digits_as_written():
    assert normalize_score("10:03") == "10 : 03"
    assert normalize_score(" 02 :1") == "02 : 1"


def test_parse_returns_integers():
    assert parse_score("10 : 03") == Score(10, 3)


def test_oversized_numbers_normalize():
    huge = "1" * 5000
    assert normalize_score(huge + ":1") == huge + " : 1"


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits") or sys.get_int_max_str_digits() == 0,
    reason="no int conversion limit",
)
def test_numbers_past_int_limit_are_a_format_error():
    huge = "1" * (sys.get_int_max_str_digits() + 1)
    with pytest.raises(ScoreFormatError):
        parse_score(huge + ":1")
    assert step_score(huge + ":1", "home") == "1 : 0"


def test_default_score_is_canonical():
    assert DEFAULT_SCORE == "0 : 0"
    assert normalize_score(DEFAULT_SCORE) == DEFAULT_SCORE


def test_step_score_clamps_at_zero():
    assert step_score("0 : 0", "home") == "1 : 0"
    assert step_score("1 : 4", "away", -1) == "1 : 3"
    assert step_score("0 : 2", "home", -1) == "0 : 2"


def test_step_score_recovers_from_garbage():
    assert step_score("nonsense", "away") == "0 : 1"


def test_step_score_rejects_unknown_side():
    with pytest.raises(ValueError):
        step_score("0 : 0", "middle")
