"""Tests for the Phred+33 quality scale."""

import pytest

from pairmerge import (
    HIGH_QUALITY_MIN,
    LOW_QUALITY_MAX,
    combine_quality,
    is_high_quality,
    is_low_quality,
    phred_score,
    quality_band,
    quality_color,
)


@pytest.mark.parametrize(
    "qual, band",
    [
        ("J", "extreme_high"),
        ("I", "extreme_high"),
        ("H", "high"),
        ("?", "high"),
        (">", "moderate"),
        ("5", "moderate"),
        ("4", "low"),
        ("0", "low"),
        ("/", "extreme_low"),
        ("#", "extreme_low"),
    ],
)
def test_quality_band_boundaries(qual, band):
    assert quality_band(qual) == band


def test_quality_colors():
    assert quality_color("I") == "#78C6B9"
    assert quality_color("E") == "#33BBE2"
    assert quality_color("5") == "#666666"
    assert quality_color("2") == "#E99E5B"
    assert quality_color("#") == "#FF0000"


def test_phred_score():
    assert phred_score("!") == 0
    assert phred_score("?") == 30
    assert phred_score("I") == 40


def test_merge_thresholds_follow_band_table():
    assert HIGH_QUALITY_MIN == "?"
    assert LOW_QUALITY_MAX == "0"
    assert is_high_quality("?")
    assert not is_high_quality(">")
    assert is_low_quality("0")
    assert not is_low_quality("1")


def test_combine_quality():
    assert phred_score(combine_quality("5", "0")) == 35
    assert combine_quality("I", "I") == chr(80 + 33)
    assert combine_quality("I", "I", max_quality=40) == "I"
    assert combine_quality("#", "#", max_quality=40) == "%"
