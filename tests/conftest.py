"""Shared fixtures for pairmerge tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from pairmerge import Read, ReadPair

FIXTURE_NAME = "@NS500713:64:HFKJJBGXY:1:11101:20469:1097 1:N:0:TATAGCCT+GGTCCCGA"

FIXTURE_LEFT_SEQ = (
    "TTTTTTCTCTTGGACTCTAACACTGTTTTTTCTTATGAAAACACAGGAGTGATGACTAGTTGAGTGCATTC"
    "TTATGAGACTCATAGTCATTCTATGATGTAG"
)
FIXTURE_LEFT_QUAL = (
    "AAAAA6EEEEEEEEEEEEEEEEE#EEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEAEEEAEEEEEEEE"
    "EEEEEEEEEEEEEEEEEEEEEEEEEEEEEEE"
)
FIXTURE_RIGHT_SEQ = (
    "AAAAAACTACACCATAGAATGACTATGAGTCTCATAAGAATGCACTCAACTAGTCATCACTCCTGTGTTTT"
    "CATAAGAAAAAACAGTGTTAGAGTCCAAGAG"
)
FIXTURE_RIGHT_QUAL = (
    "AAAAA6EEEEE/EEEEEEEEEEE#EEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEAEEEAEEEEEEEE"
    "EEEEEEEEEEEEEEEEEEEEEEEEEEEEEEE"
)
FIXTURE_MERGED_SEQ = (
    "TTTTTTCTCTTGGACTCTAACACTGTTTTTTCTTATGAAAACACAGGAGTGATGACTAGTTGAGTGCATTC"
    "TTATGAGACTCATAGTCATTCTATGATGTAGTTTTTT"
)


@pytest.fixture
def left_read() -> Read:
    return Read(FIXTURE_NAME, FIXTURE_LEFT_SEQ, "+", FIXTURE_LEFT_QUAL)


@pytest.fixture
def right_read() -> Read:
    return Read(FIXTURE_NAME, FIXTURE_RIGHT_SEQ, "+", FIXTURE_RIGHT_QUAL)


@pytest.fixture
def overlapping_pair(left_read, right_read) -> ReadPair:
    return ReadPair(left_read, right_read)


@pytest.fixture
def disjoint_pair() -> ReadPair:
    name = "@NS500713:64:HFKJJBGXY:1:11101:1:2 1:N:0:TATAGCCT+GGTCCCGA"
    return ReadPair(
        Read(name, "A" * 50, "+", "I" * 50),
        Read(name, "A" * 50, "+", "I" * 50),
    )
