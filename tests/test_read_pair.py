"""Tests for overlap detection and consensus merging."""

import pytest

from pairmerge import MIN_OVERLAP, MergeSettings, Overlap, Read, ReadPair, find_overlap

from conftest import FIXTURE_LEFT_QUAL, FIXTURE_MERGED_SEQ, FIXTURE_NAME

SMALL = MergeSettings(min_overlap=4)


def _pair(left_seq, left_qual, rc_right_seq, rc_right_qual):
    """Build a pair from the left read and the *reverse complemented* right read."""
    left = Read("@pair", left_seq, "+", left_qual)
    rc_right = Read("@pair", rc_right_seq, "+", rc_right_qual)
    return ReadPair(left, rc_right.reverse_complement())


def test_known_fixture_merges(overlapping_pair):
    merged = overlapping_pair.merge()

    assert merged is not None
    assert merged.seq == FIXTURE_MERGED_SEQ
    assert merged.strand == "+"
    assert merged.has_quality
    assert len(merged.quality) == len(FIXTURE_MERGED_SEQ)
    assert merged.name == f"{FIXTURE_NAME} merged offset:6 overlap:96 diff:1"


def test_known_fixture_consensus_details(overlapping_pair):
    merged, overlap = overlapping_pair.merge_with_overlap()

    assert overlap == Overlap(offset=6, length=96, diff=1)
    # bases before the overlap come straight from the left read
    assert merged.quality[:6] == FIXTURE_LEFT_QUAL[:6]
    # agreeing E (Q36) + E (Q36)
    assert merged.quality[6] == chr(36 + 36 + 33)
    # left A/E against right G// resolves to the left call
    assert merged.seq[96] == "A"
    assert merged.quality[96] == "E"


def test_exact_match_merge():
    pair = ReadPair(Read("@r", "AAAACCCC"), Read("@r", "CCCCGGGG"))
    merged = pair.merge(SMALL)

    assert merged.seq == "AAAACCCCGGGG"
    assert not merged.has_quality


def test_agreement_sums_phred_scores():
    # '5' is Q20 and '0' is Q15
    pair = _pair("AAAACCCC", "IIII5555", "CCCCGGGG", "0000IIII")
    merged = pair.merge(SMALL)

    assert merged.seq == "AAAACCCCGGGG"
    assert merged.quality == "IIII" + chr(20 + 15 + 33) * 4 + "IIII"


def test_agreement_quality_is_not_clamped_by_default():
    pair = _pair("AAAACCCC", "IIIIIIII", "CCCCGGGG", "IIIIIIII")
    merged = pair.merge(SMALL)

    assert merged.quality[4:8] == chr(80 + 33) * 4


def test_agreement_quality_clamped_when_configured():
    pair = _pair("AAAACCCC", "IIIIIIII", "CCCCGGGG", "IIIIIIII")
    merged = pair.merge(MergeSettings(min_overlap=4, max_quality=41))

    assert merged.quality == "IIII" + "JJJJ" + "IIII"


def test_mismatch_resolved_to_high_quality_left():
    pair = _pair("AAAACCCC", "IIIIIIII", "CCGCGGGG", "II#IIIII")
    merged = pair.merge(SMALL)

    assert merged.seq == "AAAACCCCGGGG"
    assert merged.quality[6] == "I"
    assert merged.name.endswith("merged offset:4 overlap:4 diff:1")


def test_mismatch_resolved_to_high_quality_right():
    pair = _pair("AAAACCCC", "IIIIII#I", "CCGCGGGG", "IIIIIIII")
    merged = pair.merge(SMALL)

    assert merged.seq == "AAAACCGCGGGG"
    assert merged.quality[6] == "I"


def test_moderate_quality_conflict_rejects_overlap():
    # Q20 on both sides is neither trusted nor distrusted
    pair = _pair("AAAACCCC", "55555555", "CCGCGGGG", "55555555")

    assert pair.merge(SMALL) is None


def test_high_quality_conflict_rejects_overlap():
    pair = _pair("AAAACCCC", "IIIIIIII", "CCGCGGGG", "IIIIIIII")

    assert pair.merge(SMALL) is None


def test_too_many_low_quality_mismatches_rejected():
    settings = MergeSettings(min_overlap=8)
    pair = _pair("CCCCAAAAAAAA", "I" * 12, "ATATATAAGGGG", "I#I#I#IIIIII")

    assert pair.merge(settings) is None


def test_two_low_quality_mismatches_tolerated():
    settings = MergeSettings(min_overlap=8)
    pair = _pair("CCCCAAAAAAAA", "I" * 12, "ATATAAAAGGGG", "I#I#IIIIIIII")
    merged, overlap = pair.merge_with_overlap(settings)

    assert overlap == Overlap(offset=4, length=8, diff=2)
    assert merged.seq == "CCCC" + "AAAAAAAA" + "GGGG"


def test_low_quality_mismatch_limit_is_configurable():
    settings = MergeSettings(min_overlap=8, max_low_qual_diff=4)
    pair = _pair("CCCCAAAAAAAA", "I" * 12, "ATATATAAGGGG", "I#I#I#IIIIII")
    merged, overlap = pair.merge_with_overlap(settings)

    assert overlap.diff == 3
    assert merged.seq == "CCCCAAAAAAAAGGGG"


def test_short_true_overlap_is_not_merged():
    tail = "GTGTGTGTGTGTGTGTGTGT"
    pair = _pair("A" * 80 + tail, "I" * 100, tail + "C" * 80, "I" * 100)

    assert MIN_OVERLAP == 30
    assert pair.merge() is None

    merged = pair.merge(MergeSettings(min_overlap=20))
    assert merged.seq == "A" * 80 + tail + "C" * 80


def test_shortest_accepted_overlap_wins():
    # ACGT repeats align at every multiple of four
    pair = _pair("ACGT" * 10, "I" * 40, "ACGT" * 10, "I" * 40)
    overlap = pair.merge_with_overlap()[1]

    assert overlap.length == 32
    assert overlap.offset == 8


def test_merge_is_deterministic_and_does_not_mutate(overlapping_pair, left_read, right_read):
    left_before = Read(left_read.name, str(left_read.seq), left_read.strand, left_read.quality)
    right_before = Read(right_read.name, str(right_read.seq), right_read.strand, right_read.quality)

    first = overlapping_pair.merge()
    second = overlapping_pair.merge()

    assert first == second
    assert overlapping_pair.left == left_before
    assert overlapping_pair.right == right_before


def test_no_merge_is_repeatable(disjoint_pair):
    assert disjoint_pair.merge() is None
    assert disjoint_pair.merge() is None
    assert disjoint_pair.merge_with_overlap() == (None, None)


def test_without_quality_no_mismatch_is_tolerated():
    pair = ReadPair(Read("@r", "AAAACCCC"), Read("@r", "CCCCGCGG"))

    assert pair.merge(SMALL) is None


def test_find_overlap_on_plain_strings():
    assert find_overlap("AAAACCCC", "CCCCGGGG", settings=SMALL) == Overlap(4, 4, 0)
    assert find_overlap("AAAA", "CCCC", settings=SMALL) is None
    # reads shorter than the minimum overlap never merge
    assert find_overlap("ACG", "ACG", settings=SMALL) is None


@pytest.mark.parametrize("kwargs", [{"min_overlap": 0}, {"max_low_qual_diff": 0}])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        MergeSettings(**kwargs)
