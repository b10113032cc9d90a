"""
Read pairs and overlap-based merging.

When a fragment is shorter than twice the read length, the 3' end of the
left read and the 5' end of the reverse complemented right read cover the
same bases. This module finds that overlap, tolerating a few mismatches
that can be blamed on one low-quality base, and builds a single consensus
read from the pair.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import MAX_LOW_QUAL_DIFF, MIN_OVERLAP, STRAND_FORWARD
from .quality import combine_quality, is_high_quality, is_low_quality
from .read import Read


@dataclass(frozen=True)
class MergeSettings:
    """
    Tunables for the overlap search and consensus.

    Parameters
    ----------
    min_overlap : int, default MIN_OVERLAP
        Shortest overlap considered.
    max_low_qual_diff : int, default MAX_LOW_QUAL_DIFF
        An overlap is rejected once this many high/low quality
        mismatches are seen.
    max_quality : int, optional
        If set, summed qualities of agreeing bases are clamped to this
        Phred score. By default the raw sum is kept.
    """
    min_overlap: int = MIN_OVERLAP
    max_low_qual_diff: int = MAX_LOW_QUAL_DIFF
    max_quality: Optional[int] = None

    def __post_init__(self):
        if self.min_overlap < 1:
            raise ValueError(f"min_overlap must be at least 1, got {self.min_overlap}")
        if self.max_low_qual_diff < 1:
            raise ValueError(f"max_low_qual_diff must be at least 1, got {self.max_low_qual_diff}")


DEFAULT_SETTINGS = MergeSettings()


@dataclass(frozen=True)
class Overlap:
    """An accepted overlap between a left read and a reverse complemented right read."""
    offset: int
    length: int
    diff: int


def _one_sided_low_quality(qual1: str, qual2: str) -> bool:
    # one is >= Q30 and the other is <= Q15
    return (
        (is_high_quality(qual1) and is_low_quality(qual2))
        or (is_low_quality(qual1) and is_high_quality(qual2))
    )


def find_overlap(
    seq1: str,
    seq2: str,
    qual1: Optional[str] = None,
    qual2: Optional[str] = None,
    settings: MergeSettings = DEFAULT_SETTINGS,
) -> Optional[Overlap]:
    """
    Find the shortest acceptable overlap of the end of seq1 with the start of seq2.

    Overlap lengths are tried from ``settings.min_overlap`` upwards and the
    first one that passes is returned, even if a longer one would also
    pass. A candidate fails as soon as a mismatch is seen that is not
    explained by one trusted (>= Q30) and one untrusted (<= Q15) base, or
    once ``settings.max_low_qual_diff`` explained mismatches accumulate.

    Parameters
    ----------
    seq1 : str
        Left sequence; its last ``length`` bases form the overlap.
    seq2 : str
        Right sequence, already reverse complemented; its first
        ``length`` bases form the overlap.
    qual1, qual2 : str, optional
        Quality strings for seq1 and seq2. If either is missing no
        mismatch is tolerated.
    settings : MergeSettings
        Search limits.

    Returns
    -------
    Overlap or None
        The accepted overlap, or None if no length in range passes.
    """
    len1 = len(seq1)
    len2 = len(seq2)
    use_quality = bool(qual1) and bool(qual2)

    for olen in range(settings.min_overlap, min(len1, len2) + 1):
        offset = len1 - olen
        diff = 0
        low_qual_diff = 0
        ok = True
        for i in range(olen):
            if seq1[offset + i] != seq2[i]:
                diff += 1
                if use_quality and _one_sided_low_quality(qual1[offset + i], qual2[i]):
                    low_qual_diff += 1
                # no high quality diff, and only a few low quality ones
                if diff > low_qual_diff or low_qual_diff >= settings.max_low_qual_diff:
                    ok = False
                    break
        if ok:
            return Overlap(offset=offset, length=olen, diff=diff)

    return None


def build_consensus(
    left: Read,
    rc_right: Read,
    overlap: Overlap,
    settings: MergeSettings = DEFAULT_SETTINGS,
) -> Read:
    """
    Build the merged read for an accepted overlap.

    The merged read is ``left[:offset] + rc_right``. Inside the overlap,
    agreeing bases get the summed quality of both reads; disagreeing bases
    take the base and quality of whichever read holds the trusted base.
    The merged name records the overlap as
    ``<left name> merged offset:<offset> overlap:<length> diff:<diff>``.
    """
    str1 = str(left.seq)
    str2 = str(rc_right.seq)
    offset = overlap.offset
    has_quality = left.has_quality and rc_right.has_quality

    merged_seq = list(str1[:offset] + str2)
    merged_qual = None
    if has_quality:
        qual1 = left.quality
        qual2 = rc_right.quality
        merged_qual = list(qual1[:offset] + qual2)
        for i in range(overlap.length):
            pos = offset + i
            if str1[pos] != str2[i]:
                if is_high_quality(qual1[pos]) and is_low_quality(qual2[i]):
                    merged_seq[pos] = str1[pos]
                    merged_qual[pos] = qual1[pos]
                else:
                    merged_seq[pos] = str2[i]
                    merged_qual[pos] = qual2[i]
            else:
                # both reads agree, so the base is more certain than either call
                merged_qual[pos] = combine_quality(qual1[pos], qual2[i], settings.max_quality)

    merged_name = (
        f"{left.name} merged offset:{offset} overlap:{overlap.length} diff:{overlap.diff}"
    )
    return Read(
        merged_name,
        "".join(merged_seq),
        STRAND_FORWARD,
        "".join(merged_qual) if merged_qual is not None else None,
    )


def merge_reads(
    left: Read,
    rc_right: Read,
    settings: MergeSettings = DEFAULT_SETTINGS,
) -> Tuple[Optional[Read], Optional[Overlap]]:
    """
    Merge a left read with an already reverse complemented right read.

    Parameters
    ----------
    left : Read
        Left (R1) read, the 5' anchor of the merged read.
    rc_right : Read
        Right (R2) read after reverse complementation.
    settings : MergeSettings
        Search limits and quality clamp.

    Returns
    -------
    merged : Read or None
        Consensus read on the forward strand, or None if the reads do
        not overlap.
    overlap : Overlap or None
        The overlap the consensus was built from.
    """
    has_quality = left.has_quality and rc_right.has_quality
    overlap = find_overlap(
        str(left.seq),
        str(rc_right.seq),
        left.quality if has_quality else None,
        rc_right.quality if has_quality else None,
        settings=settings,
    )
    if overlap is None:
        return None, None
    return build_consensus(left, rc_right, overlap, settings), overlap


class ReadPair:
    """
    The two reads sequenced from opposite ends of one fragment.

    Parameters
    ----------
    left : Read
        Read 1, in fragment orientation.
    right : Read
        Read 2, sequenced from the opposite end; it is reverse
        complemented before being compared with ``left``.

    Examples
    --------
    >>> pair = ReadPair(Read("@r", "AAAACCCC"), Read("@r", "CCCCGGGG"))
    >>> pair.merge(MergeSettings(min_overlap=4)).seq
    Sequence('AAAACCCCGGGG')
    """

    __slots__ = ("left", "right")

    def __init__(self, left: Read, right: Read):
        self.left = left
        self.right = right

    def __repr__(self) -> str:
        return f"ReadPair(left={self.left!r}, right={self.right!r})"

    def merge(self, settings: Optional[MergeSettings] = None) -> Optional[Read]:
        """
        Merge the pair into one consensus read.

        Returns None when no overlap of at least ``settings.min_overlap``
        bases is found; the caller should then keep both reads as they
        are. The pair is not modified, so merging is repeatable.
        """
        return self.merge_with_overlap(settings)[0]

    def merge_with_overlap(
        self,
        settings: Optional[MergeSettings] = None,
    ) -> Tuple[Optional[Read], Optional[Overlap]]:
        """Like :meth:`merge`, but also return the accepted overlap."""
        rc_right = self.right.reverse_complement()
        return merge_reads(self.left, rc_right, settings or DEFAULT_SETTINGS)
