"""
Merge statistics for FASTQ processing.

Accumulates, per sample, how many pairs merged, the overlap lengths of
the merged pairs and the index (barcode) of every pair, and exports them
as count matrices.
"""

from typing import Dict, Optional

import pandas as pd

from .read_pair import Overlap

MERGED = "merged"
UNMERGED = "unmerged"


def _to_frame(counts: Dict, index_name: str) -> pd.DataFrame:
    if not counts:
        return pd.DataFrame()

    # Structure: {row: {sample: count}}
    df = pd.DataFrame.from_dict(counts, orient='index')
    df = df.fillna(0).astype(int)
    df = df.sort_index(axis=0).sort_index(axis=1)
    df.index.name = index_name
    return df


class MergeCounts:
    """
    In-memory merge statistics for one or more samples.

    Each worker process gets its own instance; results are combined
    afterwards with :meth:`update`.

    Parameters
    ----------
    sample : str
        Sample the counts belong to.

    Examples
    --------
    >>> counts = MergeCounts("S1")
    >>> counts.record("GGTCCCGA", Overlap(offset=6, length=96, diff=1))
    >>> counts.record("GGTCCCGA", None)
    >>> counts.get_count("merged")
    1
    """

    def __init__(self, sample: str):
        self.sample = sample
        self._outcomes: Dict[str, Dict[str, int]] = {
            MERGED: {sample: 0},
            UNMERGED: {sample: 0},
        }
        self._overlaps: Dict[int, Dict[str, int]] = {}
        self._indexes: Dict[str, Dict[str, int]] = {}

    @staticmethod
    def _increment(table: Dict, key, sample: str, count: int = 1) -> None:
        sample_counts = table.setdefault(key, {})
        sample_counts[sample] = sample_counts.get(sample, 0) + count

    def record(self, index: str, overlap: Optional[Overlap]) -> None:
        """
        Record the outcome of one read pair.

        Parameters
        ----------
        index : str
            Index (barcode) of the pair.
        overlap : Overlap or None
            Accepted overlap, or None if the pair did not merge.
        """
        if overlap is None:
            self._increment(self._outcomes, UNMERGED, self.sample)
        else:
            self._increment(self._outcomes, MERGED, self.sample)
            self._increment(self._overlaps, overlap.length, self.sample)
        self._increment(self._indexes, index, self.sample)

    def update(self, other: "MergeCounts") -> None:
        """Add the counts of another instance to this one."""
        for mine, theirs in (
            (self._outcomes, other._outcomes),
            (self._overlaps, other._overlaps),
            (self._indexes, other._indexes),
        ):
            for key, sample_counts in theirs.items():
                for sample, count in sample_counts.items():
                    self._increment(mine, key, sample, count)

    def get_count(self, outcome: str, sample: Optional[str] = None) -> int:
        """Count of ``outcome`` ('merged' or 'unmerged') for a sample."""
        return self._outcomes.get(outcome, {}).get(sample or self.sample, 0)

    def outcome_counts(self) -> pd.DataFrame:
        """Merged/unmerged pair counts, outcomes as rows and samples as columns."""
        return _to_frame(self._outcomes, "outcome")

    def overlap_counts(self) -> pd.DataFrame:
        """Counts of merged pairs by overlap length."""
        return _to_frame(self._overlaps, "overlap")

    def index_counts(self) -> pd.DataFrame:
        """Pair counts by index (barcode)."""
        return _to_frame(self._indexes, "index")

    @property
    def total_pairs(self) -> int:
        """Total pairs recorded across all samples."""
        return sum(
            sum(sample_counts.values()) for sample_counts in self._outcomes.values()
        )

    @property
    def merged_pairs(self) -> int:
        """Merged pairs across all samples."""
        return sum(self._outcomes.get(MERGED, {}).values())
