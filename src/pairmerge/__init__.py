"""
pairmerge - overlap merging of paired-end sequencing reads.

When a sequenced fragment is shorter than twice the read length, the two
reads of a pair overlap. This package finds that overlap, allowing a few
mismatches explained by low-quality base calls, and merges the pair into
one longer consensus read with combined base qualities.

Main Classes
------------
ReadPair
    The two reads of one fragment; ``ReadPair.merge()`` builds the
    consensus read or returns None.

Read
    A named, stranded sequence with an optional quality string.

Sequence
    Nucleotide string with reverse complementation.

MergePairedFASTQ
    Merge all pairs of a directory of R1/R2 FASTQ files in parallel.

MergeCounts
    Per-sample merge statistics.

plots
    Overlap length histogram and merge rate bar charts.

Constants
---------
MIN_OVERLAP
    Shortest overlap (30 bp) accepted for a merge.

Examples
--------
>>> from pairmerge import Read, ReadPair
>>> pair = ReadPair(
...     Read("@r1", "ACGT" * 10, "+", "I" * 40),
...     Read("@r1", "ACGT" * 10, "+", "I" * 40),
... )
>>> merged = pair.merge()
>>> merged.name
'@r1 merged offset:8 overlap:32 diff:0'
>>> merged.seq == "ACGT" * 12
True
"""

from .barcode import UNKNOWN_INDEX, best_match_to_whitelist, read_index
from .constants import (
    HIGH_QUALITY_MIN,
    LOW_QUALITY_MAX,
    MAX_LOW_QUAL_DIFF,
    MIN_OVERLAP,
    PHRED_OFFSET,
    QUALITY_BANDS,
    STRAND_FORWARD,
    STRAND_REVERSE,
)
from .fastq import FASTQParseError, read_fastq, read_fastq_pairs, write_fastq
from .merge_counts import MergeCounts
from .paired_fastq import MergePairedFASTQ, merge_fastq_files
from .plots import merge_rate_plot, overlap_histogram
from .quality import (
    combine_quality,
    is_high_quality,
    is_low_quality,
    phred_score,
    quality_band,
    quality_color,
)
from .read import Read, ReadValidationError, reverse_complement
from .read_pair import MergeSettings, Overlap, ReadPair, find_overlap, merge_reads
from .render import format_with_breaks, html_td_with_breaks, make_string_with_breaks
from .sequence import Sequence

__all__ = [
    # Main classes
    "ReadPair",
    "Read",
    "Sequence",
    "MergePairedFASTQ",
    "MergeCounts",
    "MergeSettings",
    "Overlap",
    # Errors
    "ReadValidationError",
    "FASTQParseError",
    # Merging
    "find_overlap",
    "merge_reads",
    "merge_fastq_files",
    "reverse_complement",
    # Quality scale
    "phred_score",
    "quality_band",
    "quality_color",
    "is_high_quality",
    "is_low_quality",
    "combine_quality",
    # FASTQ I/O
    "read_fastq",
    "read_fastq_pairs",
    "write_fastq",
    # Rendering
    "make_string_with_breaks",
    "format_with_breaks",
    "html_td_with_breaks",
    # Plots
    "overlap_histogram",
    "merge_rate_plot",
    # Index correction
    "best_match_to_whitelist",
    "read_index",
    "UNKNOWN_INDEX",
    # Constants
    "MIN_OVERLAP",
    "MAX_LOW_QUAL_DIFF",
    "PHRED_OFFSET",
    "QUALITY_BANDS",
    "HIGH_QUALITY_MIN",
    "LOW_QUALITY_MAX",
    "STRAND_FORWARD",
    "STRAND_REVERSE",
]

__version__ = "0.1.0"
