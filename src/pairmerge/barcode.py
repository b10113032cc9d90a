"""
Sample index (barcode) correction.

Indexes read from the end of Illumina headers carry sequencing errors
like any other base call. This module snaps an observed index to the
closest entry of a known whitelist using Hamming distance.
"""

from typing import List, Optional, Tuple

from rapidfuzz.distance import Hamming
from rapidfuzz.process import extract

from .read import Read

UNKNOWN_INDEX = "Unknown"


def best_match_to_whitelist(
    index: str,
    whitelist: List[str],
    blacklist: Optional[List[str]] = None,
    index_error_threshold: int = 1,
) -> Tuple[Optional[str], int]:
    """
    Correct an observed index to a whitelist entry.

    Only entries of the same length as the observed index are compared,
    so a truncated index is never padded into a match and dual indexes
    (``i7+i5``) are compared as a whole. An index equally close to two
    entries cannot be assigned and is rejected.

    Parameters
    ----------
    index : str
        Observed index.
    whitelist : list of str
        Valid indexes.
    blacklist : list of str, optional
        Indexes to reject outright.
    index_error_threshold : int, default 1
        Maximum Hamming distance for a valid match.

    Returns
    -------
    corrected_index : str or None
        Best matching whitelist entry, or None if no valid match.
    distance : int
        Hamming distance to the best match (threshold+1 if rejected
        before matching).

    Examples
    --------
    >>> best_match_to_whitelist("GGTCCCGT", ["GGTCCCGA", "TATAGCCT"])
    ('GGTCCCGA', 1)
    >>> best_match_to_whitelist("GGTCCCG", ["GGTCCCGA", "TATAGCCT"])
    (None, 2)
    """
    rejected = (None, index_error_threshold + 1)
    if not index or (blacklist and index in blacklist):
        return rejected

    if index in whitelist:
        return index, 0

    candidates = [entry for entry in whitelist if len(entry) == len(index)]
    if not candidates:
        return rejected

    # two best hits, to detect indexes between two whitelist entries
    matches = extract(index, candidates, scorer=Hamming.distance, limit=2)
    corrected_index, distance, _ = matches[0]

    if distance > index_error_threshold:
        return None, distance
    if len(matches) > 1 and matches[1][1] == distance:
        return None, distance

    return corrected_index, distance


def read_index(
    read: Read,
    whitelist: Optional[List[str]] = None,
    index_error_threshold: int = 1,
) -> str:
    """
    Return the (corrected) index of a read.

    Without a whitelist the raw index from the read name is returned.
    With one, the index is corrected against it and reads that cannot be
    assigned are reported as ``UNKNOWN_INDEX``.
    """
    index = read.last_index()
    if not whitelist:
        return index or UNKNOWN_INDEX

    corrected, _ = best_match_to_whitelist(
        index,
        whitelist,
        index_error_threshold=index_error_threshold,
    )
    return corrected if corrected is not None else UNKNOWN_INDEX
