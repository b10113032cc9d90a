"""
FASTQ reading and writing.

Records are the usual four lines: name ('@...'), sequence, separator
('+...'), quality. Paths ending in '.gz' are read and written through gzip.
"""

import gzip
from itertools import zip_longest
from os import PathLike
from typing import Iterator, TextIO, Union

from .constants import STRAND_FORWARD, STRAND_REVERSE
from .read import Read, ReadValidationError
from .read_pair import ReadPair


class FASTQParseError(Exception):
    """Raised when a FASTQ file is malformed."""
    pass


def open_fastq(path: Union[PathLike, str], mode: str = 'rt') -> TextIO:
    """Open a FASTQ file as text, through gzip if the name ends in '.gz'."""
    if str(path).endswith('.gz'):
        return gzip.open(path, mode)
    return open(path, mode)


def _strand_from_separator(line: str) -> str:
    # '+' optionally followed by a repeat of the name; '-' marks a reversed read
    if line.startswith(STRAND_REVERSE):
        return STRAND_REVERSE
    return STRAND_FORWARD


def parse_fastq(handle: TextIO, source: str = '<stream>') -> Iterator[Read]:
    """
    Parse FASTQ records from an open text handle.

    Parameters
    ----------
    handle : TextIO
        Open text stream positioned at the start of a record.
    source : str
        Name used in error messages.

    Yields
    ------
    Read
        One read per record. An empty quality line yields a read without
        quality.

    Raises
    ------
    FASTQParseError
        On truncated records, bad header or separator lines, or
        sequence/quality length mismatches.
    """
    record_num = 0
    while True:
        name = handle.readline()
        if not name:
            return
        name = name.rstrip('\r\n')
        if not name:
            # tolerate trailing blank lines
            continue

        seq = handle.readline()
        separator = handle.readline()
        quality = handle.readline()
        record_num += 1

        if not seq or not separator:
            raise FASTQParseError(f"{source}: truncated record {record_num} ({name})")
        if not name.startswith('@'):
            raise FASTQParseError(f"{source}: record {record_num} header does not start with '@': {name}")

        separator = separator.rstrip('\r\n')
        if not separator.startswith((STRAND_FORWARD, STRAND_REVERSE)):
            raise FASTQParseError(f"{source}: record {record_num} has invalid separator line: {separator}")

        quality = quality.rstrip('\r\n')
        try:
            yield Read(
                name,
                seq.rstrip('\r\n'),
                _strand_from_separator(separator),
                quality if quality else None,
            )
        except ReadValidationError as e:
            raise FASTQParseError(f"{source}: record {record_num}: {e}") from e


def read_fastq(path: Union[PathLike, str]) -> Iterator[Read]:
    """Yield every read in a FASTQ file."""
    with open_fastq(path) as handle:
        yield from parse_fastq(handle, source=str(path))


def read_fastq_pairs(
    r1_path: Union[PathLike, str],
    r2_path: Union[PathLike, str],
) -> Iterator[ReadPair]:
    """
    Yield read pairs from matching R1 and R2 FASTQ files.

    Raises
    ------
    FASTQParseError
        If one file runs out of records before the other.
    """
    for left, right in zip_longest(read_fastq(r1_path), read_fastq(r2_path)):
        if left is None or right is None:
            raise FASTQParseError(f"R1 and R2 have different numbers of reads: {r1_path}, {r2_path}")
        yield ReadPair(left, right)


def write_fastq(handle: TextIO, read: Read) -> None:
    """Write one read to an open FASTQ handle."""
    read.write(handle)
