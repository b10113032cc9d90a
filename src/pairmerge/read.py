"""
Sequencing read entity.

A Read is a named, stranded nucleotide sequence with an optional Phred+33
quality string of the same length. Reads are built once and never
modified; transformations return new Reads.
"""

from typing import Optional, TextIO, Union

from .constants import PHRED_OFFSET, STRAND_FORWARD, STRAND_REVERSE
from .sequence import Sequence


class ReadValidationError(ValueError):
    """Raised when a read is constructed from inconsistent fields."""
    pass


class Read:
    """
    A single sequencing read.

    Parameters
    ----------
    name : str
        Read identifier, usually the sequencer-assigned header line
        (including the leading '@').
    seq : str or Sequence
        Nucleotide sequence.
    strand : {'+', '-'}, default '+'
        Strand marker.
    quality : str, optional
        Phred+33 quality string, one character per base.

    Attributes
    ----------
    has_quality : bool
        Whether a quality string was supplied.

    Raises
    ------
    ReadValidationError
        If the strand marker is not '+' or '-', or the quality string
        length differs from the sequence length.

    Examples
    --------
    >>> read = Read("@r1", "ACGT", "+", "IIII")
    >>> read.reverse_complement().seq
    Sequence('ACGT')
    """

    __slots__ = ("name", "seq", "strand", "quality", "has_quality")

    def __init__(
        self,
        name: str,
        seq: Union[str, Sequence],
        strand: str = STRAND_FORWARD,
        quality: Optional[str] = None,
    ):
        if not isinstance(seq, Sequence):
            seq = Sequence(seq)

        if strand not in (STRAND_FORWARD, STRAND_REVERSE):
            raise ReadValidationError(f"Invalid strand marker {strand!r} for read {name}")

        if quality is not None and len(quality) != len(seq):
            raise ReadValidationError(
                f"Quality length {len(quality)} does not match sequence length "
                f"{len(seq)} for read {name}"
            )

        self.name = name
        self.seq = seq
        self.strand = strand
        self.quality = quality if quality is not None else ""
        self.has_quality = quality is not None

    def length(self) -> int:
        return self.seq.length()

    def __len__(self) -> int:
        return self.seq.length()

    def __repr__(self) -> str:
        return f"Read(name={self.name!r}, seq={str(self.seq)!r}, strand={self.strand!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Read):
            return NotImplemented
        return (
            self.name == other.name
            and self.seq == other.seq
            and self.strand == other.strand
            and self.has_quality == other.has_quality
            and self.quality == other.quality
        )

    def reverse_complement(self) -> "Read":
        """
        Return the reverse complement of this read.

        The sequence is reverse complemented, the quality string is only
        reversed, and the strand marker is flipped. The read itself is
        left untouched.
        """
        strand = STRAND_REVERSE if self.strand == STRAND_FORWARD else STRAND_FORWARD
        quality = self.quality[::-1] if self.has_quality else None
        return Read(self.name, ~self.seq, strand, quality)

    def last_index(self) -> str:
        """
        Extract the index (barcode) from the end of the read name.

        Illumina headers end with the sample index, e.g.
        ``1:N:0:TATAGCCT+GGTCCCGA``; the index is whatever follows the last
        ':' or '+' found scanning backwards from five characters before
        the end.

        Returns
        -------
        str
            The index, or an empty string if none could be found.

        Examples
        --------
        >>> Read("@r 1:N:0:TATAGCCT+GGTCCCGA", "A").last_index()
        'GGTCCCGA'
        """
        name_len = len(self.name)
        if name_len < 5:
            return ""
        for i in range(name_len - 5, -1, -1):
            if self.name[i] in (":", "+"):
                return self.name[i + 1:]
        return ""

    def low_qual_count(self, qual: int = 20) -> int:
        """Count the bases with a Phred score below ``qual``."""
        threshold = chr(qual + PHRED_OFFSET)
        return sum(1 for q in self.quality if q < threshold)

    def to_fastq(self) -> str:
        """Format the read as a FASTQ record (quality line only if present)."""
        lines = [self.name, str(self.seq), self.strand]
        if self.has_quality:
            lines.append(self.quality)
        return "\n".join(lines) + "\n"

    def write(self, handle: TextIO) -> None:
        """Write the read as a FASTQ record to an open text handle."""
        handle.write(self.to_fastq())


def reverse_complement(read: Read) -> Read:
    """Functional form of :meth:`Read.reverse_complement`."""
    return read.reverse_complement()
