"""
Nucleotide sequences and reverse complementation.
"""

from typing import Union

_COMPLEMENT = str.maketrans("ATCGatcg", "TAGCtagc")


def reverse_complement(seq: str) -> str:
    """
    Reverse complement a nucleotide string.

    A/T and C/G are swapped (case preserved); any other symbol, such as
    N, passes through unchanged.

    Examples
    --------
    >>> reverse_complement("AAAACCCN")
    'NGGGTTTT'
    """
    return seq.translate(_COMPLEMENT)[::-1]


class Sequence:
    """
    Wrapper over a nucleotide string.

    Treated as immutable; every transformation returns a new Sequence.
    The alphabet is not validated.

    Parameters
    ----------
    seq : str
        Nucleotide string.
    """

    __slots__ = ("_seq",)

    def __init__(self, seq: Union[str, "Sequence"] = ""):
        self._seq = str(seq)

    @property
    def seq(self) -> str:
        return self._seq

    def length(self) -> int:
        return len(self._seq)

    def reverse_complement(self) -> "Sequence":
        """Return a new Sequence that is the reverse complement of this one."""
        return Sequence(reverse_complement(self._seq))

    def __invert__(self) -> "Sequence":
        return self.reverse_complement()

    def __len__(self) -> int:
        return len(self._seq)

    def __getitem__(self, item):
        return self._seq[item]

    def __str__(self) -> str:
        return self._seq

    def __repr__(self) -> str:
        return f"Sequence({self._seq!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Sequence):
            return self._seq == other._seq
        if isinstance(other, str):
            return self._seq == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._seq)
