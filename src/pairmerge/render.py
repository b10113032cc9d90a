"""
Text and HTML rendering of reads.

Reads can be printed with spaces at given break positions (e.g. around
an overlap or an adapter), or as HTML table cells where every base is
colored by its quality band.
"""

from html import escape
from typing import Sequence as SequenceType

from .quality import quality_color
from .read import Read


def make_string_with_breaks(origin: str, breaks: SequenceType[int]) -> str:
    """
    Insert a space at every break position.

    Parameters
    ----------
    origin : str
        String to split.
    breaks : sequence of int
        Ascending break positions. A trailing segment after the last
        break is only added when the last break is greater than zero.

    Examples
    --------
    >>> make_string_with_breaks("AAAACCCCGGGG", [4, 8])
    'AAAA CCCC GGGG'
    """
    if not breaks:
        raise ValueError("At least one break position is required")

    ret = origin[:breaks[0]]
    for start, end in zip(breaks, breaks[1:]):
        ret += " " + origin[start:end]
    if breaks[-1] > 0:
        ret += " " + origin[breaks[-1]:]
    return ret


def format_with_breaks(read: Read, breaks: SequenceType[int]) -> str:
    """Format a read as a FASTQ-like record with breaks in sequence and quality."""
    lines = [read.name, make_string_with_breaks(str(read.seq), breaks), read.strand]
    if read.has_quality:
        lines.append(make_string_with_breaks(read.quality, breaks))
    return "\n".join(lines) + "\n"


def html_seq_with_qual(read: Read, start: int, length: int) -> str:
    """
    Render a stretch of a read as quality-colored HTML.

    Each base becomes ``<a title='Q'><font color='C'>B</font></a>`` where
    Q is the quality character and C the color of its band. Positions past
    the end of the read are ignored.
    """
    if not read.has_quality:
        raise ValueError(f"Read {read.name} has no quality string to render")

    seq = str(read.seq)
    end = min(start + length, len(seq))
    parts = []
    for i in range(start, end):
        qual = read.quality[i]
        parts.append(
            f"<a title='{escape(qual)}'><font color='{quality_color(qual)}'>{seq[i]}</font></a>"
        )
    return "".join(parts)


def html_td_with_breaks(read: Read, breaks: SequenceType[int]) -> str:
    """
    Render a read as a row of HTML table cells split at the break positions.

    The first cell is right aligned and the cell after the last break (only
    present if the last break is greater than zero) is left aligned, so
    that consecutive rows line up on the breaks.
    """
    if not read.has_quality:
        raise ValueError(f"Read {read.name} has no quality string to render")
    if not breaks:
        raise ValueError("At least one break position is required")

    cells = [f"<td class='alignright'>{html_seq_with_qual(read, 0, breaks[0])}</td>"]
    for start, end in zip(breaks, breaks[1:]):
        cells.append(f"<td>{html_seq_with_qual(read, start, end - start)}</td>")
    if breaks[-1] > 0:
        cells.append(
            f"<td class='alignleft'>{html_seq_with_qual(read, breaks[-1], len(read) - breaks[-1])}</td>"
        )
    return "".join(cells)
