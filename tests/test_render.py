"""Tests for text and HTML rendering of reads."""

import pytest

from pairmerge import Read, format_with_breaks, html_td_with_breaks, make_string_with_breaks
from pairmerge.render import html_seq_with_qual


def test_make_string_with_breaks():
    assert make_string_with_breaks("AAAACCCCGGGG", [4, 8]) == "AAAA CCCC GGGG"
    assert make_string_with_breaks("AAAACCCCGGGG", [4]) == "AAAA CCCCGGGG"


def test_make_string_with_zero_break_drops_tail():
    assert make_string_with_breaks("AAAACCCC", [0]) == ""


def test_format_with_breaks():
    read = Read("@r", "AAAACCCC", "+", "IIII####")
    assert format_with_breaks(read, [4]) == "@r\nAAAA CCCC\n+\nIIII ####\n"


def test_html_seq_with_qual():
    read = Read("@r", "AC", "+", "I#")
    assert html_seq_with_qual(read, 0, 2) == (
        "<a title='I'><font color='#78C6B9'>A</font></a>"
        "<a title='#'><font color='#FF0000'>C</font></a>"
    )
    # stops at the end of the read
    assert html_seq_with_qual(read, 1, 10).count("<a ") == 1


def test_html_title_is_escaped():
    read = Read("@r", "A", "+", "<")
    assert "title='&lt;'" in html_seq_with_qual(read, 0, 1)


def test_html_td_with_breaks():
    read = Read("@r", "AACC", "+", "II55")
    html = html_td_with_breaks(read, [2])

    assert html.startswith("<td class='alignright'>")
    assert html.count("<td") == 2
    assert "<td class='alignleft'>" in html
    assert html.count("#666666") == 2


def test_html_td_requires_quality():
    with pytest.raises(ValueError):
        html_td_with_breaks(Read("@r", "AACC"), [2])


def test_html_seq_requires_quality():
    with pytest.raises(ValueError):
        html_seq_with_qual(Read("@r", "AACC"), 0, 2)


def test_empty_breaks_rejected():
    read = Read("@r", "AACC", "+", "IIII")
    with pytest.raises(ValueError):
        make_string_with_breaks("AACC", [])
    with pytest.raises(ValueError):
        html_td_with_breaks(read, [])
