"""
Phred+33 quality scale.

Maps single quality characters to numeric Phred scores and to the
confidence bands defined in :data:`pairmerge.constants.QUALITY_BANDS`.
Band lookups compare raw characters against the inclusive lower bounds
of the table, so display colors and merge thresholds never drift apart.

Functions
---------
phred_score
    Numeric Phred score of a quality character.
quality_band
    Band name of a quality character.
quality_color
    HTML color of a quality character.
is_high_quality, is_low_quality
    The two bands used for merge decisions.
combine_quality
    Summed quality of two agreeing bases.
"""

from typing import Optional

from .constants import (
    EXTREME_LOW_BAND,
    HIGH_QUALITY_MIN,
    LOW_QUALITY_MAX,
    PHRED_OFFSET,
    QUALITY_BANDS,
)


def phred_score(qual: str) -> int:
    """Return the Phred score encoded by a Phred+33 character."""
    return ord(qual) - PHRED_OFFSET


def phred_char(score: int) -> str:
    """Return the Phred+33 character for a numeric score."""
    return chr(score + PHRED_OFFSET)


def _band(qual: str):
    for lower_bound, name, color in QUALITY_BANDS:
        if qual >= lower_bound:
            return name, color
    return EXTREME_LOW_BAND


def quality_band(qual: str) -> str:
    """
    Classify a quality character into a confidence band.

    Parameters
    ----------
    qual : str
        Single Phred+33 quality character.

    Returns
    -------
    str
        One of 'extreme_high', 'high', 'moderate', 'low', 'extreme_low'.

    Examples
    --------
    >>> quality_band('E')
    'high'
    >>> quality_band('#')
    'extreme_low'
    """
    return _band(qual)[0]


def quality_color(qual: str) -> str:
    """Return the HTML color used to display a base of this quality."""
    return _band(qual)[1]


def is_high_quality(qual: str) -> bool:
    """True for Q30 and above."""
    return qual >= HIGH_QUALITY_MIN


def is_low_quality(qual: str) -> bool:
    """True for Q15 and below."""
    return qual <= LOW_QUALITY_MAX


def combine_quality(qual1: str, qual2: str, max_quality: Optional[int] = None) -> str:
    """
    Combine the qualities of two agreeing bases.

    The Phred scores are summed. With ``max_quality`` set the result is
    clamped to that Phred score; otherwise the raw sum is kept, which may
    fall outside the printable Phred+33 range for two very good bases.

    Examples
    --------
    >>> combine_quality('5', '5')
    'I'
    >>> combine_quality('I', 'I', max_quality=40)
    'I'
    """
    score = phred_score(qual1) + phred_score(qual2)
    if max_quality is not None:
        score = min(score, max_quality)
    return phred_char(score)
