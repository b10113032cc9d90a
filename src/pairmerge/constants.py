"""
Constants for paired-end read merging.

Contains the overlap search limits, the Phred+33 quality encoding, and the
quality band table shared by merge decisions and read rendering.
"""

# Overlap search
# At least 30 bp must overlap before a pair is merged
MIN_OVERLAP = 30
# An overlap is rejected once this many high/low quality mismatches pile up
MAX_LOW_QUAL_DIFF = 3

# Quality encoding
PHRED_OFFSET = 33

# Strand markers (third line of a FASTQ record)
STRAND_FORWARD = "+"
STRAND_REVERSE = "-"

# Quality bands, highest first.
# Each entry: (inclusive lower bound on the quality char, band name, HTML color)
QUALITY_BANDS = (
    ('I', 'extreme_high', '#78C6B9'),   # >= Q40
    ('?', 'high', '#33BBE2'),           # Q30 ~ Q39
    ('5', 'moderate', '#666666'),       # Q20 ~ Q29
    ('0', 'low', '#E99E5B'),            # Q15 ~ Q19
)
EXTREME_LOW_BAND = ('extreme_low', '#FF0000')   # <= Q14

# Merge thresholds, taken from the band table
# A base is trusted at >= Q30 and distrusted at <= Q15
HIGH_QUALITY_MIN = QUALITY_BANDS[1][0]
LOW_QUALITY_MAX = QUALITY_BANDS[3][0]
