"""Shared constants for blastoff.

Values here match blastoff2.pl so that accuracy curves stay comparable
with results from earlier releases.
"""

# ================== Simulation ==================
# Length of each mate window extracted from the reference (bp)
FRAGMENT_LENGTH: int = 100

# Default number of read pairs requested per separation level
DEFAULT_READS: int = 1000

# Default seed; seeds are restricted to 1..9
DEFAULT_SEED: int = 1
MIN_SEED: int = 1
MAX_SEED: int = 9

# Separation levels double from MIN up to MAX (inclusive)
DEFAULT_MIN_SEPARATION: int = 100
DEFAULT_MAX_SEPARATION: int = 102400


# ================== Alignment ==================
# qstaq.pl minimum score, roughly 95% identity over a 100 bp mate
DEFAULT_MIN_SCORE: int = 90

# Alignments shorter than this are dropped before grouping
MIN_ALIGNMENT_LENGTH: int = 95

# Minimum number of whitespace-separated fields in an aligner record
ALIGNMENT_RECORD_FIELDS: int = 22


# ================== Concordance ==================
# Observed distance must lie within separation * (1 +/- tolerance)
DISTANCE_TOLERANCE: float = 0.05


# ================== Output ==================
RATIO_DECIMAL_PRECISION: int = 4

# Genome tags laid out in the accumulated CSV report
CSV_GENOME_TAGS: tuple[str, ...] = ("A", "A1", "A2")
