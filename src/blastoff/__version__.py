"""Version information for blastoff."""

__version__ = "2.0.0"
__author__ = "Ian Korf, Ken Yu, Keith Bradnam"
__license__ = "CC-BY-NC-SA-3.0"
__description__ = "Assembly accuracy from simulated mate pairs at doubling separations"
