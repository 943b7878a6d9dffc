"""External tool wrappers (blastoff).

This package provides Python wrappers for the WU-BLAST tools blastoff drives:
- xdformat: database indexing
- xdget: subsequence retrieval from an indexed database
- qstaq.pl: alignment with tabular output
"""

from blastoff.external.base import ExternalTool
from blastoff.external.wublast import QStaq, XdFormat, XdGet

__all__ = [
    "ExternalTool",
    "QStaq",
    "XdFormat",
    "XdGet",
]
