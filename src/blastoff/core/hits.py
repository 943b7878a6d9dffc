"""Parsing of qstaq.pl tabular alignment records into hits.

Each record is one whitespace-separated line. The fields used are, by
0-based index:

    0   query id, ``L-<pair>`` or ``R-<pair>``
    1   target (assembly sequence) id
    6   alignment length
    16  query frame/strand
    20  target start
    21  target end
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from blastoff.constants import ALIGNMENT_RECORD_FIELDS, MIN_ALIGNMENT_LENGTH
from blastoff.exceptions import MalformedRecordError
from blastoff.utils.logging import LogTemplates, get_logger


logger = get_logger("hits")

QUERY_ID_PATTERN = re.compile(r"^([LR])-(\d+)$")

FIELD_QUERY = 0
FIELD_TARGET = 1
FIELD_LENGTH = 6
FIELD_STRAND = 16
FIELD_TARGET_START = 20
FIELD_TARGET_END = 21


class Side(Enum):
    LEFT = "L"
    RIGHT = "R"


@dataclass(frozen=True)
class Hit:
    pair_id: int
    side: Side
    parent: str
    strand: str
    start: int
    end: int
    aligned_length: int


def parse_query_id(query_id: str) -> tuple[Side, int]:
    """Split ``L-7`` into ``(Side.LEFT, 7)``."""
    match = QUERY_ID_PATTERN.match(query_id)
    if not match:
        raise MalformedRecordError(
            f"Query id '{query_id}' is not of the form L-<n> or R-<n>", record=query_id
        )
    return Side(match.group(1)), int(match.group(2))


def _int_field(fields: list[str], index: int, record: str) -> int:
    try:
        return int(fields[index])
    except ValueError:
        raise MalformedRecordError(
            f"Field {index + 1} is not an integer: '{fields[index]}'", record=record
        ) from None


def parse(record: str) -> Hit:
    """Parse one tabular record.

    Raises:
        MalformedRecordError: on a short row, non-numeric coordinates or a bad
            query id
    """
    fields = record.split()
    if len(fields) < ALIGNMENT_RECORD_FIELDS:
        raise MalformedRecordError(
            f"Expected at least {ALIGNMENT_RECORD_FIELDS} fields, got {len(fields)}",
            record=record,
        )

    side, pair_id = parse_query_id(fields[FIELD_QUERY])
    return Hit(
        pair_id=pair_id,
        side=side,
        parent=fields[FIELD_TARGET],
        strand=fields[FIELD_STRAND],
        start=_int_field(fields, FIELD_TARGET_START, record),
        end=_int_field(fields, FIELD_TARGET_END, record),
        aligned_length=_int_field(fields, FIELD_LENGTH, record),
    )


def iter_hits(
    records: Iterable[str], min_alignment_length: int = MIN_ALIGNMENT_LENGTH
) -> Iterator[Hit]:
    """Parse a record stream, dropping blank lines and short alignments."""
    kept = removed = 0
    for record in records:
        if not record.strip():
            continue
        hit = parse(record)
        if hit.aligned_length < min_alignment_length:
            removed += 1
            continue
        kept += 1
        yield hit

    logger.debug(
        LogTemplates.HITS_FILTERED.format(
            kept=kept, removed=removed, threshold=min_alignment_length
        )
    )
