"""Deterministic simulation of mate-pair windows from a reference catalog.

For every separation level the sampler spreads ``read_count`` pairs over the
reference sequences in proportion to their length. Each pair is two
``fragment_length`` windows on the same sequence with exactly ``separation``
bases between the end of the left window and the start of the right one.

The random source is passed in rather than drawn from global state. A run
seeds one ``random.Random`` and hands it to every level in increasing
separation order, so the draws for a level depend on which levels were
sampled before it (levels reused from the fragment store draw nothing).
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterator

from blastoff.constants import FRAGMENT_LENGTH
from blastoff.core.catalog import SequenceCatalog
from blastoff.exceptions import InsufficientLengthError
from blastoff.utils.logging import get_logger


logger = get_logger("sampler")


@dataclass(frozen=True)
class Window:
    """1-based inclusive coordinate range on one reference sequence."""

    name: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class FragmentPair:
    pair_id: int
    left: Window
    right: Window

    @property
    def gap(self) -> int:
        """Bases strictly between the two windows."""
        return self.right.start - self.left.end - 1


def reads_for_sequence(read_count: int, weight: float) -> int:
    """Pairs allotted to a sequence, rounding half up."""
    return math.floor(read_count * weight + 0.5)


class FragmentSampler:
    """Draws paired windows from ``catalog`` using a caller-owned random source."""

    def __init__(
        self,
        catalog: SequenceCatalog,
        rng: random.Random,
        fragment_length: int = FRAGMENT_LENGTH,
    ):
        self.catalog = catalog
        self.rng = rng
        self.fragment_length = fragment_length

    def start_range(self, name: str, separation: int) -> int:
        """Number of valid left-window starts on ``name`` for ``separation``.

        Raises:
            InsufficientLengthError: if the sequence cannot hold a pair
        """
        length = self.catalog.length(name)
        span = length - separation - 2 * self.fragment_length
        if span < 1:
            raise InsufficientLengthError(
                f"Sequence '{name}' ({length} bp) is too short for "
                f"{separation} bp separation",
                name=name,
                length=length,
                separation=separation,
            )
        return span

    def draw(self, name: str, separation: int, pair_id: int) -> FragmentPair:
        span = self.start_range(name, separation)
        pos1 = 1 + self.rng.randrange(span)
        end1 = pos1 + self.fragment_length - 1
        pos2 = pos1 + separation + self.fragment_length
        end2 = pos2 + self.fragment_length - 1
        return FragmentPair(pair_id, Window(name, pos1, end1), Window(name, pos2, end2))

    def generate(self, separation: int, read_count: int) -> Iterator[FragmentPair]:
        """Yield the pairs for one separation level, ids starting at 1.

        Lazy: no random draws happen until the iterator is consumed.
        """
        pair_id = 0
        for name in self.catalog:
            reads = reads_for_sequence(read_count, self.catalog.weight(name))
            if reads == 0:
                continue
            try:
                self.start_range(name, separation)
            except InsufficientLengthError as exc:
                logger.warning(f"{exc}; skipping it at this separation")
                continue
            for _ in range(reads):
                pair_id += 1
                yield self.draw(name, separation, pair_id)


def generate(
    catalog: SequenceCatalog,
    separation: int,
    seed: int,
    read_count: int,
    fragment_length: int = FRAGMENT_LENGTH,
) -> list[FragmentPair]:
    """Generate one level from a freshly seeded source.

    Two calls with identical arguments return identical pairs.
    """
    sampler = FragmentSampler(catalog, random.Random(seed), fragment_length)
    return list(sampler.generate(separation, read_count))
