"""Concordance evaluation of aligned mate pairs for one separation level."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from blastoff.constants import DISTANCE_TOLERANCE, RATIO_DECIMAL_PRECISION
from blastoff.core.hits import Hit, Side
from blastoff.utils.logging import get_logger


logger = get_logger("evaluator")


@dataclass(frozen=True)
class ConcordanceResult:
    separation: int
    concordant_count: int
    total_pairs_generated: int

    def __post_init__(self):
        if self.total_pairs_generated <= 0:
            raise ValueError("total_pairs_generated must be positive")
        if self.concordant_count < 0:
            raise ValueError("concordant_count must be non-negative")

    @property
    def ratio(self) -> float:
        return self.concordant_count / self.total_pairs_generated

    def format_row(self) -> str:
        return f"{self.separation}\t{self.ratio:.{RATIO_DECIMAL_PRECISION}f}"


class EvaluatorState(Enum):
    NEW = "new"
    COLLECTING = "collecting"
    EVALUATING = "evaluating"
    DONE = "done"


def pair_distance(left: Hit, right: Hit) -> int:
    """Gap between two mates on the assembly.

    Coordinates are compared rather than strands: whichever hit starts
    first is taken as upstream, which also covers reverse-strand placements.
    """
    if left.start > right.start:
        return abs(left.start - (right.end + 1))
    return abs(right.start - (left.end + 1))


def is_concordant(
    left: Hit, right: Hit, separation: int, tolerance: float = DISTANCE_TOLERANCE
) -> bool:
    """Same parent, same strand, and a gap within ``separation * (1 +/- tolerance)``."""
    if left.parent != right.parent:
        return False
    if left.strand != right.strand:
        return False
    distance = pair_distance(left, right)
    return separation * (1 - tolerance) <= distance <= separation * (1 + tolerance)


class ConcordanceEvaluator:
    """Collects hits for one level and counts concordant pairs.

    Usage::

        evaluator = ConcordanceEvaluator(separation=800, total_pairs=1000)
        evaluator.add_all(hits)
        result = evaluator.evaluate()
    """

    def __init__(
        self,
        separation: int,
        total_pairs: int,
        tolerance: float = DISTANCE_TOLERANCE,
    ):
        if total_pairs <= 0:
            raise ValueError("total_pairs must be positive")
        self.separation = separation
        self.total_pairs = total_pairs
        self.tolerance = tolerance
        self.state = EvaluatorState.NEW
        self._hits: dict[int, dict[Side, list[Hit]]] = defaultdict(lambda: defaultdict(list))
        self._result: Optional[ConcordanceResult] = None

    def add(self, hit: Hit) -> None:
        if self.state not in (EvaluatorState.NEW, EvaluatorState.COLLECTING):
            raise RuntimeError(f"Cannot add hits in state {self.state.value}")
        self.state = EvaluatorState.COLLECTING
        self._hits[hit.pair_id][hit.side].append(hit)

    def add_all(self, hits: Iterable[Hit]) -> None:
        for hit in hits:
            self.add(hit)

    def _pair_is_concordant(self, lefts: list[Hit], rights: list[Hit]) -> bool:
        for left in lefts:
            for right in rights:
                if is_concordant(left, right, self.separation, self.tolerance):
                    return True
        return False

    def evaluate(self) -> ConcordanceResult:
        """Count concordant pairs; the result is computed once and cached."""
        if self.state is EvaluatorState.DONE:
            assert self._result is not None
            return self._result

        self.state = EvaluatorState.EVALUATING
        count = 0
        one_sided = 0
        for sides in self._hits.values():
            lefts = sides.get(Side.LEFT)
            rights = sides.get(Side.RIGHT)
            if not lefts or not rights:
                one_sided += 1
                continue
            if self._pair_is_concordant(lefts, rights):
                count += 1

        logger.debug(
            f"Separation {self.separation}: {len(self._hits)} pairs with hits, "
            f"{one_sided} with one mate only"
        )
        self._result = ConcordanceResult(self.separation, count, self.total_pairs)
        self._hits.clear()
        self.state = EvaluatorState.DONE
        return self._result
