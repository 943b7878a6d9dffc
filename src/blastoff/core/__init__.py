"""Core evaluation functionality (blastoff)."""

from blastoff.core.catalog import SequenceCatalog
from blastoff.core.evaluator import ConcordanceEvaluator, ConcordanceResult
from blastoff.core.hits import Hit, Side
from blastoff.core.pipeline import EvaluationPipeline
from blastoff.core.sampler import FragmentPair, FragmentSampler
from blastoff.core.store import FragmentKey, FragmentStore

__all__ = [
    "ConcordanceEvaluator",
    "ConcordanceResult",
    "EvaluationPipeline",
    "FragmentKey",
    "FragmentPair",
    "FragmentSampler",
    "FragmentStore",
    "Hit",
    "SequenceCatalog",
    "Side",
]
