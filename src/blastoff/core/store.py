"""On-disk store of simulated fragment files keyed by run parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from blastoff.core.fetcher import FragmentFetcher
from blastoff.core.sampler import FragmentPair
from blastoff.utils.logging import LogTemplates, get_logger


logger = get_logger("store")


@dataclass(frozen=True)
class FragmentKey:
    """Identity of a fragment file.

    ``ref_tag`` only decorates the file name and does not take part in
    equality.
    """

    seed: int
    separation: int
    read_count: int
    ref_tag: Optional[str] = field(default=None, compare=False)

    @property
    def filename(self) -> str:
        stem = f"fragments2.{self.seed}.{self.separation}.{self.read_count}"
        return f"{self.ref_tag}.{stem}" if self.ref_tag else stem


def count_pairs(path: Union[str, Path]) -> int:
    """Count complete L/R records in a fragment file.

    A file cut short by an interrupted run may end on a lone left mate, so
    both sides are counted and the smaller wins.
    """
    left = right = 0
    with open(path, "r", encoding="utf-8") as handle:
        for line in handle:
            if line.startswith(">L-"):
                left += 1
            elif line.startswith(">R-"):
                right += 1
    return min(left, right)


class FragmentStore:
    """Sole writer of fragment files under ``directory``.

    Reuse is read-check-then-write; runs sharing a directory must not
    overlap.
    """

    def __init__(self, directory: Union[str, Path], fetcher: FragmentFetcher):
        self.directory = Path(directory)
        self.fetcher = fetcher

    def path_for(self, key: FragmentKey) -> Path:
        return self.directory / key.filename

    def get_or_create(
        self,
        key: FragmentKey,
        generator_fn: Callable[[], Iterable[FragmentPair]],
    ) -> tuple[int, Path]:
        """Return ``(pair_count, path)``, generating the file only when needed."""
        path = self.path_for(key)
        if path.exists() and path.stat().st_size > 0:
            pairs = count_pairs(path)
            logger.info(LogTemplates.FRAGMENTS_REUSED.format(pairs=pairs, path=path))
            return pairs, path

        logger.info(
            LogTemplates.FRAGMENTS_GENERATING.format(
                reads=key.read_count, separation=key.separation, seed=key.seed
            )
        )
        self.directory.mkdir(parents=True, exist_ok=True)
        pairs = 0
        with open(path, "w", encoding="utf-8") as out:
            for pair in generator_fn():
                left = self.fetcher.fetch(pair.left.name, pair.left.start, pair.left.end)
                right = self.fetcher.fetch(pair.right.name, pair.right.start, pair.right.end)
                out.write(f">L-{pair.pair_id}\n{left}\n")
                out.write(f">R-{pair.pair_id}\n{right}\n")
                pairs += 1

        logger.info(LogTemplates.FRAGMENTS_WRITTEN.format(pairs=pairs, path=path))
        return pairs, path
