"""Reference sequence catalog: names, lengths and sampling weights."""

from __future__ import annotations

import gzip
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import IO, Union

from Bio import SeqIO

from blastoff.exceptions import CatalogError
from blastoff.utils.logging import get_logger


logger = get_logger("catalog")


def open_fasta(path: Union[str, Path]) -> IO[str]:
    """Open a FASTA file for reading text, transparently handling gzip."""
    path = Path(path)
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, "r", encoding="utf-8")


class SequenceCatalog:
    """Immutable mapping of reference sequence name to length.

    Iteration follows reference file order, which fixes the order in which
    the sampler visits sequences.
    """

    def __init__(self, lengths: Mapping[str, int]):
        if not lengths:
            raise CatalogError("Reference contains no sequences")
        for name, length in lengths.items():
            if length <= 0:
                raise CatalogError(f"Sequence '{name}' has non-positive length {length}")
        self._lengths = dict(lengths)
        self._total_length = sum(self._lengths.values())

    @classmethod
    def load(cls, reference: Union[str, Path]) -> "SequenceCatalog":
        """Read every sequence name and length from a (gzipped) FASTA file."""
        lengths: dict[str, int] = {}
        with open_fasta(reference) as handle:
            for record in SeqIO.parse(handle, "fasta"):
                if record.id in lengths:
                    raise CatalogError(f"Duplicate sequence name '{record.id}' in {reference}")
                if len(record.seq) == 0:
                    logger.warning(f"Skipping empty sequence '{record.id}'")
                    continue
                lengths[record.id] = len(record.seq)

        if not lengths:
            raise CatalogError(f"No sequences found in reference {reference}")

        catalog = cls(lengths)
        logger.info(
            f"{len(catalog)} contigs in reference of {catalog.total_length} bp"
        )
        return catalog

    @property
    def total_length(self) -> int:
        return self._total_length

    def length(self, name: str) -> int:
        try:
            return self._lengths[name]
        except KeyError:
            raise CatalogError(f"Unknown sequence '{name}'") from None

    def weight(self, name: str) -> float:
        """Fraction of the total reference length contributed by ``name``."""
        return self.length(name) / self._total_length

    def names(self) -> list[str]:
        return list(self._lengths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lengths)

    def __len__(self) -> int:
        return len(self._lengths)

    def __contains__(self, name: object) -> bool:
        return name in self._lengths
