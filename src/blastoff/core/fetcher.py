"""Fragment fetchers: turn a reference window into its bases."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Union

from Bio import SeqIO

from blastoff.core.catalog import open_fasta
from blastoff.exceptions import CatalogError


class FragmentFetcher(Protocol):
    """Anything that can return bases ``start..end`` (1-based, inclusive)."""

    def fetch(self, name: str, start: int, end: int) -> str:
        ...


class ReferenceFetcher:
    """In-memory fetcher backed by Biopython; an alternative to xdget."""

    def __init__(self, sequences: dict[str, str]):
        self._sequences = sequences

    @classmethod
    def load(cls, reference: Union[str, Path]) -> "ReferenceFetcher":
        with open_fasta(reference) as handle:
            sequences = {record.id: str(record.seq) for record in SeqIO.parse(handle, "fasta")}
        return cls(sequences)

    def fetch(self, name: str, start: int, end: int) -> str:
        try:
            sequence = self._sequences[name]
        except KeyError:
            raise CatalogError(f"Unknown sequence '{name}'") from None
        if start < 1 or end > len(sequence) or end < start:
            raise ValueError(
                f"Window {start}..{end} outside '{name}' (length {len(sequence)})"
            )
        return sequence[start - 1 : end]
