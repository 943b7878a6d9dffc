"""Report sinks for per-separation concordance results."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO, Optional, Protocol, Sequence

import pandas as pd

from blastoff.constants import CSV_GENOME_TAGS
from blastoff.core.evaluator import ConcordanceResult
from blastoff.utils.logging import get_logger


logger = get_logger("report")


class ReportSink(Protocol):
    def emit(self, result: ConcordanceResult) -> None:
        ...

    def close(self) -> None:
        ...


class TextReportSink:
    """Writes ``<separation>\\t<ratio>`` rows as soon as each level finishes."""

    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream if stream is not None else sys.stdout

    def emit(self, result: ConcordanceResult) -> None:
        self.stream.write(result.format_row() + "\n")
        self.stream.flush()

    def close(self) -> None:
        pass


def csv_report_name(assembly_tag: Optional[str], assembly_name: Optional[str], assembly: Path, seed: int) -> str:
    if assembly_tag:
        return f"{assembly_tag}_{assembly_name}_{seed}_paired_end_fragments.csv"
    return f"{assembly.name}_{seed}_paired_end_fragments.csv"


class CsvReportSink:
    """Accumulates concordant counts from several runs in one CSV table.

    One row per (Assembly, Samples); one ``<genome>_<separation>`` column
    per genome tag and level. A run against reference ``ref_tag`` fills only
    its own columns, so runs against the A, A1 and A2 genomes build up a
    single row between them.
    """

    def __init__(
        self,
        path: Path,
        assembly: str,
        samples: int,
        ref_tag: Optional[str],
        separations: Sequence[int],
    ):
        self.path = Path(path)
        self.assembly = assembly
        self.samples = samples
        self.genome = ref_tag or "A"
        self.separations = list(separations)
        self._counts: dict[str, int] = {}

    def columns(self) -> list[str]:
        genomes = list(CSV_GENOME_TAGS)
        if self.genome not in genomes:
            genomes.append(self.genome)
        return ["Assembly", "Samples"] + [
            f"{genome}_{separation}" for genome in genomes for separation in self.separations
        ]

    def emit(self, result: ConcordanceResult) -> None:
        self._counts[f"{self.genome}_{result.separation}"] = result.concordant_count

    def _load(self) -> pd.DataFrame:
        if self.path.exists() and self.path.stat().st_size > 0:
            return pd.read_csv(self.path, dtype={"Assembly": str})
        return pd.DataFrame(columns=["Assembly", "Samples"])

    def close(self) -> None:
        if not self._counts:
            logger.warning(f"No results to record in {self.path}")
            return

        table = self._load()
        # Keep columns from earlier runs (e.g. other separation ranges) after ours
        ordered = self.columns() + [c for c in table.columns if c not in self.columns()]
        table = table.reindex(columns=ordered)

        mask = (table["Assembly"] == self.assembly) & (table["Samples"] == self.samples)
        if not mask.any():
            row = pd.DataFrame([{"Assembly": self.assembly, "Samples": self.samples}])
            table = pd.concat([table, row], ignore_index=True).reindex(columns=ordered)
            mask = (table["Assembly"] == self.assembly) & (table["Samples"] == self.samples)

        for column, count in self._counts.items():
            table.loc[mask, column] = count

        count_columns = [c for c in ordered if c not in ("Assembly", "Samples")]
        table[count_columns] = table[count_columns].astype("Int64")
        table["Samples"] = table["Samples"].astype("Int64")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(self.path, index=False)
        logger.info(f"Recorded {len(self._counts)} levels for {self.assembly} in {self.path}")
