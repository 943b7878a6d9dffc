"""WU-BLAST wrappers: xdformat, xdget and the qstaq.pl alignment driver."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
import logging

from blastoff.constants import DEFAULT_MIN_SCORE
from blastoff.external.base import ExternalTool


class XdFormat(ExternalTool):
    """xdformat wrapper for nucleotide database indexing."""

    tool_name = "xdformat"
    min_version = "2.0"

    @staticmethod
    def index_path(fasta: Path) -> Path:
        """Sequence-identifier index written by ``xdformat -I``."""
        return fasta.with_name(fasta.name + ".xni")

    def is_indexed(self, fasta: Path) -> bool:
        index = self.index_path(fasta)
        return index.exists() and index.stat().st_size > 0

    def ensure_database(self, fasta: Path) -> None:
        """Index ``fasta`` unless a non-empty index already exists."""
        if self.is_indexed(fasta):
            self.logger.debug(f"Database already indexed: {fasta}")
            return

        cmd = [self.tool_name, "-n", "-I", str(fasta)]
        stdout = self.run(cmd)
        if stdout:
            self.logger.debug(f"xdformat output: {stdout[:500]}")
        self.logger.info(f"BLAST database indexed: {fasta}")


class XdGet(ExternalTool):
    """xdget wrapper; fetches reference windows from an indexed database."""

    tool_name = "xdget"

    def __init__(self, database: Path, logger: Optional[logging.Logger] = None):
        self.database = Path(database)
        super().__init__(logger=logger)

    def fetch(self, name: str, start: int, end: int) -> str:
        """Return bases ``start..end`` (1-based, inclusive) of sequence ``name``."""
        cmd = [
            self.tool_name,
            "-n",
            "-a", str(start),
            "-b", str(end),
            str(self.database),
            name,
        ]
        stdout = self.run(cmd)
        lines = stdout.splitlines()
        # First line is the FASTA definition line
        return "".join(line.strip() for line in lines[1:])


class QStaq(ExternalTool):
    """qstaq.pl wrapper producing one tabular record per alignment."""

    tool_name = "qstaq.pl"

    def command(self, assembly: Path, fragments: Path, min_score: int = DEFAULT_MIN_SCORE) -> list[str]:
        return [
            self.tool_name,
            "-h", "0",
            "-s", str(min_score),
            str(assembly),
            str(fragments),
        ]

    @contextmanager
    def stream_hits(
        self, assembly: Path, fragments: Path, min_score: int = DEFAULT_MIN_SCORE
    ) -> Iterator[Iterator[str]]:
        """Align ``fragments`` against ``assembly`` and yield the output lines."""
        with self.stream(self.command(assembly, fragments, min_score)) as lines:
            yield lines

    def align_to_file(
        self,
        assembly: Path,
        fragments: Path,
        output_file: Path,
        min_score: int = DEFAULT_MIN_SCORE,
    ) -> Path:
        """Write alignment output to ``output_file``; an existing file is reused."""
        if output_file.exists():
            self.logger.info(f"Reusing saved alignments: {output_file}")
            return output_file

        output_file.parent.mkdir(parents=True, exist_ok=True)
        stdout = self.run(self.command(assembly, fragments, min_score))
        # Write through a temporary name so a failed run never leaves a file to reuse
        partial = output_file.with_name(output_file.name + ".partial")
        partial.write_text(stdout)
        partial.replace(output_file)
        self.logger.info(f"Alignments saved to: {output_file}")
        return output_file
