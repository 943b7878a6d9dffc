"""Run orchestration: simulate, align and score every separation level.

One run walks the separation levels in increasing order twice. The first
pass makes sure a fragment file exists for every level, drawing from a
single random source seeded once. The second pass aligns each level's
fragments against the assembly and reports its concordance ratio.
"""

from __future__ import annotations

import random
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Sequence

from blastoff.config import Config
from blastoff.core.catalog import SequenceCatalog
from blastoff.core.evaluator import ConcordanceEvaluator, ConcordanceResult
from blastoff.core.fetcher import FragmentFetcher, ReferenceFetcher
from blastoff.core.hits import iter_hits
from blastoff.core.report import CsvReportSink, ReportSink, TextReportSink, csv_report_name
from blastoff.core.sampler import FragmentSampler
from blastoff.core.store import FragmentKey, FragmentStore
from blastoff.exceptions import ConfigurationError, MalformedRecordError, PipelineError
from blastoff.external.wublast import QStaq, XdFormat, XdGet
from blastoff.utils.logging import LogTemplates, get_logger


@dataclass(frozen=True)
class RunTags:
    """Human-readable labels parsed from the input file names.

    ``P1_contigs.fa.gz`` gives assembly tag ``P1`` and name ``contigs``;
    ``A2.seq.gz`` gives reference tag ``A2``.
    """

    assembly_tag: Optional[str] = None
    assembly_name: Optional[str] = None
    ref_tag: Optional[str] = None

    @classmethod
    def from_paths(cls, reference: Path, assembly: Path) -> "RunTags":
        assembly_match = re.search(r"(\w\d+)_", assembly.name)
        assembly_tag = assembly_match.group(1) if assembly_match else None
        assembly_name = None
        if assembly_tag:
            name_match = re.search(r"_(\w+)", assembly.name)
            assembly_name = name_match.group(1) if name_match else None
        ref_match = re.search(r"(\w\d?)\.seq", reference.name)
        return cls(assembly_tag, assembly_name, ref_match.group(1) if ref_match else None)


@dataclass
class RunSummary:
    fragment_counts: dict[int, int] = field(default_factory=dict)
    results: list[ConcordanceResult] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)
    skipped: list[int] = field(default_factory=list)


class EvaluationPipeline:
    """Evaluates one assembly against one reference."""

    def __init__(
        self,
        config: Config,
        sinks: Optional[Sequence[ReportSink]] = None,
        fetcher: Optional[FragmentFetcher] = None,
        aligner: Optional[QStaq] = None,
    ):
        self.config = config
        self.logger = get_logger("pipeline")
        if config.reference is None or config.assembly is None:
            raise ConfigurationError("Both a reference and an assembly are required")
        self.reference = config.reference
        self.assembly = config.assembly
        self.tags = RunTags.from_paths(self.reference, self.assembly)
        self.work_dir = config.runtime.work_dir
        self._fetcher = fetcher
        self._aligner = aligner
        # Default sinks need validated separations, so they are built in run()
        self.sinks: Optional[list[ReportSink]] = list(sinks) if sinks is not None else None

    def _default_sinks(self) -> list[ReportSink]:
        sinks: list[ReportSink] = [TextReportSink()]
        if self.config.runtime.csv:
            name = csv_report_name(
                self.tags.assembly_tag, self.tags.assembly_name, self.assembly, self.config.seed
            )
            sinks.append(
                CsvReportSink(
                    self.work_dir / name,
                    assembly=self.tags.assembly_tag or self.assembly.name,
                    samples=self.config.reads,
                    ref_tag=self.tags.ref_tag,
                    separations=self.config.separations(),
                )
            )
        return sinks

    # ------------------------------------------------------------------ setup

    def prepare_databases(self) -> None:
        """Index the assembly, and the reference when xdget fetches from it."""
        xdformat = XdFormat()
        if self.config.simulation.fetcher == "xdget":
            xdformat.ensure_database(self.reference)
        xdformat.ensure_database(self.assembly)

    @property
    def fetcher(self) -> FragmentFetcher:
        if self._fetcher is None:
            if self.config.simulation.fetcher == "memory":
                self._fetcher = ReferenceFetcher.load(self.reference)
            else:
                self._fetcher = XdGet(self.reference)
        return self._fetcher

    @property
    def aligner(self) -> QStaq:
        if self._aligner is None:
            self._aligner = QStaq()
        return self._aligner

    # ------------------------------------------------------------- fragments

    def build_fragments(self, catalog: SequenceCatalog) -> dict[int, tuple[int, Path]]:
        """Ensure a fragment file for every level, in increasing order."""
        sim = self.config.simulation
        rng = random.Random(sim.seed)
        sampler = FragmentSampler(catalog, rng, sim.fragment_length)
        store = FragmentStore(self.work_dir, self.fetcher)

        fragments = {}
        for separation in self.config.separations():
            key = FragmentKey(sim.seed, separation, sim.reads, ref_tag=self.tags.ref_tag)
            fragments[separation] = store.get_or_create(
                key, lambda s=separation: sampler.generate(s, sim.reads)
            )
        return fragments

    # ------------------------------------------------------------- alignment

    def alignment_file(self, separation: int) -> Path:
        seed, reads = self.config.seed, self.config.reads
        tags = self.tags
        if tags.ref_tag and tags.assembly_tag and tags.assembly_name:
            name = f"{tags.assembly_tag}_{tags.assembly_name}.{tags.ref_tag}.{seed}.{separation}.{reads}.blast.out"
        else:
            name = f"{self.assembly.name}.{self.reference.name}.{seed}.{separation}.{reads}.blast.out"
        return self.work_dir / name

    @contextmanager
    def alignment_records(self, separation: int, fragments: Path) -> Iterator[Iterator[str]]:
        """Yield aligner output lines, from a saved file or a live process."""
        min_score = self.config.alignment.min_score
        if self.config.alignment.save_alignments:
            saved = self.aligner.align_to_file(
                self.assembly, fragments, self.alignment_file(separation), min_score
            )
            with open(saved, "r", encoding="utf-8") as handle:
                yield handle
        else:
            with self.aligner.stream_hits(self.assembly, fragments, min_score) as lines:
                yield lines

    def evaluate_level(self, separation: int, pair_count: int, fragments: Path) -> ConcordanceResult:
        """Align and score one level.

        Raises:
            MalformedRecordError: if any aligner record cannot be parsed
            ExternalToolError: if the aligner fails
        """
        self.logger.info(LogTemplates.LEVEL_START.format(separation=separation, pairs=pair_count))
        evaluator = ConcordanceEvaluator(
            separation, pair_count, tolerance=self.config.alignment.tolerance
        )
        with self.alignment_records(separation, fragments) as records:
            evaluator.add_all(
                iter_hits(records, self.config.alignment.min_alignment_length)
            )
        result = evaluator.evaluate()
        self.logger.info(
            LogTemplates.LEVEL_RESULT.format(
                separation=separation,
                count=result.concordant_count,
                pairs=pair_count,
                ratio=result.ratio,
            )
        )
        return result

    # ------------------------------------------------------------------- run

    def run(self) -> RunSummary:
        """Run every level and emit results to the sinks.

        Raises:
            PipelineError: after all levels ran, if any level had malformed
                aligner output
        """
        self.config.validate()
        if self.sinks is None:
            self.sinks = self._default_sinks()
        self.logger.info(
            f"Processing assembly {self.tags.assembly_tag or self.assembly.name}, "
            f"using genome {self.tags.ref_tag or self.reference.name}"
        )
        self.prepare_databases()

        catalog = SequenceCatalog.load(self.reference)

        summary = RunSummary()
        fragments = self.build_fragments(catalog)
        summary.fragment_counts = {sep: count for sep, (count, _) in fragments.items()}

        try:
            for separation, (pair_count, path) in fragments.items():
                if pair_count == 0:
                    self.logger.warning(
                        f"No pairs could be generated at {separation} bp; level skipped"
                    )
                    summary.skipped.append(separation)
                    continue
                try:
                    result = self.evaluate_level(separation, pair_count, path)
                except MalformedRecordError as exc:
                    self.logger.error(
                        LogTemplates.LEVEL_FAILED.format(separation=separation, error=exc)
                    )
                    summary.failed[separation] = str(exc)
                    continue
                summary.results.append(result)
                for sink in self.sinks:
                    sink.emit(result)
        finally:
            for sink in self.sinks:
                sink.close()

        if summary.failed:
            levels = ", ".join(str(sep) for sep in summary.failed)
            raise PipelineError(f"Malformed alignment output at separation(s): {levels}")
        return summary
