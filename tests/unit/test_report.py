"""Tests for report sinks."""

import io

import pandas as pd

from blastoff.core.evaluator import ConcordanceResult
from blastoff.core.report import CsvReportSink, TextReportSink, csv_report_name


class TestTextReportSink:
    def test_rows_are_tab_separated_with_four_decimals(self):
        stream = io.StringIO()
        sink = TextReportSink(stream)

        sink.emit(ConcordanceResult(100, 97, 100))
        sink.emit(ConcordanceResult(200, 1, 3))
        sink.close()

        assert stream.getvalue() == "100\t0.9700\n200\t0.3333\n"


class TestCsvReportName:
    def test_with_assembly_tag(self, tmp_path):
        name = csv_report_name("P1", "contigs", tmp_path / "P1_contigs.fa.gz", 3)
        assert name == "P1_contigs_3_paired_end_fragments.csv"

    def test_without_assembly_tag(self, tmp_path):
        name = csv_report_name(None, None, tmp_path / "assembly.fa", 1)
        assert name == "assembly.fa_1_paired_end_fragments.csv"


class TestCsvReportSink:
    def _run(self, path, ref_tag, counts, samples=1000):
        sink = CsvReportSink(path, "P1", samples, ref_tag, separations=[100, 200])
        for separation, count in counts.items():
            sink.emit(ConcordanceResult(separation, count, samples))
        sink.close()

    def test_creates_table_with_all_genome_columns(self, tmp_path):
        path = tmp_path / "report.csv"
        self._run(path, "A", {100: 950, 200: 940})

        table = pd.read_csv(path)
        assert list(table.columns) == [
            "Assembly", "Samples",
            "A_100", "A_200", "A1_100", "A1_200", "A2_100", "A2_200",
        ]
        assert len(table) == 1
        assert table.loc[0, "Assembly"] == "P1"
        assert table.loc[0, "A_100"] == 950
        assert pd.isna(table.loc[0, "A1_100"])

    def test_runs_against_other_genomes_fill_the_same_row(self, tmp_path):
        path = tmp_path / "report.csv"
        self._run(path, "A", {100: 950, 200: 940})
        self._run(path, "A1", {100: 900, 200: 880})
        self._run(path, "A2", {100: 800, 200: 790})

        table = pd.read_csv(path)
        assert len(table) == 1
        row = table.iloc[0]
        assert (row["A_100"], row["A1_200"], row["A2_100"]) == (950, 880, 800)

    def test_different_sample_size_gets_its_own_row(self, tmp_path):
        path = tmp_path / "report.csv"
        self._run(path, "A", {100: 950})
        self._run(path, "A", {100: 95}, samples=100)

        table = pd.read_csv(path)
        assert sorted(table["Samples"]) == [100, 1000]

    def test_no_results_writes_nothing(self, tmp_path):
        path = tmp_path / "report.csv"
        CsvReportSink(path, "P1", 1000, "A", [100]).close()
        assert not path.exists()

    def test_unknown_reference_tag_adds_columns(self, tmp_path):
        path = tmp_path / "report.csv"
        self._run(path, "B7", {100: 10})

        table = pd.read_csv(path)
        assert "B7_100" in table.columns
        assert table.loc[0, "B7_100"] == 10
