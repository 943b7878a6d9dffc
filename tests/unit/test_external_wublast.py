"""Tests for WU-BLAST wrappers."""

from pathlib import Path
from unittest.mock import patch

import pytest

from blastoff.exceptions import ExternalToolError
from blastoff.external.base import ExternalTool
from blastoff.external.wublast import QStaq, XdFormat, XdGet


@pytest.fixture(autouse=True)
def tools_on_path():
    with patch("blastoff.external.base.shutil.which", side_effect=lambda name: f"/opt/wublast/{name}"), \
            patch.object(ExternalTool, "_check_version") as mock_version:
        yield mock_version


class TestXdFormat:
    def test_initialization_checks_version(self, tools_on_path):
        tool = XdFormat()
        assert tool.tool_name == "xdformat"
        assert tool.path == "/opt/wublast/xdformat"
        tools_on_path.assert_called_once()

    @patch.object(XdFormat, "run", return_value="")
    def test_indexes_missing_database(self, mock_run, tmp_path):
        fasta = tmp_path / "A.seq.gz"
        fasta.write_text("")

        XdFormat().ensure_database(fasta)

        mock_run.assert_called_once_with(["xdformat", "-n", "-I", str(fasta)])

    @patch.object(XdFormat, "run")
    def test_skips_existing_index(self, mock_run, tmp_path):
        fasta = tmp_path / "A.seq.gz"
        fasta.write_text("")
        (tmp_path / "A.seq.gz.xni").write_text("index")

        XdFormat().ensure_database(fasta)

        mock_run.assert_not_called()

    @patch.object(XdFormat, "run", return_value="")
    def test_empty_index_is_rebuilt(self, mock_run, tmp_path):
        fasta = tmp_path / "A.seq.gz"
        (tmp_path / "A.seq.gz.xni").write_text("")

        XdFormat().ensure_database(fasta)

        mock_run.assert_called_once()


class TestXdGet:
    def test_no_version_floor(self, tools_on_path):
        XdGet(Path("A.seq.gz"))
        tools_on_path.assert_not_called()

    @patch.object(XdGet, "run", return_value=">chr1 range 11-20\nACGTA\nCGTAC\n")
    def test_fetch_strips_header_and_newlines(self, mock_run):
        seq = XdGet(Path("A.seq.gz")).fetch("chr1", 11, 20)

        assert seq == "ACGTACGTAC"
        mock_run.assert_called_once_with(
            ["xdget", "-n", "-a", "11", "-b", "20", "A.seq.gz", "chr1"]
        )

    @patch.object(XdGet, "run", side_effect=ExternalToolError("xdget failed"))
    def test_fetch_failure_propagates(self, mock_run):
        with pytest.raises(ExternalToolError):
            XdGet(Path("A.seq.gz")).fetch("chr1", 1, 10)


class TestQStaq:
    def test_command(self):
        cmd = QStaq().command(Path("P1_contigs.fa.gz"), Path("frags"), min_score=90)
        assert cmd == ["qstaq.pl", "-h", "0", "-s", "90", "P1_contigs.fa.gz", "frags"]

    @patch.object(QStaq, "stream")
    def test_stream_hits_uses_command(self, mock_stream):
        mock_stream.return_value.__enter__.return_value = iter(["line\n"])

        with QStaq().stream_hits(Path("asm"), Path("frags")) as lines:
            assert list(lines) == ["line\n"]

        assert mock_stream.call_args[0][0][0] == "qstaq.pl"

    @patch.object(QStaq, "run", return_value="L-1 ctg1\n")
    def test_align_to_file_writes_output(self, mock_run, tmp_path):
        out = tmp_path / "out" / "x.blast.out"

        QStaq().align_to_file(Path("asm"), Path("frags"), out)

        assert out.read_text() == "L-1 ctg1\n"
        assert not (tmp_path / "out" / "x.blast.out.partial").exists()

    @patch.object(QStaq, "run", side_effect=ExternalToolError("qstaq.pl failed"))
    def test_failed_alignment_leaves_nothing_to_reuse(self, mock_run, tmp_path):
        out = tmp_path / "x.blast.out"

        with pytest.raises(ExternalToolError):
            QStaq().align_to_file(Path("asm"), Path("frags"), out)

        assert not out.exists()

    @patch.object(QStaq, "run")
    def test_align_to_file_reuses_existing(self, mock_run, tmp_path):
        out = tmp_path / "x.blast.out"
        out.write_text("saved\n")

        QStaq().align_to_file(Path("asm"), Path("frags"), out)

        mock_run.assert_not_called()
        assert out.read_text() == "saved\n"
