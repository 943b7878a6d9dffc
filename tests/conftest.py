"""Pytest configuration for blastoff tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def reset_logging_after_test():
    """Reset blastoff logger state after each test.

    setup_logging() sets propagate=False, which would break caplog in later
    tests.
    """
    yield
    app_logger = logging.getLogger("blastoff")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


def _sequence(length: int, offset: int = 0) -> str:
    bases = "ACGT"
    return "".join(bases[(i * 7 + offset) % 4] for i in range(length))


@pytest.fixture
def reference_sequences():
    """Three contigs of very different length."""
    return {
        "chr1": _sequence(6000),
        "chr2": _sequence(3000, offset=1),
        "tiny": _sequence(250, offset=2),
    }


@pytest.fixture
def reference_fasta(tmp_path, reference_sequences):
    path = tmp_path / "A2.seq"
    with open(path, "w") as handle:
        for name, seq in reference_sequences.items():
            handle.write(f">{name} some description\n")
            for i in range(0, len(seq), 60):
                handle.write(seq[i : i + 60] + "\n")
    return path


@pytest.fixture
def assembly_fasta(tmp_path):
    path = tmp_path / "P1_contigs.fa"
    path.write_text(">ctg1\nACGTACGTACGT\n")
    return path


def _make_record(
    query_id: str,
    target: str = "ctg1",
    length: int = 100,
    strand: str = "+1",
    start: int = 1,
    end: int = 100,
) -> str:
    """Build a 22-field qstaq.pl record."""
    fields = [
        query_id, target, "1e-50", "1", "500", "500", str(length), "100", "100", "100",
        "100.0", "100.0", "0", "0", "0", "0", strand, "1", "100", "+1", str(start), str(end),
    ]
    return "\t".join(fields)


@pytest.fixture
def make_record():
    return _make_record

