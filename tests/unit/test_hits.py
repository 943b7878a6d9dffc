"""Tests for aligner record parsing."""

import pytest

from blastoff.core.hits import Side, iter_hits, parse, parse_query_id
from blastoff.exceptions import MalformedRecordError


class TestParseQueryId:
    def test_left_and_right(self):
        assert parse_query_id("L-7") == (Side.LEFT, 7)
        assert parse_query_id("R-1234") == (Side.RIGHT, 1234)

    @pytest.mark.parametrize("query_id", ["X-5", "L5", "L-", "L-5a", "l-5", "-5", "LR-5"])
    def test_malformed_ids(self, query_id):
        with pytest.raises(MalformedRecordError):
            parse_query_id(query_id)


class TestParse:
    def test_fields_are_taken_by_position(self, make_record):
        hit = parse(make_record("R-12", target="scaffold_9", length=98, strand="-1", start=510, end=413))

        assert hit.pair_id == 12
        assert hit.side is Side.RIGHT
        assert hit.parent == "scaffold_9"
        assert hit.strand == "-1"
        assert hit.start == 510
        assert hit.end == 413
        assert hit.aligned_length == 98

    def test_invalid_side_tag_raises(self, make_record):
        with pytest.raises(MalformedRecordError):
            parse(make_record("X-5"))

    def test_short_row_raises(self, make_record):
        record = "\t".join(make_record("L-1").split("\t")[:21])
        with pytest.raises(MalformedRecordError, match="22 fields"):
            parse(record)

    def test_non_numeric_coordinate_raises(self, make_record):
        fields = make_record("L-1").split("\t")
        fields[20] = "start"
        with pytest.raises(MalformedRecordError):
            parse("\t".join(fields))

    def test_whitespace_separated(self, make_record):
        hit = parse(make_record("L-3").replace("\t", "   "))
        assert hit.pair_id == 3


class TestIterHits:
    def test_drops_short_alignments(self, make_record):
        records = [
            make_record("L-1", length=95),
            make_record("R-1", length=94),
            make_record("L-2", length=100),
        ]
        hits = list(iter_hits(records))
        assert [(h.side, h.pair_id) for h in hits] == [(Side.LEFT, 1), (Side.LEFT, 2)]

    def test_custom_threshold(self, make_record):
        hits = list(iter_hits([make_record("L-1", length=50)], min_alignment_length=40))
        assert len(hits) == 1

    def test_skips_blank_lines(self, make_record):
        hits = list(iter_hits(["\n", make_record("L-1") + "\n", "   \n"]))
        assert len(hits) == 1

    def test_malformed_record_stops_stream(self, make_record):
        stream = iter_hits([make_record("L-1"), make_record("Q-2")])
        assert next(stream).pair_id == 1
        with pytest.raises(MalformedRecordError):
            next(stream)
