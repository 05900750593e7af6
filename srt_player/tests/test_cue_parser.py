"""Tests for SRT parsing."""

import pytest

from srt_player.timeline import CueParser, load_srt_file, parse_srt
from srt_player.timeline.cue_parser import timestamp_to_seconds

from conftest import SAMPLE_SRT


class TestTimestampConversion:
    def test_zero(self):
        assert timestamp_to_seconds("00", "00", "00", "000") == 0.0

    def test_all_components(self):
        assert timestamp_to_seconds("01", "02", "03", "456") == pytest.approx(3723.456)


class TestParseWellFormed:
    """Tests for well-formed SRT input."""

    def test_sample_file(self):
        cues = parse_srt(SAMPLE_SRT)
        assert len(cues) == 3
        assert [c.text for c in cues] == ["First line", "Second line\ncontinues here", "Third line"]

    def test_exact_decimal_seconds(self):
        cues = parse_srt("1\n00:00:01,500 --> 00:00:03,000\nHello")
        assert cues[0].start == 1.5
        assert cues[0].end == 3.0

    def test_hours_and_minutes(self):
        cues = parse_srt("7\n01:02:03,004 --> 01:02:05,000\nLate")
        assert cues[0].start == pytest.approx(3723.004)
        assert cues[0].end == pytest.approx(3725.0)

    def test_missing_index_parses_identically(self):
        with_index = parse_srt("1\n00:00:01,500 --> 00:00:03,000\nHello\nWorld")
        without_index = parse_srt("00:00:01,500 --> 00:00:03,000\nHello\nWorld")
        assert len(with_index) == len(without_index) == 1
        assert with_index[0].to_dict() == without_index[0].to_dict()

    def test_flexible_arrow_whitespace(self):
        cues = parse_srt("1\n00:00:01,000-->00:00:02,000\nA\n\n2\n00:00:03,000   -->\t00:00:04,000\nB")
        assert [c.start for c in cues] == [1.0, 3.0]

    def test_index_with_no_text_keeps_empty_cue(self):
        cues = parse_srt("1\n00:00:01,000 --> 00:00:02,000")
        assert len(cues) == 1
        assert cues[0].text == ""

    def test_end_before_start_is_accepted(self):
        cues = parse_srt("00:00:05,000 --> 00:00:01,000\nBackwards")
        assert cues[0].start == 5.0
        assert cues[0].end == 1.0


class TestLineEndings:
    """Tests for line ending and whitespace normalization."""

    def test_leading_bom_in_decoded_text(self):
        text = (
            "\ufeff1\n00:00:01,000 --> 00:00:02,000\nHello\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\nWorld\n"
        )
        cues = parse_srt(text)
        assert [c.text for c in cues] == ["Hello", "World"]
        assert cues[0].start == 1.0

    def test_bom_without_index_line(self):
        cues = parse_srt("\ufeff00:00:01,000 --> 00:00:02,000\nHello")
        assert [c.text for c in cues] == ["Hello"]

    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_line_endings_equivalent(self, newline):
        cues = parse_srt(SAMPLE_SRT.replace("\n", newline))
        assert len(cues) == 3
        assert cues[1].text == "Second line\ncontinues here"

    def test_whitespace_only_separator_lines(self):
        text = "1\n00:00:00,000 --> 00:00:01,000\nA\n   \t\n2\n00:00:02,000 --> 00:00:03,000\nB"
        cues = parse_srt(text)
        assert [c.text for c in cues] == ["A", "B"]

    def test_lines_are_trimmed(self):
        cues = parse_srt("  1  \n  00:00:00,000 --> 00:00:01,000  \n   padded text   ")
        assert cues[0].text == "padded text"

    def test_many_blank_lines_between_blocks(self):
        text = "00:00:00,000 --> 00:00:01,000\nA\n\n\n\n\n00:00:02,000 --> 00:00:03,000\nB"
        assert len(parse_srt(text)) == 2


class TestMalformedInput:
    """Malformed blocks are dropped without affecting their neighbours."""

    @pytest.mark.parametrize("text", ["", None, "\n\n\n", "just some text", "1\n2\n3"])
    def test_no_valid_blocks_returns_empty(self, text):
        assert parse_srt(text) == []

    def test_single_line_block_skipped(self):
        text = "00:00:00,000 --> 00:00:01,000\n\n2\n00:00:02,000 --> 00:00:03,000\nKept"
        cues = parse_srt(text)
        assert len(cues) == 1
        assert cues[0].text == "Kept"

    def test_bad_timestamp_block_skipped(self):
        text = (
            "1\n00:00:00,000 --> 00:00:01,000\nGood one\n\n"
            "2\n0:00:02,000 --> 00:00:03,000\nOne-digit hour\n\n"
            "3\n00:00:04.000 --> 00:00:05,000\nDot separator\n\n"
            "4\n00:00:06,000 --> 00:00:07,000\nGood two"
        )
        cues = parse_srt(text)
        assert [c.text for c in cues] == ["Good one", "Good two"]

    def test_time_line_in_wrong_position_skipped(self):
        # Index line present, so the time line must be second
        text = "1\nSome text first\n00:00:01,000 --> 00:00:02,000"
        assert parse_srt(text) == []


class TestOrdering:
    def test_out_of_order_blocks_keep_source_order(self):
        text = (
            "1\n00:00:10,000 --> 00:00:12,000\nLater\n\n"
            "2\n00:00:01,000 --> 00:00:02,000\nEarlier"
        )
        cues = parse_srt(text)
        assert [c.text for c in cues] == ["Later", "Earlier"]

    def test_duplicates_are_kept(self):
        block = "00:00:01,000 --> 00:00:02,000\nSame"
        cues = parse_srt(f"{block}\n\n{block}")
        assert len(cues) == 2
        assert cues[0] is not cues[1]


class TestParserClass:
    def test_parser_is_reusable(self):
        parser = CueParser()
        assert len(parser.parse(SAMPLE_SRT)) == 3
        assert len(parser.parse(SAMPLE_SRT)) == 3


class TestLoadFile:
    def test_load_with_bom(self, tmp_path):
        path = tmp_path / "movie.srt"
        path.write_bytes(b"\xef\xbb\xbf" + SAMPLE_SRT.encode("utf-8"))
        cues = load_srt_file(path)
        assert len(cues) == 3
        assert cues[0].text == "First line"

    def test_undecodable_bytes_replaced(self, tmp_path):
        path = tmp_path / "latin.srt"
        path.write_bytes(b"1\n00:00:00,000 --> 00:00:01,000\ncaf\xe9")
        cues = load_srt_file(path)
        assert len(cues) == 1
        assert cues[0].text.startswith("caf")

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            load_srt_file(tmp_path / "nope.srt")
