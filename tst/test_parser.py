"""Tests for .dat format detection and record parsing."""

from decimal import Decimal

import pytest

from iom_converter.errors import (
    FieldConversionError,
    MalformedPayload,
    RowShapeError,
    UnrecognizedFormat,
)
from iom_converter.models import DataFormat
from iom_converter.parser import (
    FORMAT_LAYOUTS,
    decode_row,
    detect_format,
    extract_payload,
    parse,
    split_rows,
    to_decimal,
    to_int,
)


class TestDetectFormat:
    def test_new_format(self, new_format_text):
        assert detect_format(new_format_text) == DataFormat.NEW

    def test_old_format(self, old_format_text):
        assert detect_format(old_format_text) == DataFormat.OLD

    def test_unknown_tag(self):
        with pytest.raises(UnrecognizedFormat):
            detect_format("Grapher v2.0\n[[1, 2, 3, 4, x]]")

    def test_tag_must_be_at_start(self, new_format_text):
        with pytest.raises(UnrecognizedFormat):
            detect_format("\n" + new_format_text)

    def test_layout_sizes(self):
        assert len(FORMAT_LAYOUTS[DataFormat.NEW]) == 6
        assert len(FORMAT_LAYOUTS[DataFormat.OLD]) == 5


class TestExtractPayload:
    def test_between_first_and_last_delimiters(self):
        assert extract_payload("tag [[1, 2], [3, 4]] trailer") == "1, 2], [3, 4"

    def test_empty_payload(self):
        assert extract_payload("tag [[]]") == ""

    def test_missing_start(self):
        with pytest.raises(MalformedPayload):
            extract_payload("tag 1, 2]]")

    def test_missing_end(self):
        with pytest.raises(MalformedPayload):
            extract_payload("tag [[1, 2")

    def test_end_before_start(self):
        with pytest.raises(MalformedPayload):
            extract_payload("tag ]] [[1, 2")


class TestSplitRows:
    def test_rows_and_fields(self):
        rows = split_rows("1, 2, 3], [4, 5, 6")
        assert rows == [["1", "2", "3"], ["4", "5", "6"]]

    def test_empty_payload_has_no_rows(self):
        assert split_rows("") == []


class TestConverters:
    def test_int_with_whitespace_and_sign(self):
        assert to_int(" 42 ") == 42
        assert to_int("-7") == -7

    @pytest.mark.parametrize("token", ["", "4.5", "abc", "1_000"])
    def test_int_rejects(self, token):
        with pytest.raises(ValueError):
            to_int(token)

    def test_decimal_keeps_digits(self):
        assert str(to_decimal("73.0")) == "73.0"
        assert str(to_decimal("65.10")) == "65.10"

    @pytest.mark.parametrize("token", ["NaN", "Infinity", "1e3", "", "7x"])
    def test_decimal_rejects(self, token):
        with pytest.raises(ValueError):
            to_decimal(token)


class TestDecodeRow:
    def test_new_format_row(self):
        fields = ["#TS: 250", "#EDR: 6", "#DETECT: 0", "#rate: 73.0", "#Lable: calm", "#coh: 4"]
        record = decode_row(fields, DataFormat.NEW, 0)

        assert record.timestamp == 250
        assert record.electrodermal_response == 6
        assert record.detect == 0
        assert record.heart_rate == Decimal("73.0")
        assert str(record.heart_rate) == "73.0"
        assert record.label == "calm"
        assert record.coherence == 4
        assert record.is_raw

    def test_marker_removed_anywhere_in_token(self):
        fields = ["  #TS: 5", "#EDR: 6", "#DETECT: 0", "#rate: 1.5", "a#Lable: b", "#coh: 1"]
        record = decode_row(fields, DataFormat.NEW, 0)
        assert record.timestamp == 5
        assert record.label == "ab"

    def test_new_format_label_is_not_trimmed(self):
        fields = ["#TS: 1", "#EDR: 1", "#DETECT: 1", "#rate: 1", "#Lable:  padded ", "#coh: 1"]
        record = decode_row(fields, DataFormat.NEW, 0)
        assert record.label == " padded "

    def test_old_format_row(self):
        record = decode_row([" 1000", "12 ", "0", " 64.25", " start "], DataFormat.OLD, 0)

        assert record.timestamp == 1000
        assert record.heart_rate == Decimal("64.25")
        assert record.label == "start"
        assert record.coherence == 0

    def test_extra_fields_ignored(self):
        record = decode_row(["1", "2", "3", "4.0", "x", "extra"], DataFormat.OLD, 0)
        assert record.label == "x"

    def test_too_few_fields(self):
        with pytest.raises(RowShapeError) as exc_info:
            decode_row(["#TS: 1", "#EDR: 2"], DataFormat.NEW, 3)
        assert exc_info.value.row_index == 3
        assert exc_info.value.expected == 6
        assert exc_info.value.actual == 2

    def test_bad_field(self):
        with pytest.raises(FieldConversionError) as exc_info:
            decode_row(["1", "2", "3", "fast", "x"], DataFormat.OLD, 7)
        error = exc_info.value
        assert error.field == "heart_rate"
        assert error.token == "fast"
        assert error.row_index == 7
        assert "heart_rate" in str(error)


class TestParse:
    def test_parse_new_format(self, new_format_text):
        records = parse(new_format_text)

        assert [r.timestamp for r in records] == [0, 250]
        assert [r.coherence for r in records] == [3, 4]
        assert [str(r.heart_rate) for r in records] == ["72.5", "73.0"]
        assert all(r.absolute_time is None for r in records)

    def test_parse_old_format(self, old_format_text):
        records = parse(old_format_text)

        assert [r.timestamp for r in records] == [1000, 1250, 1500]
        assert all(r.coherence == 0 for r in records)
        assert records[1].label == ""
        assert str(records[1].heart_rate) == "65.10"

    def test_empty_payload_yields_no_records(self):
        assert parse("Healing Rhythms Event Data\n[[]]") == []

    def test_unknown_format(self):
        with pytest.raises(UnrecognizedFormat):
            parse("Unknown device\n[[1, 2, 3, 4, x]]")

    def test_missing_payload(self):
        with pytest.raises(MalformedPayload):
            parse("Grapher v1.0 Quarter Sec Linear\nno data")

    def test_bad_row_reports_index(self):
        text = "Healing Rhythms Event Data\n[[1, 2, 3, 4.0, a], [2, 3, 4]]"
        with pytest.raises(RowShapeError) as exc_info:
            parse(text)
        assert exc_info.value.row_index == 1

    def test_preserves_source_order(self):
        text = "Healing Rhythms Event Data\n[[30, 0, 0, 1, a], [10, 0, 0, 1, b], [20, 0, 0, 1, c]]"
        assert [r.label for r in parse(text)] == ["a", "b", "c"]
