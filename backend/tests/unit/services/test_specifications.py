"""
Unit Tests for specification rows and label formatting
"""
from app.services.specifications import (
    DEFAULT_LIBRARY_ATTRIBUTES,
    SpecificationRow,
    format_location,
    format_specifications,
    parse_specifications,
    to_title_case,
)


def _pairs(rows):
    return [(row.attribute, row.value) for row in rows]


class TestParsePipeForm:
    """Pipe-separated specifications"""

    def test_colon_and_equals_pairs(self):
        rows = parse_specifications("Author: Donald Knuth | Publisher = Addison-Wesley")
        assert _pairs(rows) == [("Author", "Donald Knuth"), ("Publisher", "Addison-Wesley")]

    def test_attribute_without_value(self):
        rows = parse_specifications("ISBN | Pages: 650")
        assert _pairs(rows) == [("ISBN", ""), ("Pages", "650")]

    def test_empty_segments_are_skipped(self):
        rows = parse_specifications(" | Edition: 3rd | | ")
        assert _pairs(rows) == [("Edition", "3rd")]

    def test_value_may_contain_separators(self):
        rows = parse_specifications("Range: 2cm - 400cm | Ratio: 1:2")
        assert _pairs(rows) == [("Range", "2cm - 400cm"), ("Ratio", "1:2")]


class TestParseLegacyForm:
    """Free text split on full stops, semicolons and newlines"""

    def test_mixed_patterns(self):
        rows = parse_specifications("Voltage: 5V; Current = 2A\nOperating temperature 85C")
        assert _pairs(rows) == [
            ("Voltage", "5V"),
            ("Current", "2A"),
            ("Operating temperature", "85C"),
        ]

    def test_unmatched_text_becomes_description(self):
        rows = parse_specifications("Breadboard")
        assert _pairs(rows) == [("Description", "Breadboard")]

    def test_blank_text_has_no_rows(self):
        assert parse_specifications("") == []
        assert parse_specifications(None) == []


class TestPadding:
    """Rows padded for the editing form"""

    def test_pads_with_default_attributes_then_blanks(self):
        rows = parse_specifications("", min_rows=6)
        assert [row.attribute for row in rows] == list(DEFAULT_LIBRARY_ATTRIBUTES[:4]) + ["", ""]
        assert all(row.value == "" for row in rows)

    def test_padding_continues_after_parsed_rows(self):
        rows = parse_specifications("Author: Knuth", min_rows=6)
        assert [row.attribute for row in rows] == ["Author", "Publisher", "Edition", "ISBN", "", ""]

    def test_no_padding_when_enough_rows(self):
        rows = parse_specifications("A: 1 | B: 2 | C: 3", min_rows=2)
        assert len(rows) == 3


class TestFormatSpecifications:
    """Rows back to stored text"""

    def test_joins_rows(self):
        rows = [SpecificationRow("Author", "Knuth"), SpecificationRow("Edition", "3rd")]
        assert format_specifications(rows) == "Author: Knuth. Edition: 3rd"

    def test_drops_blank_rows(self):
        rows = [SpecificationRow("", ""), SpecificationRow("Pages", "650"), SpecificationRow(" ", " ")]
        assert format_specifications(rows) == "Pages: 650"

    def test_legacy_text_survives_a_round_trip(self):
        text = "Voltage: 5V. Current: 2A"
        assert format_specifications(parse_specifications(text)) == text


class TestFormatLocation:
    """Shelf label normalisation"""

    def test_keywords_upper_cased_numbers_padded(self):
        assert format_location("library rack 3") == "LIBRARY RACK 03"

    def test_other_words_title_cased(self):
        assert format_location("electronics lab room 12 shelf b") == "Electronics Lab ROOM 12 Shelf B"

    def test_collapses_whitespace(self):
        assert format_location("  rack   7 ") == "RACK 07"

    def test_only_ascii_digits_padded(self):
        assert format_location("room \u00b2") == "ROOM \u00b2"
        assert format_location("lab \u0663") == "Lab \u0663"

    def test_none(self):
        assert format_location(None) is None


class TestTitleCase:

    def test_title_case(self):
        assert to_title_case("sensors and MODULES") == "Sensors And Modules"
