"""Tests for mapping findings onto displayed-text ranges."""

import json

import pytest

from lens_core.findings import EmptyValueFinding, InvalidNumericFinding
from lens_core.result_locator import TextRange, key_token, locate, locate_finding, text_index_for_offset, utf16_offset


def _occurrences(text, token):
    found = []
    pos = text.find(token)
    while pos >= 0:
        found.append(pos)
        pos = text.find(token, pos + len(token))
    return found


PRETTY = json.dumps(
    [{"id": 1, "name": ""}, {"id": 2, "name": "x"}, {"id": 3, "name": None}],
    indent=2,
)


class TestLocate:
    @pytest.mark.parametrize("index", [0, 1, 2])
    def test_returns_nth_quoted_key(self, index):
        starts = _occurrences(PRETTY, '"name"')
        got = locate(PRETTY, index, "name")
        assert got == TextRange(starts[index], starts[index] + len('"name"'))
        assert PRETTY[got.start:got.end] == '"name"'

    def test_not_found_when_too_few_occurrences(self):
        assert locate(PRETTY, 3, "name") is None

    def test_not_found_for_missing_key(self):
        assert locate(PRETTY, 0, "price") is None

    def test_negative_index_and_empty_text(self):
        assert locate(PRETTY, -1, "name") is None
        assert locate("", 0, "name") is None

    def test_matches_whole_quoted_token_only(self):
        text = '{"username": "a", "name": "b"}'
        got = locate(text, 0, "name")
        assert got.start == text.index('"name"')

    def test_key_is_literal_not_a_pattern(self):
        text = '{"a.b": 1, "axb": 2}'
        assert locate(text, 0, "a.b") == TextRange(1, 6)
        assert locate(text, 1, "a.b") is None

    def test_quote_and_backslash_keys_use_json_escapes(self):
        key = 'say "hi"\\now'
        text = json.dumps({key: ""}, indent=2)
        got = locate(text, 0, key)
        assert got is not None
        assert text[got.start:got.end] == key_token(key)

    def test_non_ascii_key(self):
        text = json.dumps([{"prix": 1, "città": ""}], indent=2, ensure_ascii=False)
        got = locate(text, 0, "città")
        assert text[got.start:got.end] == '"città"'

    def test_counts_non_overlapping_occurrences(self):
        text = '""""'
        # The token for the empty key is two quote characters.
        assert locate(text, 0, "") == TextRange(0, 2)
        assert locate(text, 1, "") == TextRange(2, 4)
        assert locate(text, 2, "") is None


class TestNestedDuplicateKeys:
    def test_nested_key_shifts_the_ordinal(self):
        # The engine numbers top-level objects; the nested "id" inside object 0
        # is also counted, so object 1's finding lands on object 0's own "id".
        data = [{"meta": {"id": 9}, "id": "a"}, {"id": "b"}]
        text = json.dumps(data, indent=2)
        got = locate(text, 1, "id")
        starts = _occurrences(text, '"id"')
        assert got.start == starts[1]
        line = text[got.start:text.index("\n", got.start)]
        assert line == '"id": "a"'

    def test_without_nesting_ordinal_matches_object(self):
        data = [{"id": "a"}, {"id": "b"}]
        text = json.dumps(data, indent=2)
        got = locate(text, 1, "id")
        line = text[got.start:text.index("\n", got.start)]
        assert line == '"id": "b"'


class TestLocateFinding:
    def test_empty_and_numeric_findings(self):
        assert locate_finding(PRETTY, EmptyValueFinding(1, "name")) == locate(PRETTY, 1, "name")
        assert locate_finding(PRETTY, InvalidNumericFinding(0, "id", "abc")) == locate(PRETTY, 0, "id")


def test_text_index_for_offset():
    assert text_index_for_offset(0) == "1.0+0c"
    assert text_index_for_offset(42) == "1.0+42c"
    assert text_index_for_offset(-3) == "1.0+0c"


class TestUtf16Offset:
    def test_bmp_text_is_unchanged(self):
        text = '{"name": "café"}'
        assert utf16_offset(text, len(text)) == len(text)

    def test_astral_characters_count_twice(self):
        text = '[{"note": "\U0001F600\U0001F600", "id": 1}]'
        found = locate(text, 0, "id")
        assert text[found.start:found.end] == '"id"'
        assert utf16_offset(text, found.start) == found.start + 2
        assert utf16_offset(text, 5) == 5

    def test_negative_offset_clamped(self):
        assert utf16_offset("\U0001F600", -4) == 0
