"""Unit tests for the ingredients/steps line codec."""

import pytest

from src.orchestrator.lines import decode_lines, encode_lines


class TestEncodeLines:
    def test_joins_with_newlines(self):
        assert encode_lines(["2 tortillas", "1 taza frijoles"]) == "2 tortillas\n1 taza frijoles"

    def test_strips_and_drops_blank_items(self):
        assert encode_lines(["  Mix ", "", "   ", "Fry"]) == "Mix\nFry"

    def test_empty_list(self):
        assert encode_lines([]) == ""


class TestDecodeLines:
    def test_splits_lines(self):
        assert decode_lines("Mix\nFry") == ["Mix", "Fry"]

    @pytest.mark.parametrize("text", ["", None, "\n\n  \n"])
    def test_empty_text(self, text):
        assert decode_lines(text) == []

    def test_windows_line_endings(self):
        assert decode_lines("Mix\r\nFry\r\n") == ["Mix", "Fry"]

    def test_decoded_text_encodes_back(self):
        """Text stored by a save decodes to the list that produced it."""
        items = ["Calentar tortillas", "Rellenar con frijoles"]
        assert decode_lines(encode_lines(items)) == items
