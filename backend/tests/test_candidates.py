"""
Unit tests for import candidate normalization
"""

import pytest

from errors import ValidationError
from services.candidates import ImportMode, ManualEntry, normalize_candidates


@pytest.mark.unit
class TestNormalizeCandidates:
    """Test cases for normalize_candidates"""

    def test_comma_mode(self):
        result = normalize_candidates("comma", " kot, pies ,, dom , ")

        assert result == ["kot", "pies", "dom"]

    def test_lines_mode(self):
        result = normalize_candidates(ImportMode.LINES, "kot\r\n\n  pies  \ndom, ogród\n")

        assert result == ["kot", "pies", "dom, ogród"]

    def test_duplicates_within_batch_are_kept(self):
        assert normalize_candidates("comma", "kot, kot, Kot") == ["kot", "kot", "Kot"]

    def test_candidates_are_length_capped(self):
        result = normalize_candidates("comma", "a" * 150)

        assert result == ["a" * 100]

    def test_batch_of_fifty_is_accepted(self):
        raw = ",".join(f"słowo{i}" for i in range(50))

        assert len(normalize_candidates("comma", raw)) == 50

    def test_batch_of_fifty_one_is_rejected(self):
        raw = ",".join(f"słowo{i}" for i in range(51))

        with pytest.raises(ValidationError, match="Too many words"):
            normalize_candidates("comma", raw)

    @pytest.mark.parametrize(
        "mode,raw",
        [("lines", ""), ("comma", " , ,"), ("lines", "\n\n  \n"), ("comma", "")],
    )
    def test_empty_batch_is_rejected(self, mode, raw):
        with pytest.raises(ValidationError):
            normalize_candidates(mode, raw)

    def test_commas_are_plain_text_in_lines_mode(self):
        assert normalize_candidates("lines", " , ,") == [", ,"]

    def test_non_string_input_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_candidates("comma", ["kot"])

    def test_notes_mode_forwards_trimmed_blob(self):
        result = normalize_candidates("notes", "  kot - кот\n piesek?  ")

        assert result == "kot - кот\n piesek?"

    def test_notes_too_long(self):
        with pytest.raises(ValidationError, match="too long"):
            normalize_candidates("notes", "x" * 5001)

    def test_notes_at_limit(self):
        assert len(normalize_candidates("notes", "x" * 5000)) == 5000

    def test_empty_notes(self):
        with pytest.raises(ValidationError):
            normalize_candidates("notes", "   ")

    def test_manual_mode(self):
        result = normalize_candidates(
            "manual", {"polish": " kot ", "russian": "кот", "example": "Mam kota."}
        )

        assert result == ManualEntry(polish="kot", russian="кот", base_form="", example="Mam kota.")

    def test_manual_requires_both_fields(self):
        with pytest.raises(ValidationError, match="required"):
            normalize_candidates("manual", {"polish": "kot"})

    def test_unknown_mode(self):
        with pytest.raises(ValidationError, match="Unknown import mode"):
            normalize_candidates("csv", "kot")
