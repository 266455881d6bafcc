"""
Unit tests for the Polish card extractor
"""

import pytest

from conftest import ai_reply
from errors import ExtractionFormatError, ExtractionUnavailableError, ValidationError
from services.card_extractor import PolishCardExtractor


@pytest.mark.unit
class TestBatchTranslate:
    """Test cases for batch_translate"""

    def test_single_call_per_batch(self, extractor, ai_client):
        ai_client.complete.return_value = ai_reply(
            [
                {"polish": "kot", "russian": "кот", "baseForm": "kot", "example": "Mam kota."},
                {"polish": "pies", "russian": "собака"},
            ]
        )

        cards = extractor.batch_translate(["kot", "pies"])

        assert ai_client.complete.call_count == 1
        prompt = ai_client.complete.call_args[0][0]
        assert "- kot" in prompt
        assert "- pies" in prompt
        assert [card.polish for card in cards] == ["kot", "pies"]
        assert cards[0].example == "Mam kota."

    def test_defaults_applied(self, extractor, ai_client):
        ai_client.complete.return_value = ai_reply(
            [{"polish": " dom ", "russian": "дом", "baseForm": None}]
        )

        card = extractor.batch_translate(["dom"])[0]

        assert card.polish == "dom"
        assert card.base_form == "dom"
        assert card.example == ""
        assert card.original_text is None

    def test_fields_are_length_capped(self, extractor, ai_client):
        ai_client.complete.return_value = ai_reply(
            [{"polish": "a" * 600, "russian": "б" * 600, "example": "c" * 1200}]
        )

        card = extractor.batch_translate(["a"])[0]

        assert len(card.polish) == 500
        assert len(card.russian) == 500
        assert len(card.example) == 1000

    def test_code_fences_are_tolerated(self, extractor, ai_client):
        ai_client.complete.return_value = (
            '```json\n[{"polish": "kot", "russian": "кот"}]\n```'
        )

        assert extractor.batch_translate(["kot"])[0].russian == "кот"

    def test_empty_batch_skips_call(self, extractor, ai_client):
        assert extractor.batch_translate([]) == []
        ai_client.complete.assert_not_called()

    @pytest.mark.parametrize(
        "reply",
        [
            "Sorry, I cannot help with that.",
            ai_reply({"polish": "kot", "russian": "кот"}),
            ai_reply(["kot"]),
            ai_reply([{"polish": "kot"}]),
            ai_reply([{"polish": "", "russian": "кот"}]),
            ai_reply([{"polish": "kot", "russian": "кот", "example": 5}]),
        ],
    )
    def test_shape_mismatch_raises_format_error(self, extractor, ai_client, reply):
        ai_client.complete.return_value = reply

        with pytest.raises(ExtractionFormatError):
            extractor.batch_translate(["kot"])

    def test_unavailable_propagates(self, extractor, ai_client):
        ai_client.complete.side_effect = ExtractionUnavailableError("down")

        with pytest.raises(ExtractionUnavailableError):
            extractor.batch_translate(["kot"])
        assert ai_client.complete.call_count == 1


@pytest.mark.unit
class TestExtractFromNotes:
    """Test cases for extract_from_notes"""

    def test_full_response(self, extractor, ai_client):
        ai_client.complete.return_value = ai_reply(
            {
                "cards": [
                    {
                        "polish": "źdźbło",
                        "russian": "травинка",
                        "originalText": "zdzblo",
                    },
                    {"polish": "kot", "russian": "кот", "originalText": "kot"},
                ],
                "unrecognized": [{"text": "hmm", "note": "Not a word"}],
                "warnings": ["Corrected 'zdzblo' to 'źdźbło'", "  "],
            }
        )

        result = extractor.extract_from_notes("zdzblo - травинка, kot, hmm")

        assert ai_client.complete.call_count == 1
        assert "zdzblo - травинка" in ai_client.complete.call_args[0][0]
        assert result.cards[0].original_text == "zdzblo"
        assert result.cards[1].original_text is None
        assert result.unrecognized == [{"text": "hmm", "note": "Not a word"}]
        assert result.warnings == ["Corrected 'zdzblo' to 'źdźbło'"]

    def test_optional_lists_default_to_empty(self, extractor, ai_client):
        ai_client.complete.return_value = ai_reply({"cards": []})

        result = extractor.extract_from_notes("nic")

        assert result.cards == []
        assert result.unrecognized == []
        assert result.warnings == []

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {"words": []},
            {"cards": {}},
            {"cards": [], "unrecognized": "hmm"},
            {"cards": [], "unrecognized": [{"note": "x"}]},
            {"cards": [], "warnings": [1]},
        ],
    )
    def test_shape_mismatch_raises_format_error(self, extractor, ai_client, payload):
        ai_client.complete.return_value = ai_reply(payload)

        with pytest.raises(ExtractionFormatError):
            extractor.extract_from_notes("notatki")


@pytest.mark.unit
class TestReadingJobs:
    """Test cases for text generation and word lookup"""

    def test_generate_text(self, extractor, ai_client):
        ai_client.complete.return_value = "  Ala ma kota.  "

        assert extractor.generate_text("zwierzęta") == "Ala ma kota."
        assert '"zwierzęta"' in ai_client.complete.call_args[0][0]

    def test_generate_text_requires_topic(self, extractor, ai_client):
        with pytest.raises(ValidationError):
            extractor.generate_text("   ")
        ai_client.complete.assert_not_called()

    @pytest.mark.parametrize("reply", ["", " \n\t "])
    def test_generate_text_empty_reply(self, extractor, ai_client, reply):
        ai_client.complete.return_value = reply

        with pytest.raises(ExtractionFormatError):
            extractor.generate_text("kawa")

    def test_translate_word(self, extractor, ai_client):
        ai_client.complete.return_value = ai_reply(
            {"translation": "кошку", "baseForm": "kot", "partOfSpeech": "noun"}
        )

        result = extractor.translate_word("kota", "Mam kota.")

        assert result == {
            "translation": "кошку",
            "baseForm": "kot",
            "partOfSpeech": "noun",
            "note": "",
        }
        assert "Mam kota." in ai_client.complete.call_args[0][0]

    def test_translate_word_context_is_truncated(self, extractor, ai_client):
        ai_client.complete.return_value = ai_reply({"translation": "кот"})

        extractor.translate_word("kot", "x" * 3000)

        prompt = ai_client.complete.call_args[0][0]
        assert "x" * 2000 in prompt
        assert "x" * 2001 not in prompt

    def test_translate_word_unstructured_reply(self, extractor, ai_client):
        ai_client.complete.return_value = "кот"

        result = extractor.translate_word("kot")

        assert result["translation"] == "кот"
        assert result["baseForm"] == "kot"

    def test_translate_word_requires_word(self, extractor):
        with pytest.raises(ValidationError):
            extractor.translate_word("")


@pytest.mark.unit
def test_extractor_uses_given_client(ai_client):
    extractor = PolishCardExtractor(ai_client)

    assert extractor.ai_client is ai_client
