"""
Polish Card Extraction Service
Turns learner input into flashcard proposals using the AI backend.
"""

from dataclasses import dataclass, field
import json
import logging
import re
from typing import Any

import config
from errors import ExtractionFormatError, ValidationError
from services.candidates import sanitize_string
from services.proposal import ProposedCard

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

GENERATE_PROMPT = """Write a short text in Polish (100-150 words) on the topic: "{topic}".

Requirements:
- Difficulty level: A2-B1 (simple sentences, basic vocabulary)
- The text must be coherent and interesting
- Use everyday vocabulary
- Avoid complex grammatical constructions

Return ONLY the Polish text, without translation or comments."""

TRANSLATE_PROMPT = """{context_block}Translate from Polish to Russian: "{word}"

Response format (JSON):
{{
  "translation": "translation",
  "baseForm": "dictionary form of the word (if it is an inflected verb/noun)",
  "partOfSpeech": "part of speech",
  "note": "short explanation if needed (optional)"
}}

Return ONLY JSON without any additional text."""

BATCH_TRANSLATE_PROMPT = """You are helping a Russian speaker learn Polish.
For every Polish word or phrase below create a flashcard.

Words:
{words}

For each item return:
- "polish": the word as given (fix obvious typos only)
- "russian": Russian translation
- "baseForm": dictionary form (infinitive for verbs, nominative singular for nouns)
- "example": a short simple Polish example sentence

Return ONLY a JSON array of objects with exactly these keys, one object per word, in the same order."""

NOTES_PROMPT = """You are helping a Russian speaker learn Polish. Below are the learner's messy notes.
They may mix Polish words, Russian glosses, typos and unrelated text.

Notes:
\"\"\"
{notes}
\"\"\"

Tasks:
1. Find the Polish words and phrases, even when misspelled.
2. Correct their spelling.
3. Translate each into Russian and give its dictionary form and a short example sentence.
4. Anything that is not Polish or is too ambiguous to translate goes to "unrecognized" with a short reason.
5. Explain every spelling correction you made in "warnings".

Response format (JSON):
{{
  "cards": [
    {{"polish": "corrected form", "russian": "translation", "baseForm": "dictionary form",
      "example": "example sentence", "originalText": "spelling as written in the notes"}}
  ],
  "unrecognized": [{{"text": "token as written", "note": "why it was not recognized"}}],
  "warnings": ["explanation of a correction"]
}}

Return ONLY JSON without any additional text."""


@dataclass(frozen=True)
class NotesExtraction:
    cards: list
    unrecognized: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


def _strip_fences(response: str) -> str:
    text = response.strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def _parse_json(response: str) -> Any:
    try:
        return json.loads(_strip_fences(response))
    except json.JSONDecodeError as json_err:
        logger.error(f"JSON decode error: {json_err}; raw response: {response[:500]}")
        raise ExtractionFormatError("Failed to parse AI response", response)


def _optional_string(item: dict, key: str, raw_response: str) -> Any:
    value = item.get(key)
    if value is not None and not isinstance(value, str):
        raise ExtractionFormatError(f"Field '{key}' must be a string", raw_response)
    return value


def _parse_card(item: Any, raw_response: str, allow_original: bool = False) -> ProposedCard:
    if not isinstance(item, dict):
        raise ExtractionFormatError("Card entry is not an object", raw_response)

    polish = item.get("polish")
    russian = item.get("russian")
    if not isinstance(polish, str) or not polish.strip():
        raise ExtractionFormatError("Card entry is missing 'polish'", raw_response)
    if not isinstance(russian, str) or not russian.strip():
        raise ExtractionFormatError("Card entry is missing 'russian'", raw_response)

    return ProposedCard.create(
        polish,
        russian,
        _optional_string(item, "baseForm", raw_response),
        _optional_string(item, "example", raw_response),
        _optional_string(item, "originalText", raw_response) if allow_original else None,
    )


def _parse_list(data: dict, key: str, raw_response: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ExtractionFormatError(f"'{key}' must be a list", raw_response)
    return value


class PolishCardExtractor:
    """
    Wraps the AI backend behind the extraction jobs of the import pipeline
    (batch translation and notes extraction) and the reading view (text
    generation and word lookup).

    Responses of the extraction jobs are parsed strictly: anything that does
    not match the expected shape raises ``ExtractionFormatError``.
    """

    def __init__(self, ai_client):
        self.ai_client = ai_client

    def generate_text(self, topic: Any) -> str:
        topic = sanitize_string(topic, config.MAX_TOPIC_LENGTH)
        if not topic:
            raise ValidationError("Topic is required")

        text = self.ai_client.complete(
            GENERATE_PROMPT.format(topic=topic), config.GENERATE_MAX_TOKENS
        ).strip()
        if not text:
            raise ExtractionFormatError("AI backend returned an empty text")
        return text

    def translate_word(self, word: Any, context: Any = "") -> dict:
        word = sanitize_string(word, config.MAX_LOOKUP_LENGTH)
        context = sanitize_string(context, config.MAX_CONTEXT_LENGTH)
        if not word:
            raise ValidationError("Word is required")

        context_block = f'Context (full text): "{context}"\n\n' if context else ""
        response = self.ai_client.complete(
            TRANSLATE_PROMPT.format(context_block=context_block, word=word),
            config.TRANSLATE_MAX_TOKENS,
        )

        try:
            parsed = json.loads(_strip_fences(response))
        except json.JSONDecodeError:
            parsed = None

        if not isinstance(parsed, dict) or not isinstance(parsed.get("translation"), str):
            # Lookups are display only, so an unstructured reply is still useful
            logger.warning(f"Unstructured translation for '{word}': {response[:200]}")
            return {"translation": response, "baseForm": word, "partOfSpeech": "", "note": ""}

        return {
            "translation": parsed["translation"].strip(),
            "baseForm": sanitize_string(parsed.get("baseForm"), config.MAX_CARD_FIELD_LENGTH)
            or word,
            "partOfSpeech": sanitize_string(parsed.get("partOfSpeech"), 100),
            "note": sanitize_string(parsed.get("note"), config.MAX_EXAMPLE_LENGTH),
        }

    def batch_translate(self, words: list[str]) -> list[ProposedCard]:
        """
        Translate a batch of candidate words with a single AI call.

        Raises:
            ExtractionFormatError: the reply is not a JSON array of cards
            ExtractionUnavailableError: the AI backend failed
        """
        if not words:
            return []

        word_list = "\n".join(f"- {word}" for word in words)
        response = self.ai_client.complete(
            BATCH_TRANSLATE_PROMPT.format(words=word_list), config.BATCH_TRANSLATE_MAX_TOKENS
        )

        data = _parse_json(response)
        if not isinstance(data, list):
            raise ExtractionFormatError("Expected a JSON array of cards", response)

        cards = [_parse_card(item, response) for item in data]
        logger.info(f"Batch translation: {len(words)} words -> {len(cards)} cards")
        return cards

    def extract_from_notes(self, notes: str) -> NotesExtraction:
        """
        Extract cards, unrecognized tokens and correction warnings from
        freeform notes with a single AI call.

        Raises:
            ExtractionFormatError: the reply does not match the notes shape
            ExtractionUnavailableError: the AI backend failed
        """
        response = self.ai_client.complete(
            NOTES_PROMPT.format(notes=notes), config.NOTES_MAX_TOKENS
        )

        data = _parse_json(response)
        if not isinstance(data, dict) or not isinstance(data.get("cards"), list):
            raise ExtractionFormatError("Expected an object with a 'cards' list", response)

        cards = [_parse_card(item, response, allow_original=True) for item in data["cards"]]

        unrecognized = []
        for item in _parse_list(data, "unrecognized", response):
            if not isinstance(item, dict) or not isinstance(item.get("text"), str):
                raise ExtractionFormatError("Unrecognized entry is missing 'text'", response)
            text = sanitize_string(item["text"], config.MAX_CARD_FIELD_LENGTH)
            if text:
                unrecognized.append(
                    {
                        "text": text,
                        "note": sanitize_string(
                            _optional_string(item, "note", response), config.MAX_EXAMPLE_LENGTH
                        ),
                    }
                )

        warnings = []
        for warning in _parse_list(data, "warnings", response):
            if not isinstance(warning, str):
                raise ExtractionFormatError("Warnings must be strings", response)
            if warning.strip():
                warnings.append(warning.strip())

        logger.info(
            f"Notes extraction: {len(cards)} cards, {len(unrecognized)} unrecognized, "
            f"{len(warnings)} warnings"
        )
        return NotesExtraction(cards=cards, unrecognized=unrecognized, warnings=warnings)
