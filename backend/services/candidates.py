"""
Candidate normalization for bulk import.

Turns the raw learner input of each import mode into either a list of
candidate words (``comma``/``lines``), a single notes blob (``notes``) or a
manual card entry (``manual``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import config
from errors import ValidationError


class ImportMode(str, Enum):
    COMMA = "comma"
    LINES = "lines"
    NOTES = "notes"
    MANUAL = "manual"

    @classmethod
    def parse(cls, value: Any) -> "ImportMode":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(mode.value for mode in cls)
            raise ValidationError(f"Unknown import mode '{value}', expected one of: {allowed}")


@dataclass(frozen=True)
class ManualEntry:
    polish: str
    russian: str
    base_form: str = ""
    example: str = ""


def sanitize_string(value: Any, max_length: int) -> str:
    """Trim a value and cap its length; non-strings become an empty string."""
    if not isinstance(value, str):
        return ""
    return value.strip()[:max_length]


def split_candidates(raw: str, separator: Optional[str]) -> list[str]:
    """Split on ``separator`` (newlines when None), trim, drop empties, cap length."""
    parts = raw.split(separator) if separator else raw.splitlines()
    candidates = []
    for part in parts:
        candidate = part.strip()
        if candidate:
            candidates.append(candidate[: config.MAX_CANDIDATE_LENGTH])
    return candidates


def validate_batch_size(candidates: list[str]) -> None:
    if not candidates:
        raise ValidationError("No words to import")
    if len(candidates) > config.MAX_BATCH_WORDS:
        raise ValidationError(
            f"Too many words: {len(candidates)} (maximum is {config.MAX_BATCH_WORDS})"
        )


def normalize_notes(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("Notes text is required")
    notes = raw.strip()
    if len(notes) > config.MAX_NOTES_LENGTH:
        raise ValidationError(
            f"Notes are too long: {len(notes)} characters "
            f"(maximum is {config.MAX_NOTES_LENGTH})"
        )
    return notes


def normalize_manual(raw: Any) -> ManualEntry:
    if not isinstance(raw, dict):
        raise ValidationError("Manual entry must be an object with polish and russian")

    polish = sanitize_string(raw.get("polish"), config.MAX_CARD_FIELD_LENGTH)
    russian = sanitize_string(raw.get("russian"), config.MAX_CARD_FIELD_LENGTH)
    if not polish or not russian:
        raise ValidationError("Polish and Russian are required")

    return ManualEntry(
        polish=polish,
        russian=russian,
        base_form=sanitize_string(raw.get("baseForm"), config.MAX_CARD_FIELD_LENGTH),
        example=sanitize_string(raw.get("example"), config.MAX_EXAMPLE_LENGTH),
    )


def normalize_candidates(mode, raw):
    """
    Normalize raw input for an import mode.

    Args:
        mode: ImportMode or its string value
        raw: str for comma/lines/notes, dict for manual

    Returns:
        list[str] for comma/lines, str for notes, ManualEntry for manual

    Raises:
        ValidationError: before any extraction cost is spent
    """
    mode = ImportMode.parse(mode)

    if mode is ImportMode.MANUAL:
        return normalize_manual(raw)
    if mode is ImportMode.NOTES:
        return normalize_notes(raw)

    if not isinstance(raw, str):
        raise ValidationError("Input text is required")

    separator = "," if mode is ImportMode.COMMA else None
    candidates = split_candidates(raw, separator)
    validate_batch_size(candidates)
    return candidates
