"""
Proposal and review state for bulk import.

A ``ReviewSession`` is an immutable value: every transition returns a new
session instead of mutating shared state, so one request can rebuild, toggle
and commit a proposal without any server-side session storage.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional

import config
from errors import ValidationError
from services.candidates import ImportMode, sanitize_string

INPUT = "input"
PROPOSED = "proposed"
COMMITTED = "committed"


@dataclass(frozen=True)
class ProposedCard:
    polish: str
    russian: str
    base_form: str
    example: str = ""
    original_text: Optional[str] = None

    @classmethod
    def create(
        cls,
        polish: Any,
        russian: Any,
        base_form: Any = None,
        example: Any = None,
        original_text: Any = None,
    ) -> "ProposedCard":
        """
        Build a card applying the defaulting rules used by every import mode:

        - every field is trimmed and length-capped
        - ``base_form`` falls back to ``polish``
        - ``example`` falls back to an empty string
        - ``original_text`` is kept only when it differs from ``polish``
        """
        polish = sanitize_string(polish, config.MAX_CARD_FIELD_LENGTH)
        original = sanitize_string(original_text, config.MAX_CARD_FIELD_LENGTH)
        return cls(
            polish=polish,
            russian=sanitize_string(russian, config.MAX_CARD_FIELD_LENGTH),
            base_form=sanitize_string(base_form, config.MAX_CARD_FIELD_LENGTH) or polish,
            example=sanitize_string(example, config.MAX_EXAMPLE_LENGTH),
            original_text=original if original and original != polish else None,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "ProposedCard":
        return cls.create(
            data.get("polish"),
            data.get("russian"),
            data.get("baseForm"),
            data.get("example"),
            data.get("originalText"),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.polish and self.russian)

    def to_dict(self) -> dict:
        result = {
            "polish": self.polish,
            "russian": self.russian,
            "baseForm": self.base_form,
            "example": self.example,
        }
        if self.original_text:
            result["originalText"] = self.original_text
        return result


@dataclass(frozen=True)
class ProposalResult:
    proposed_cards: list
    duplicates: list
    unrecognized: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "proposedCards": [card.to_dict() for card in self.proposed_cards],
            "duplicates": list(self.duplicates),
            "unrecognized": list(self.unrecognized),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class CommitResult:
    added: list
    skipped_count: int

    def to_dict(self) -> dict:
        return {
            "added": [card.to_dict() for card in self.added],
            "skippedCount": self.skipped_count,
        }


@dataclass(frozen=True)
class ReviewSession:
    state: str = INPUT
    mode: Optional[ImportMode] = None
    proposed_cards: tuple = ()
    duplicates: tuple = ()
    unrecognized: tuple = ()
    warnings: tuple = ()
    selection: frozenset = frozenset()

    @classmethod
    def start(cls) -> "ReviewSession":
        return cls()

    def _require(self, state: str) -> None:
        if self.state != state:
            raise ValidationError(f"Review session is '{self.state}', expected '{state}'")

    def propose(self, result: ProposalResult, mode: Optional[ImportMode] = None) -> "ReviewSession":
        self._require(INPUT)
        cards = tuple(result.proposed_cards)
        return ReviewSession(
            state=PROPOSED,
            mode=mode,
            proposed_cards=cards,
            duplicates=tuple(result.duplicates),
            unrecognized=tuple(result.unrecognized),
            warnings=tuple(result.warnings),
            selection=frozenset(range(len(cards))),
        )

    def toggle(self, index: int) -> "ReviewSession":
        """Flip inclusion of one proposed card. Duplicates are never selectable."""
        self._require(PROPOSED)
        if not 0 <= index < len(self.proposed_cards):
            raise ValidationError(f"No proposed card at index {index}")
        return replace(self, selection=self.selection ^ {index})

    def select_only(self, indices) -> "ReviewSession":
        self._require(PROPOSED)
        indices = frozenset(indices)
        if any(not 0 <= i < len(self.proposed_cards) for i in indices):
            raise ValidationError("Selection refers to a card that was not proposed")
        return replace(self, selection=indices)

    def back(self) -> "ReviewSession":
        """Discard the proposal without side effects."""
        self._require(PROPOSED)
        return ReviewSession.start()

    def selected_cards(self) -> list:
        return [card for i, card in enumerate(self.proposed_cards) if i in self.selection]

    def committed(self) -> "ReviewSession":
        self._require(PROPOSED)
        return ReviewSession(state=COMMITTED, mode=self.mode)
