"""
Lifecycle of words the notes extraction could not classify.

Items start as ``pending`` and move once to ``resolved`` or ``dismissed``.
Setting a status on an item that already left ``pending`` is accepted and
leaves it unchanged.
"""

import logging
from typing import Optional

import config
from errors import ValidationError
from models import UNRECOGNIZED_STATUSES

logger = logging.getLogger(__name__)

PENDING = "pending"
TERMINAL_STATUSES = ("resolved", "dismissed")


class UnrecognizedWordManager:
    def __init__(self, store):
        self.store = store

    def record(self, items: list[dict], source_text: str) -> list:
        """Persist extraction failures as pending items."""
        context = source_text[: config.SOURCE_CONTEXT_LENGTH]
        records = self.store.insert_unrecognized(
            [
                {"text": item["text"], "source_context": context, "ai_note": item.get("note")}
                for item in items
            ]
        )
        if records:
            logger.info(f"Recorded {len(records)} unrecognized words")
        return records

    def list(self, status: Optional[str] = None) -> list:
        if status and status not in UNRECOGNIZED_STATUSES:
            raise ValidationError(f"Invalid status '{status}'")
        return self.store.list_unrecognized(status)

    def set_status(self, word_id: int, status: str):
        word = self.store.get_unrecognized(word_id)
        if word.status != PENDING:
            # terminal: any later call succeeds and changes nothing
            return word

        if status not in TERMINAL_STATUSES:
            raise ValidationError("Status must be 'resolved' or 'dismissed'")

        logger.info(f"Unrecognized word {word_id} -> {status}")
        return self.store.update_unrecognized_status(word_id, status)

    def start_manual_entry(self, word_id: int) -> dict:
        """
        Mark a word resolved and return a manual-entry prefill for it.

        The status change does not depend on the manual card being saved.
        """
        word = self.set_status(word_id, "resolved")
        return {
            "unrecognized": word.to_dict(),
            "manualEntry": {"polish": word.text, "russian": ""},
        }
