"""
Card Store
Persistence for flashcards and unrecognized words on top of Flask-SQLAlchemy.
"""

from datetime import datetime, timezone
import logging
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

import config
from errors import DuplicateError, NotFoundError, StoreError
from models import Flashcard, UnrecognizedWord, db, normalize_polish

logger = logging.getLogger(__name__)


class CardStore:
    """
    Single-record creates and updates against the shared card set.

    Every write commits on its own, so a failure on one record never undoes
    records written before it.
    """

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def find_by_polish(self, values: Iterable[str]) -> list[Flashcard]:
        """Return persisted cards whose Polish form matches any value, ignoring case."""
        if isinstance(values, str):
            values = [values]
        keys = {normalize_polish(value) for value in values}
        keys.discard("")
        if not keys:
            return []
        return self.session.query(Flashcard).filter(Flashcard.polish_key.in_(keys)).all()

    def insert_card(
        self,
        polish: str,
        russian: str,
        base_form: Optional[str] = None,
        example: Optional[str] = None,
    ) -> Flashcard:
        """
        Create a card with zeroed stats.

        Raises:
            DuplicateError: the unique Polish key is already taken
            StoreError: any other database failure
        """
        card = Flashcard(
            polish=polish,
            russian=russian,
            base_form=base_form or polish,
            example=example or "",
            correct_count=0,
            incorrect_count=0,
        )
        try:
            self.session.add(card)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateError(f"Card '{polish}' already exists")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to insert card '{polish}': {e}")
            raise StoreError("Failed to save card")
        return card

    def get_card(self, card_id: int) -> Flashcard:
        card = self.session.get(Flashcard, card_id)
        if card is None:
            raise NotFoundError("Card not found")
        return card

    def list_cards(self, limit: int = config.MAX_CARDS_LISTED) -> list[Flashcard]:
        return (
            self.session.query(Flashcard)
            .order_by(Flashcard.created_at.desc(), Flashcard.id.desc())
            .limit(limit)
            .all()
        )

    def delete_card(self, card_id: int) -> None:
        card = self.get_card(card_id)
        self.session.delete(card)
        self.session.commit()

    def record_review(self, card_id: int, correct: bool) -> Flashcard:
        card = self.get_card(card_id)
        if correct:
            card.correct_count = (card.correct_count or 0) + 1
        else:
            card.incorrect_count = (card.incorrect_count or 0) + 1
        card.last_review = datetime.now(timezone.utc)
        self.session.commit()
        return card

    def insert_unrecognized(self, items: list[dict]) -> list[UnrecognizedWord]:
        records = [
            UnrecognizedWord(
                text=item["text"],
                source_context=item.get("source_context"),
                ai_note=item.get("ai_note"),
                status="pending",
            )
            for item in items
        ]
        if not records:
            return []
        try:
            self.session.add_all(records)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to record {len(records)} unrecognized words: {e}")
            raise StoreError("Failed to save unrecognized words")
        return records

    def list_unrecognized(self, status: Optional[str] = None) -> list[UnrecognizedWord]:
        query = self.session.query(UnrecognizedWord)
        if status:
            query = query.filter_by(status=status)
        return query.order_by(
            UnrecognizedWord.created_at.desc(), UnrecognizedWord.id.desc()
        ).all()

    def get_unrecognized(self, word_id: int) -> UnrecognizedWord:
        word = self.session.get(UnrecognizedWord, word_id)
        if word is None:
            raise NotFoundError("Unrecognized word not found")
        return word

    def update_unrecognized_status(self, word_id: int, status: str) -> UnrecognizedWord:
        word = self.get_unrecognized(word_id)
        word.status = status
        self.session.commit()
        return word
