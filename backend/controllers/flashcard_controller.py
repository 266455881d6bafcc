"""
Flashcard controller
Deck listing, manual cards, deletion and review statistics
"""

import uuid

from flask import jsonify

from controllers.base_controller import BaseController
from errors import ReaderError, ValidationError
from services.review_queue import build_review_queue


class FlashcardController(BaseController):
    def __init__(self, logger, store, import_service):
        super().__init__(logger)
        self.store = store
        self.import_service = import_service

    def list_cards(self):
        request_id = str(uuid.uuid4())

        try:
            cards = self.store.list_cards()
            return jsonify([card.to_dict() for card in cards])
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to load flashcards")

    def review_queue(self):
        """Return the deck in uniformly random order"""
        request_id = str(uuid.uuid4())

        try:
            queue = build_review_queue(self.store.list_cards())
            return jsonify([card.to_dict() for card in queue])
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to build review queue")

    def add_card(self, request):
        """Add a single card, answering 409 when it already exists"""
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            card = self.import_service.add_manual_card(
                data.get("polish"),
                data.get("russian"),
                data.get("baseForm"),
                data.get("example"),
            )

            self.logger.info(
                "Flashcard added",
                extra={"request_id": request_id, "card_id": card.id},
            )
            return jsonify(card.to_dict()), 201

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to add flashcard")

    def delete_card(self, card_id):
        request_id = str(uuid.uuid4())

        try:
            self.store.delete_card(card_id)
            self.logger.info(
                "Flashcard deleted",
                extra={"request_id": request_id, "card_id": card_id},
            )
            return jsonify({"success": True})

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to delete flashcard")

    def update_stats(self, card_id, request):
        """Record one review answer for a card"""
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            correct = data.get("correct")
            if not isinstance(correct, bool):
                raise ValidationError("Invalid correct value")

            card = self.store.record_review(card_id, correct)
            return jsonify(card.to_dict())

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to update stats")
