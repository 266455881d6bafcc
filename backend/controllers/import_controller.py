"""
Import controller
Bulk import: propose a reviewable set of cards, then commit the selection
"""

import uuid

from flask import jsonify

from controllers.base_controller import BaseController
from errors import ReaderError, ValidationError
from services.candidates import ImportMode


class ImportController(BaseController):
    def __init__(self, logger, import_service):
        super().__init__(logger)
        self.import_service = import_service

    def propose(self, request):
        """
        Build a proposal from raw input.

        Manual entries skip the proposal and are saved right away.
        """
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            mode = ImportMode.parse(data.get("mode"))
            raw_input = data.get("input")

            self.logger.info(
                "Processing import proposal",
                extra={"request_id": request_id, "mode": mode.value},
            )

            if mode is ImportMode.MANUAL:
                entry = raw_input if isinstance(raw_input, dict) else {}
                card = self.import_service.add_manual_card(
                    entry.get("polish"),
                    entry.get("russian"),
                    entry.get("baseForm"),
                    entry.get("example"),
                )
                return jsonify({"card": card.to_dict()}), 201

            result = self.import_service.propose_import(mode, raw_input)

            self.logger.info(
                "Import proposal ready",
                extra={
                    "request_id": request_id,
                    "mode": mode.value,
                    "count": len(result.proposed_cards),
                },
            )
            return jsonify(result.to_dict())

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to process import")

    def commit(self, request):
        """Save the selected proposed cards"""
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            cards = data.get("cards")
            if cards is not None and not isinstance(cards, list):
                raise ValidationError("Cards array is required")

            result = self.import_service.commit_import(cards or [])

            self.logger.info(
                "Import committed",
                extra={"request_id": request_id, "count": len(result.added)},
            )
            return jsonify(result.to_dict())

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to save cards")
