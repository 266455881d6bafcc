"""
Unrecognized words controller
"""

import uuid

from flask import jsonify

from controllers.base_controller import BaseController
from errors import ReaderError


class UnrecognizedController(BaseController):
    def __init__(self, logger, manager):
        super().__init__(logger)
        self.manager = manager

    def list_words(self, request):
        request_id = str(uuid.uuid4())

        try:
            words = self.manager.list(request.args.get("status") or None)
            return jsonify([word.to_dict() for word in words])

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to fetch unrecognized words")

    def set_status(self, word_id, request):
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            word = self.manager.set_status(word_id, data.get("status"))

            self.logger.info(
                "Unrecognized word updated",
                extra={"request_id": request_id, "word_id": word_id, "status": word.status},
            )
            return jsonify(word.to_dict())

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to update unrecognized word")

    def resolve(self, word_id):
        """Mark a word resolved and hand back a manual-entry prefill"""
        request_id = str(uuid.uuid4())

        try:
            return jsonify(self.manager.start_manual_entry(word_id))

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to resolve unrecognized word")
