"""
Shared error handling for controllers
"""

from flask import jsonify

from models import db


class BaseController:
    def __init__(self, logger):
        self.logger = logger

    def _reader_error(self, error, request_id):
        """Answer an expected failure with its own status code."""
        log = self.logger.warning if error.status_code < 500 else self.logger.error
        log(
            error.message,
            extra={"request_id": request_id, "error": type(error).__name__},
        )
        return jsonify({"error": error.message}), error.status_code

    def _unexpected_error(self, error, request_id, message):
        db.session.rollback()
        self.logger.error(
            message,
            extra={"request_id": request_id, "error": str(error)},
            exc_info=True,
        )
        return jsonify({"error": message}), 500
