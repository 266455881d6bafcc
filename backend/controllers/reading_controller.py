"""
Reading controller
Text generation, tokenization of the reading view and word lookup
"""

import uuid

from flask import jsonify

from controllers.base_controller import BaseController
from errors import ReaderError, ValidationError
from services.tokenizer import render_html, tokenize, words


class ReadingController(BaseController):
    def __init__(self, logger, extractor, store, translation_cache=None):
        super().__init__(logger)
        self.extractor = extractor
        self.store = store
        self.translation_cache = translation_cache

    def generate_text(self, request):
        """Generate a Polish reading text on a topic"""
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            text = self.extractor.generate_text(data.get("topic"))

            self.logger.info(
                "Text generated",
                extra={"request_id": request_id, "count": len(text)},
            )
            return jsonify({"text": text})

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to generate text")

    def tokenize_text(self, request):
        """Split a text into clickable word segments"""
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            text = data.get("text")
            if not isinstance(text, str):
                raise ValidationError("Text is required")

            segments = tokenize(text)
            return jsonify(
                {
                    "segments": [segment.to_dict() for segment in segments],
                    "words": words(segments),
                    "html": str(render_html(segments)),
                }
            )

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to tokenize text")

    def translate(self, request):
        """Translate a word or phrase using the surrounding text as context"""
        request_id = str(uuid.uuid4())

        try:
            data = request.get_json(silent=True) or {}
            word = data.get("word") if isinstance(data.get("word"), str) else ""
            context = data.get("context") if isinstance(data.get("context"), str) else ""

            result = None
            if self.translation_cache is not None and word.strip():
                result = self.translation_cache.get(word, context)

            if result is None:
                result = self.extractor.translate_word(word, context)
                if self.translation_cache is not None:
                    self.translation_cache.set(word, context, result)

            lookup = [word.strip(), result.get("baseForm") or ""]
            response = {
                "translation": result.get("translation", ""),
                "baseForm": result.get("baseForm", ""),
                "partOfSpeech": result.get("partOfSpeech", ""),
                "note": result.get("note", ""),
                "alreadyInDeck": bool(self.store.find_by_polish(lookup)),
            }
            return jsonify(response)

        except ReaderError as e:
            return self._reader_error(e, request_id)
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to translate")

    def cache_stats(self):
        """Hit/miss counters of the word lookup cache"""
        request_id = str(uuid.uuid4())

        try:
            return jsonify(self.translation_cache.get_stats())
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to get cache stats")

    def clear_cache(self):
        """Drop every cached word lookup"""
        request_id = str(uuid.uuid4())

        try:
            cleared_count = self.translation_cache.clear_cache()
            self.logger.info(
                "Translation cache cleared",
                extra={"request_id": request_id, "count": cleared_count},
            )
            return jsonify({"success": True, "clearedCount": cleared_count})
        except Exception as e:
            return self._unexpected_error(e, request_id, "Failed to clear translation cache")
