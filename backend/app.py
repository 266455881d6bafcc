#!/usr/bin/env python3
"""
Polish Reader
Reading view, word lookup and flashcard import for Polish learners.
"""

from flask import Flask, request
from flask_cors import CORS
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics
import redis

import config
from controllers.flashcard_controller import FlashcardController
from controllers.import_controller import ImportController
from controllers.reading_controller import ReadingController
from controllers.unrecognized_controller import UnrecognizedController
from health import create_health_blueprint
from models import db
from services.ai_client import ChatCompletionClient
from services.card_extractor import PolishCardExtractor
from services.card_store import CardStore
from services.import_service import ImportService
from services.translation_cache import TranslationCache
from services.unrecognized import UnrecognizedWordManager
from utils.logger import setup_logger


def create_app(test_config=None, redis_client=None, ai_client=None):
    """
    Create the Flask application.

    Args:
        test_config: Flask config overrides
        redis_client: Redis client for the translation cache (built from REDIS_URL if omitted)
        ai_client: Object with ``complete(prompt, max_tokens)`` (OpenAI client if omitted)
    """
    app = Flask(__name__)

    # Database configuration
    app.config["SQLALCHEMY_DATABASE_URI"] = config.DATABASE_URL
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
        "pool_size": config.DB_POOL_SIZE,
        "pool_recycle": config.DB_POOL_RECYCLE,
        "pool_pre_ping": config.DB_POOL_PRE_PING,
    }
    app.json.ensure_ascii = False
    if test_config:
        app.config.update(test_config)

    # Configure CORS
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": config.CORS_ORIGINS,
                "allow_headers": ["Content-Type"],
                "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            }
        },
    )

    # Initialize database
    db.init_app(app)
    with app.app_context():
        db.create_all()

    # Setup logging
    logger = setup_logger(config.SERVICE_NAME, config.LOG_LEVEL)

    # Setup Prometheus metrics
    metrics = PrometheusMetrics(
        app,
        defaults_prefix=config.METRICS_PREFIX,
        group_by="endpoint",
        path=config.METRICS_PATH,
        registry=CollectorRegistry(auto_describe=True),
        static_labels={"service": config.SERVICE_NAME},
    )
    metrics.info("app_info", "Application info", version="1.0.0")

    if redis_client is None:
        redis_client = redis.from_url(config.REDIS_URL, decode_responses=True)
    if ai_client is None:
        ai_client = ChatCompletionClient(config.OPENAI_API_KEY)
    if not ai_client.configured:
        logger.warning("OPENAI_API_KEY is not set; AI routes will answer 503")

    # Wire services
    store = CardStore()
    extractor = PolishCardExtractor(ai_client)
    unrecognized = UnrecognizedWordManager(store)
    import_service = ImportService(store, extractor, unrecognized)
    translation_cache = TranslationCache(redis_client, ttl=config.TRANSLATION_CACHE_TTL)

    # Initialize controllers
    reading_controller = ReadingController(logger, extractor, store, translation_cache)
    flashcard_controller = FlashcardController(logger, store, import_service)
    import_controller = ImportController(logger, import_service)
    unrecognized_controller = UnrecognizedController(logger, unrecognized)

    # Register blueprints
    app.register_blueprint(create_health_blueprint(redis_client, ai_client))

    # Reading routes
    @app.route("/api/generate", methods=["POST"])
    def generate_text():
        logger.info("Generate text", extra={"endpoint": "/api/generate", "method": "POST"})
        return reading_controller.generate_text(request)

    @app.route("/api/tokenize", methods=["POST"])
    def tokenize_text():
        return reading_controller.tokenize_text(request)

    @app.route("/api/translate", methods=["POST"])
    def translate():
        logger.info("Translate word", extra={"endpoint": "/api/translate", "method": "POST"})
        return reading_controller.translate(request)

    # Translation cache management
    @app.route("/api/translation-cache/stats")
    def get_translation_cache_stats():
        return reading_controller.cache_stats()

    @app.route("/api/translation-cache/clear", methods=["POST"])
    def clear_translation_cache():
        logger.info(
            "Clear translation cache",
            extra={"endpoint": "/api/translation-cache/clear", "method": "POST"},
        )
        return reading_controller.clear_cache()

    # Flashcard routes
    @app.route("/api/flashcards")
    def get_flashcards():
        return flashcard_controller.list_cards()

    @app.route("/api/flashcards", methods=["POST"])
    def add_flashcard():
        logger.info("Add flashcard", extra={"endpoint": "/api/flashcards", "method": "POST"})
        return flashcard_controller.add_card(request)

    @app.route("/api/flashcards/review")
    def get_review_queue():
        return flashcard_controller.review_queue()

    @app.route("/api/flashcards/<int:card_id>", methods=["DELETE"])
    def delete_flashcard(card_id):
        logger.info(
            "Delete flashcard",
            extra={"endpoint": "/api/flashcards", "method": "DELETE", "card_id": card_id},
        )
        return flashcard_controller.delete_card(card_id)

    @app.route("/api/flashcards/<int:card_id>/stats", methods=["PATCH"])
    def update_flashcard_stats(card_id):
        return flashcard_controller.update_stats(card_id, request)

    # Import routes
    @app.route("/api/import/propose", methods=["POST"])
    def propose_import():
        logger.info("Propose import", extra={"endpoint": "/api/import/propose", "method": "POST"})
        return import_controller.propose(request)

    @app.route("/api/import/commit", methods=["POST"])
    def commit_import():
        logger.info("Commit import", extra={"endpoint": "/api/import/commit", "method": "POST"})
        return import_controller.commit(request)

    # Unrecognized word routes
    @app.route("/api/unrecognized")
    def get_unrecognized_words():
        return unrecognized_controller.list_words(request)

    @app.route("/api/unrecognized/<int:word_id>", methods=["PATCH"])
    def update_unrecognized_word(word_id):
        logger.info(
            "Update unrecognized word",
            extra={"endpoint": "/api/unrecognized", "method": "PATCH", "word_id": word_id},
        )
        return unrecognized_controller.set_status(word_id, request)

    @app.route("/api/unrecognized/<int:word_id>/resolve", methods=["POST"])
    def resolve_unrecognized_word(word_id):
        return unrecognized_controller.resolve(word_id)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=config.APP_PORT, debug=config.DEBUG, threaded=True)
