"""
Test configuration and fixtures for Polish Reader
"""

import json
from unittest.mock import Mock

import factory
import fakeredis
import pytest

from app import create_app
from models import Flashcard, UnrecognizedWord, db
from services.card_extractor import PolishCardExtractor
from services.card_store import CardStore
from services.import_service import ImportService
from services.translation_cache import TranslationCache
from services.unrecognized import UnrecognizedWordManager


@pytest.fixture
def fake_redis():
    """Provide a fake Redis client for testing"""
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def ai_client():
    """Mock AI client; tests set ``complete.return_value`` to a canned reply"""
    client = Mock()
    client.configured = True
    client.complete.return_value = "[]"
    return client


@pytest.fixture
def app(fake_redis, ai_client):
    """Create and configure a test Flask application on in-memory SQLite"""
    flask_app = create_app(
        test_config={
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "SQLALCHEMY_ENGINE_OPTIONS": {},
        },
        redis_client=fake_redis,
        ai_client=ai_client,
    )

    with flask_app.app_context():
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client"""
    return app.test_client()


@pytest.fixture
def store(app):
    return CardStore()


@pytest.fixture
def extractor(ai_client):
    return PolishCardExtractor(ai_client)


@pytest.fixture
def unrecognized_manager(store):
    return UnrecognizedWordManager(store)


@pytest.fixture
def import_service(store, extractor, unrecognized_manager):
    return ImportService(store, extractor, unrecognized_manager)


@pytest.fixture
def translation_cache(fake_redis):
    """Provide a TranslationCache instance with fake Redis"""
    return TranslationCache(fake_redis, ttl=3600)  # 1 hour TTL for tests


def ai_reply(payload):
    """Serialize a canned AI reply"""
    return json.dumps(payload, ensure_ascii=False)


def echo_batch_translation(prompt, max_tokens):
    """Fake batch translation: one card per line of the prompt's 'Words:' block"""
    block = prompt.split("Words:\n", 1)[1].split("\n\n", 1)[0]
    words = [line[2:] for line in block.splitlines() if line.startswith("- ")]
    return ai_reply([{"polish": word, "russian": f"ru:{word}"} for word in words])


# Factory classes for creating test data
class FlashcardFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        model = Flashcard
        sqlalchemy_session = db.session
        sqlalchemy_session_persistence = "commit"

    polish = factory.Sequence(lambda n: f"słowo{n}")
    russian = factory.Sequence(lambda n: f"слово{n}")
    base_form = factory.LazyAttribute(lambda obj: obj.polish)
    example = ""
    correct_count = 0
    incorrect_count = 0


class UnrecognizedWordFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        model = UnrecognizedWord
        sqlalchemy_session = db.session
        sqlalchemy_session_persistence = "commit"

    text = factory.Sequence(lambda n: f"xyz{n}")
    source_context = "notatki"
    ai_note = "Not a Polish word"
    status = "pending"


@pytest.fixture
def sample_polish_text():
    """Provide sample Polish text for testing"""
    return (
        "Cześć! Mam na imię Ania. Codziennie rano piję kawę i czytam gazetę.\n"
        "W weekend lubię jeździć na rowerze (zwłaszcza nad jeziorem)."
    )
