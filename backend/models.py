from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event

db = SQLAlchemy()

UNRECOGNIZED_STATUSES = ("pending", "resolved", "dismissed")


def normalize_polish(value):
    """Dedup key for a Polish form: exact match, case-insensitive."""
    return (value or "").strip().lower()


def _isoformat(value):
    return value.isoformat() if value else None


class Flashcard(db.Model):
    __tablename__ = "flashcards"

    id = db.Column(db.Integer, primary_key=True)
    polish = db.Column(db.String(500), nullable=False)
    # Unique lowercase copy of `polish`; kept in sync by the listeners below
    polish_key = db.Column(db.String(500), nullable=False, unique=True, index=True)
    russian = db.Column(db.String(500), nullable=False)
    base_form = db.Column(db.String(500))
    example = db.Column(db.String(1000), default="")
    correct_count = db.Column(db.Integer, default=0, nullable=False)
    incorrect_count = db.Column(db.Integer, default=0, nullable=False)
    last_review = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Constraints
    __table_args__ = (
        db.CheckConstraint(
            "correct_count >= 0 AND incorrect_count >= 0",
            name="_flashcard_stats_check",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "polish": self.polish,
            "russian": self.russian,
            "baseForm": self.base_form,
            "example": self.example,
            "createdAt": _isoformat(self.created_at),
            "stats": {
                "correct": self.correct_count,
                "incorrect": self.incorrect_count,
                "lastReview": _isoformat(self.last_review),
            },
        }


class UnrecognizedWord(db.Model):
    __tablename__ = "unrecognized_words"

    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.String(500), nullable=False)
    source_context = db.Column(db.String(500))
    ai_note = db.Column(db.String(1000))
    status = db.Column(db.String(20), default="pending", nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending', 'resolved', 'dismissed')",
            name="_unrecognized_status_check",
        ),
        db.Index("ix_unrecognized_words_status", "status"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "sourceContext": self.source_context,
            "aiNote": self.ai_note,
            "status": self.status,
            "createdAt": _isoformat(self.created_at),
        }


# Event listeners to keep the dedup key in sync
@event.listens_for(Flashcard, "before_insert")
@event.listens_for(Flashcard, "before_update")
def update_polish_key(mapper, connection, target):
    target.polish_key = normalize_polish(target.polish)
