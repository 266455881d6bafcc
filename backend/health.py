"""
Health check endpoint

Only the database is required. The lookup cache and the AI backend are
reported so a deploy without Redis or an API key is visible, but they do not
fail the check: lookups then miss the cache and AI routes answer 503.
"""

from flask import Blueprint, jsonify
import redis
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

import config
from models import db


def create_health_blueprint(redis_client, ai_client):
    health_bp = Blueprint("health", __name__)

    @health_bp.route("/health")
    def health_check():
        checks = {"database": "connected", "cache": "connected"}
        status_code = 200

        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            db.session.rollback()
            checks["database"] = "disconnected"
            checks["error"] = str(e)
            status_code = 503

        try:
            redis_client.ping()
        except redis.RedisError:
            checks["cache"] = "disconnected"

        checks["ai"] = "configured" if ai_client.configured else "not_configured"

        if status_code != 200:
            overall = "unhealthy"
        elif checks["cache"] != "connected" or checks["ai"] != "configured":
            overall = "degraded"
        else:
            overall = "healthy"

        return jsonify(
            {
                "status": overall,
                "service": config.SERVICE_NAME,
                "version": "1.0.0",
                **checks,
            }
        ), status_code

    return health_bp
