"""JSON error responses for the HTTP layer."""

from __future__ import annotations

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from .errors import HabitCastError, MissingUserError, StoreError
from .logging_config import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Map domain and store errors onto HTTP responses."""

    @app.errorhandler(MissingUserError)
    def _missing_user(exc: MissingUserError):
        return "", exc.http_status

    @app.errorhandler(HabitCastError)
    def _habitcast_error(exc: HabitCastError):
        if exc.http_status >= 500:
            logger.error("Request failed", extra={"error": exc.message})
        else:
            logger.info(
                "Request rejected",
                extra={"error": exc.message, "status": exc.http_status},
            )
        return jsonify(exc.to_response()), exc.http_status

    @app.errorhandler(SQLAlchemyError)
    def _store_error(exc: SQLAlchemyError):
        error = StoreError.from_exception(exc)
        logger.error("Database operation failed", exc_info=exc, extra={"error": error.message})
        return jsonify(error.to_response()), error.http_status

    @app.errorhandler(404)
    def _not_found(_exc):
        return jsonify({"error": "Not found."}), 404

    @app.errorhandler(405)
    def _method_not_allowed(_exc):
        return jsonify({"error": "Method not allowed."}), 405
