"""
Error taxonomy and the JSON envelope every failure is rendered into.

    {"success": false, "message": "...", "errors": [...]}

`errors` is only present for validation failures. Unexpected exceptions are
logged with their traceback and answered with a generic 500.
"""
import logging

from flask import jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self):
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Access denied"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Conflict"


def error_response(message, status_code):
    return jsonify({"success": False, "message": message}), status_code


def register_error_handlers(app):
    from models import db

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        db.session.rollback()
        if error.status_code >= 500:
            logger.error("API error: %s", error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        logger.warning("Integrity violation: %s", error.orig)
        return error_response("Record conflicts with an existing one", 409)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code == 413:
            return error_response("File too large. Maximum size is 50MB.", 413)
        return error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        db.session.rollback()
        logger.exception("Unhandled error")
        return error_response("Server error", 500)
