from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
from ariadne import format_error
from graphql import GraphQLError
import logging

from utils.exceptions import ProfileAPIError


def error_payload(error: str, message: str, status: int, details: dict | None = None) -> dict:
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return payload


def error_response(error: str, message: str, status: int, details: dict | None = None):
    return jsonify(error_payload(error, message, status, details)), status


def _classify(err: Exception, debug: bool) -> dict:
    """Map an exception raised inside a resolver onto the error envelope."""
    if isinstance(err, ProfileAPIError):
        return error_payload(err.code, err.message, err.status, err.details)
    if isinstance(err, ValidationError):
        return error_payload("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)
    if isinstance(err, IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        if "unique constraint" in lower_msg or "unique violation" in lower_msg:
            return error_payload("CONFLICT", "Unique constraint violated.", 409)
        return error_payload("BAD_REQUEST", "Integrity error.", 400)
    logging.exception("Unhandled exception", exc_info=err)
    details = {"type": err.__class__.__name__, "message": str(err)} if debug else None
    return error_payload("INTERNAL_ERROR", "An unexpected error occurred", 500, details)


def format_graphql_error(error: GraphQLError, debug: bool = False) -> dict:
    """
    ariadne error_formatter: errors raised by resolvers get the same
    code/status/details vocabulary as the REST error envelope, under
    the GraphQL "extensions" key.
    """
    formatted = format_error(error, debug)
    original = error.original_error
    if original is None:
        # parse / validation errors from graphql-core itself
        formatted.setdefault("extensions", {}).update({"code": "GRAPHQL_VALIDATION_FAILED", "status": 400})
        return formatted

    payload = _classify(original, debug)
    formatted["message"] = payload["message"]
    extensions = formatted.setdefault("extensions", {})
    extensions["code"] = payload["error"]
    extensions["status"] = payload["status"]
    if payload.get("details"):
        extensions["details"] = payload["details"]
    return formatted


def register_error_handlers(app):
    # 400 Bad Request (generic)
    @app.errorhandler(400)
    def bad_request(e):
        if current_app and current_app.debug:
            logging.exception("Unhandled exception", exc_info=e)
        message = getattr(e, "description", "Bad request")
        return error_response("BAD_REQUEST", message, 400)

    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # 405 Method Not Allowed
    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response("METHOD_NOT_ALLOWED", "Method not allowed", 405)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response("BAD_REQUEST", err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        # In dev, include exception details to speed up debugging
        details = None
        logging.exception("Unhandled exception", exc_info=err)
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
