"""Helper functions for the application."""
from datetime import datetime, timezone
from flask import jsonify
from typing import Any


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def handle_error(error, status_code: int):
    """Handle application errors with consistent format."""
    return jsonify({
        'error': True,
        'message': str(error),
        'status_code': status_code
    }), status_code


def success_response(data: Any = None, message: str = "Success", **extra):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }

    if data is not None:
        response['data'] = data

    response.update(extra)
    return jsonify(response)


def error_response(message: str, status_code: int = 400, code: str = None, **extra):
    """Return consistent error response."""
    response = {
        'error': True,
        'message': message,
        'status_code': status_code
    }
    if code:
        response['code'] = code

    response.update(extra)
    return jsonify(response), status_code
