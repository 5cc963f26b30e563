from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request

from ..core.exceptions import DataFetchError, DomainError

logger = logging.getLogger(__name__)


def error_response(message: str, *, status: int, exc: Optional[BaseException] = None):
    """Uniform error envelope; `details` only leaks outside production."""
    body = {"error": message}
    if exc is not None and current_app.config.get("DEBUG"):
        body["details"] = str(exc)
    return jsonify(body), status


def json_endpoint(failure_message: str = "Internal server error"):
    """Catch errors at the HTTP boundary and convert them to the error envelope.

    Client errors (4xx) carry their own message. Store and configuration
    failures are logged with stack and request context, then answered with
    `failure_message`.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                if e.status_code < 500:
                    return error_response(str(e), status=e.status_code)
                logger.exception(
                    "%s: %s %s args=%s", type(e).__name__, request.method, request.path, dict(request.args)
                )
                message = failure_message if isinstance(e, DataFetchError) else "Internal server error"
                return error_response(message, status=e.status_code, exc=e)
            except Exception as e:
                logger.exception("Unexpected error: %s %s args=%s", request.method, request.path, dict(request.args))
                return error_response("Internal server error", status=500, exc=e)

        return wrapper

    return decorator
