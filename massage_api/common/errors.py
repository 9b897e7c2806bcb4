# massage_api/common/errors.py
from flask import Blueprint, current_app
from werkzeug.exceptions import HTTPException
from massage_api.common.http import fail

bp_errors = Blueprint("errors", __name__)


class APIError(Exception):
    """Custom API Error class."""
    code = "API_ERROR"
    status_code = 400

    def __init__(self, message, code=None, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class InvalidArgument(APIError):
    """Malformed or missing required input."""
    code = "INVALID_ARGUMENT"
    status_code = 400


class NotFound(APIError):
    code = "NOT_FOUND"
    status_code = 404


class Conflict(APIError):
    """Uniqueness violation."""
    code = "CONFLICT"
    status_code = 409


class Unavailable(APIError):
    """Backing store unreachable; the caller should retry."""
    code = "UNAVAILABLE"
    status_code = 503


class Internal(APIError):
    code = "INTERNAL"
    status_code = 500


def unavailable_response(message="Database unavailable, please retry later"):
    resp, status = fail(message=message, status=503, code=Unavailable.code)
    resp.headers["Retry-After"] = str(current_app.config.get("STORE_RETRY_AFTER", 5))
    return resp, status


@bp_errors.app_errorhandler(Unavailable)
def _unavailable(e: Unavailable):
    return unavailable_response(e.message)


@bp_errors.app_errorhandler(APIError)
def _api_error(e: APIError):
    return fail(message=e.message, status=e.status_code, code=e.code, detail=e.payload)


@bp_errors.app_errorhandler(HTTPException)
def _http(e: HTTPException):
    return fail(message=e.description or "HTTP error", status=e.code or 400)


@bp_errors.app_errorhandler(Exception)
def _unhandled(e: Exception):
    current_app.logger.exception("Unhandled error")
    return fail(message="Internal Server Error", status=500, code=Internal.code, detail=str(e))
