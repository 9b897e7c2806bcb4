# massage_api/common/gate.py
from flask import current_app, request

from massage_api.common.errors import unavailable_response


def get_store():
    return current_app.extensions["store"]


def register_availability_gate(app):
    """Reject every request with 503 while the store reports disconnected."""

    @app.before_request
    def _require_store():
        if request.method == "OPTIONS":
            return None
        if not get_store().is_available():
            current_app.logger.warning("rejecting %s %s: store unavailable", request.method, request.path)
            return unavailable_response()
        return None
