# massage_api/common/payload.py
from flask import request

from massage_api.common.errors import InvalidArgument


def json_body() -> dict:
    """Request JSON as a dict; an empty body is {}; any other top-level type is a 400."""
    data = request.get_json(silent=True, force=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidArgument("request body must be a JSON object")
    return data
