"""JSON envelope helpers shared by the controllers."""
from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import NotEligibleError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def ok(data: Any, *, status: int = 200, warning: Optional[str] = None):
    body = {"success": True, "data": data}
    if warning:
        body["warning"] = warning
    return jsonify(body), status


def fail(message: str, status: int, *, error: Optional[BaseException] = None):
    body = {"success": False, "message": message}
    if error is not None and current_app.config.get("DEBUG"):
        body["error"] = str(error)
    return jsonify(body), status


def json_endpoint(view):
    """Map domain errors of a route to status codes; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return fail(str(e), 400)
        except NotFoundError as e:
            return fail(str(e), 404)
        except NotEligibleError as e:
            return fail(str(e), 403)
        except Exception as e:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return fail("Internal server error", 500, error=e)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str, *, required: bool = False) -> Optional[int]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def parse_date_field(raw: Any, name: str, *, required: bool = True) -> Optional[date]:
    if not raw:
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return parse_iso_date(str(raw))
    except ValueError:
        raise ValidationError(f"{name} must be a date in YYYY-MM-DD format")


def query_date(name: str, *, required: bool = False) -> Optional[date]:
    return parse_date_field(request.args.get(name), name, required=required)
