from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import DomainError, MergeError, NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)


def ok(data, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def fail(message: str, status: int, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def domain_error_response(err: DomainError):
    if isinstance(err, ValidationError):
        return fail(str(err), 400, field=err.field)
    if isinstance(err, MergeError):
        return fail(str(err), 400, reason=err.reason)
    if isinstance(err, NotFoundError):
        return fail(str(err), 404)
    if isinstance(err, PersistenceError):
        logger.error("Persistence failure: %s", err)
        return fail("Could not save changes, please try again", 500)
    return fail(str(err), 400)
