# Overview: Request decorators for API routes (acting user, error mapping).

from functools import wraps
from flask import request, jsonify, g, current_app

from .extensions import db
from .validation import ValidationError, NotFoundError, ConflictError

ACTOR_HEADER = "X-User-Id"


def with_actor(f):
    """
    Establish the acting user for the request.

    There is no authentication on this service; the X-User-Id header only
    stamps who recorded or reversed a transaction.
    Sets g.actor_id (None when the header is absent).
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        actor = (request.headers.get(ACTOR_HEADER) or "").strip()
        g.actor_id = actor or None
        return f(*args, **kwargs)

    return decorated_function


def json_errors(action: str):
    """
    Map service exceptions to JSON error responses.

    - ValidationError -> 400
    - NotFoundError   -> 404
    - ConflictError   -> 409 (includes ProductInUseError)
    - anything else   -> logged, session rolled back, 500
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                db.session.rollback()
                return jsonify({"error": str(e)}), 400
            except NotFoundError as e:
                db.session.rollback()
                return jsonify({"error": str(e)}), 404
            except ConflictError as e:
                db.session.rollback()
                return jsonify({"error": str(e)}), 409
            except Exception:
                db.session.rollback()
                current_app.logger.exception("Failed to %s", action)
                return jsonify({"error": "Internal server error"}), 500

        return decorated_function
    return decorator
