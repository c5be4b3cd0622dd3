"""Decorators for authenticated endpoints."""

from functools import wraps

from flask import g, jsonify, session


def login_required(f):
    """Reject the request with 401 if no user is logged in.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if "user_id" not in session or g.get("user") is None:
            return (
                jsonify({"status": "error", "message": "Login required."}),
                401,
            )
        return f(*args, **kwargs)

    return decorated_function
