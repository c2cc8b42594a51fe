"""Decorators for the auth package."""

from functools import wraps

from flask import g, session

from karatebracket.constants import ROLE_ADMIN, SESSION_IS_ADMIN, SESSION_USER_ID
from karatebracket.errors import AuthenticationError, AuthorizationError


def _is_admin():
    user = getattr(g, "user", None) or {}
    return bool(session.get(SESSION_IS_ADMIN)) or user.get("role") == ROLE_ADMIN


def login_required(f=None, admin_required=False):
    """Reject the request if the user is not logged in.

    Usage:
    @login_required
    def protected_view():
        ...

    @login_required(admin_required=True)
    def admin_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            if SESSION_USER_ID not in session:
                raise AuthenticationError()
            if admin_required and not _is_admin():
                raise AuthorizationError("Only administrators can do this.")
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator


def current_viewer():
    """Describe the signed-in user for read filtering."""
    user = getattr(g, "user", None) or {}
    return {
        "uid": session.get(SESSION_USER_ID),
        "is_admin": _is_admin(),
        "dojoId": user.get("dojoId"),
    }
