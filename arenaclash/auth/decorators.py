"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g, session

from arenaclash.core.constants import ROLE_ADMIN
from arenaclash.errors import AuthenticationError, PermissionDeniedError


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
            if "user_id" not in session or not g.get("user"):
                raise AuthenticationError()
            if admin_required and g.user.get("role") != ROLE_ADMIN:
                raise PermissionDeniedError(
                    "You are not authorized to view this page."
                )
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
