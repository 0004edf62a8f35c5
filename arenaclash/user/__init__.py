"""The user blueprint."""

from flask import Blueprint

bp = Blueprint("user", __name__, url_prefix="/user")

from . import routes  # noqa: E402
from .models import User  # noqa: E402
from .services import UserService  # noqa: E402

__all__ = ["User", "UserService", "routes"]
