"""The admin blueprint."""

from flask import Blueprint

bp = Blueprint("admin", __name__, url_prefix="/admin")

from . import routes  # noqa: E402
from .services import AdminService  # noqa: E402

__all__ = ["AdminService", "routes"]
