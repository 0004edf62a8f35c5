"""Game blueprint."""

from flask import Blueprint

bp = Blueprint("game", __name__, url_prefix="/games")

from . import routes  # noqa: E402, F401
from .models import Game  # noqa: E402
from .services import GameService  # noqa: E402

__all__ = ["Game", "GameService", "routes"]
