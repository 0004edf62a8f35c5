"""Payment blueprints: wallet top-ups and the gateway webhook."""

from flask import Blueprint

bp = Blueprint("payment", __name__, url_prefix="/payment")
webhook_bp = Blueprint("webhook", __name__)

from . import routes  # noqa: E402, F401
from .gateway import ZapUPIClient  # noqa: E402
from .services import PaymentService  # noqa: E402

__all__ = ["PaymentService", "ZapUPIClient", "routes"]
