"""Utility functions for the application."""

from __future__ import annotations

import re
import secrets
import smtplib
import time
from typing import TYPE_CHECKING, Any

from flask import current_app, render_template
from flask_mail import Message

from .extensions import mail

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot

SMTP_AUTH_ERROR_CODE = 534

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")


class EmailError(Exception):
    """Base class for email errors."""

    pass


def send_email(to, subject, template, **kwargs):
    """Send an email to a recipient.

    Raises:
        EmailError: If sending the email fails.
    """
    msg = Message(
        subject,
        recipients=[to],
        html=render_template(template, **kwargs),
        sender=current_app.config["MAIL_DEFAULT_SENDER"],
    )
    try:
        mail.send(msg)
    except smtplib.SMTPAuthenticationError as e:
        if e.smtp_code == SMTP_AUTH_ERROR_CODE:
            raise EmailError(
                "Authentication failed. Google requires you to use an App Password. "
                "Please verify your MAIL_USERNAME and MAIL_PASSWORD settings."
            ) from e
        raise EmailError(f"SMTP Authentication failed: {e}") from e
    except Exception as e:
        raise EmailError(f"Failed to send email: {e}") from e


def parse_amount(value: Any) -> float:
    """Parse a money amount that may be stored as display text, e.g. "₹50"."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = _NON_NUMERIC.sub("", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def format_amount(value: float) -> str:
    """Format an amount the way it is shown to users: 50, 12.50."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}"


def generate_order_id() -> str:
    """Generate a numeric gateway order id: epoch millis plus 3 random digits."""
    return f"{int(time.time() * 1000)}{secrets.randbelow(1000):03d}"


def timestamp_sort_key(value: Any) -> float:
    """Sort key for Firestore timestamps that tolerates missing values."""
    if value is None:
        return 0.0
    if hasattr(value, "timestamp"):
        try:
            return float(value.timestamp())
        except (TypeError, ValueError, OverflowError):
            return 0.0
    if hasattr(value, "seconds"):
        return float(value.seconds)
    return 0.0


def snapshot_to_dict(doc: DocumentSnapshot) -> dict[str, Any]:
    """Return a snapshot's data with its document id under ``id``."""
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data
