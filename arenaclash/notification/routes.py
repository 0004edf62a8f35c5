"""Routes for the notification blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import g, jsonify

from arenaclash.auth.decorators import login_required

from . import bp
from .services import NotificationService


@bp.route("/", methods=["GET"])
@login_required
def list_notifications() -> Any:
    """Latest notifications with the unread count for the bell badge."""
    db = firestore.client()
    notifications, unread = NotificationService.list_for_user(db, g.user["uid"])
    return jsonify({"notifications": notifications, "unreadCount": unread})


@bp.route("/<string:notification_id>/read", methods=["POST"])
@login_required
def mark_read(notification_id: str) -> Any:
    """Mark a single notification as read."""
    db = firestore.client()
    NotificationService.mark_read(db, g.user["uid"], notification_id)
    return jsonify({"status": "success"})


@bp.route("/read_all", methods=["POST"])
@login_required
def mark_all_read() -> Any:
    """Mark all notifications as read."""
    db = firestore.client()
    count = NotificationService.mark_all_read(db, g.user["uid"])
    return jsonify({"status": "success", "updated": count})
