"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask, current_app, g, session
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import (
    DEFAULT_CUSTOMER_MOBILE,
    USERS_COLLECTION,
    WEBHOOK_PORT,
    ZAPUPI_BASE_URL,
    ZAPUPI_TIMEOUT_SECONDS,
)
from .extensions import csrf, mail


def _load_config(app, test_config=None):
    """Populate app.config from the environment, then apply overrides."""
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        MAIL_SERVER=os.environ.get("MAIL_SERVER") or "smtp.gmail.com",
        MAIL_PORT=int(os.environ.get("MAIL_PORT") or 587),
        MAIL_USE_TLS=(os.environ.get("MAIL_USE_TLS") or "true").lower()
        in ["true", "1", "t"],
        MAIL_USE_SSL=(os.environ.get("MAIL_USE_SSL") or "false").lower()
        in ["true", "1", "t"],
        MAIL_USERNAME=os.environ.get("MAIL_USERNAME"),
        MAIL_PASSWORD=os.environ.get("MAIL_PASSWORD"),
        MAIL_DEFAULT_SENDER=os.environ.get("MAIL_DEFAULT_SENDER")
        or "noreply@arenaclash.in",
        # Payment gateway
        ZAPUPI_TOKEN_KEY=os.environ.get("ZAPUPI_TOKEN_KEY"),
        ZAPUPI_SECRET_KEY=os.environ.get("ZAPUPI_SECRET_KEY"),
        ZAPUPI_BASE_URL=os.environ.get("ZAPUPI_BASE_URL") or ZAPUPI_BASE_URL,
        ZAPUPI_WEBHOOK_SECRET=os.environ.get("ZAPUPI_WEBHOOK_SECRET"),
        ZAPUPI_TIMEOUT=float(
            os.environ.get("ZAPUPI_TIMEOUT") or ZAPUPI_TIMEOUT_SECONDS
        ),
        APP_URL=os.environ.get("APP_URL") or "http://localhost:5000",
        WEBHOOK_PORT=int(os.environ.get("WEBHOOK_PORT") or WEBHOOK_PORT),
        DEFAULT_CUSTOMER_MOBILE=os.environ.get("DEFAULT_CUSTOMER_MOBILE")
        or DEFAULT_CUSTOMER_MOBILE,
    )

    if test_config:
        app.config.update(test_config)


def _init_firebase(app):
    """Initialize the Firebase Admin SDK unless running tests."""
    if app.config.get("TESTING"):
        return

    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # Then a credentials file next to the package (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    project_id = json.load(f).get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        try:
            options = {"projectId": project_id} if project_id else None
            firebase_admin.initialize_app(cred, options)
        except ValueError:
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)
    _load_config(app, test_config)
    _init_firebase(app)

    # Initialize extensions
    mail.init_app(app)
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import game as game_bp

    app.register_blueprint(game_bp.bp)

    from . import tournament as tournament_bp

    app.register_blueprint(tournament_bp.bp)

    from . import wallet as wallet_bp

    app.register_blueprint(wallet_bp.bp)

    from . import payment as payment_bp

    app.register_blueprint(payment_bp.bp)
    app.register_blueprint(payment_bp.webhook_bp)
    csrf.exempt(payment_bp.webhook_bp)

    from . import notification as notification_bp

    app.register_blueprint(notification_bp.bp)

    from . import admin as admin_bp

    app.register_blueprint(admin_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_logged_in_user():
        """If a user_id is in the session, load the user data from Firestore and store it in g."""
        user_id = session.get("user_id")
        g.user = None
        if user_id is None:
            return

        try:
            db = firestore.client()
            user_doc = db.collection(USERS_COLLECTION).document(user_id).get()
            if user_doc.exists:
                g.user = user_doc.to_dict()
                g.user["uid"] = user_id
            else:
                # User ID in session but no user in DB. Clear the session.
                session.clear()
                current_app.logger.warning(
                    f"User {user_id} in session but not found in Firestore."
                )
        except Exception as e:
            current_app.logger.error(f"Error loading user from session: {e}")
            session.clear()

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app


def create_webhook_app(test_config=None):
    """Create a minimal app that only receives gateway webhooks."""
    app = Flask(__name__)
    _load_config(app, test_config)
    _init_firebase(app)

    from . import payment as payment_bp

    app.register_blueprint(payment_bp.webhook_bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)
    return app
