"""Tests for app configuration and wiring."""

import os
import unittest
from unittest.mock import patch

from arenaclash import create_app, create_webhook_app


class TestAppConfig(unittest.TestCase):
    """Configuration is read from the environment."""

    @patch.dict(
        os.environ,
        {
            "ZAPUPI_TOKEN_KEY": "env-token",
            "ZAPUPI_TIMEOUT": "30",
            "APP_URL": "https://play.example.com",
            "WEBHOOK_PORT": "9090",
        },
    )
    def test_gateway_settings_from_environment(self):
        app = create_app({"TESTING": True})

        self.assertEqual(app.config["ZAPUPI_TOKEN_KEY"], "env-token")
        self.assertEqual(app.config["ZAPUPI_TIMEOUT"], 30.0)
        self.assertEqual(app.config["APP_URL"], "https://play.example.com")
        self.assertEqual(app.config["WEBHOOK_PORT"], 9090)

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        app = create_app({"TESTING": True})

        self.assertEqual(app.config["ZAPUPI_BASE_URL"], "https://zapupi.com/api")
        self.assertEqual(app.config["DEFAULT_CUSTOMER_MOBILE"], "9999999999")
        self.assertEqual(app.config["WEBHOOK_PORT"], 8080)
        self.assertIsNone(app.config["ZAPUPI_WEBHOOK_SECRET"])

    @patch("firebase_admin.initialize_app")
    def test_testing_skips_firebase(self, mock_init):
        create_app({"TESTING": True})
        mock_init.assert_not_called()

    def test_test_config_overrides_environment(self):
        app = create_app({"TESTING": True, "APP_URL": "https://override"})
        self.assertEqual(app.config["APP_URL"], "https://override")

    def test_blueprints_registered(self):
        app = create_app({"TESTING": True})
        for name in (
            "auth",
            "user",
            "game",
            "tournament",
            "wallet",
            "payment",
            "webhook",
            "notification",
            "admin",
        ):
            self.assertIn(name, app.blueprints)

    def test_unknown_route_is_json_404(self):
        client = create_app({"TESTING": True}).test_client()
        response = client.get("/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["status"], "error")


class TestWebhookApp(unittest.TestCase):
    """The standalone receiver only exposes the webhook."""

    def test_only_webhook_routes(self):
        app = create_webhook_app({"TESTING": True})
        rules = {rule.rule for rule in app.url_map.iter_rules()}

        self.assertIn("/webhook", rules)
        self.assertNotIn("/payment/create", rules)

    @patch("arenaclash.payment.routes.firestore")
    def test_rejects_unsigned_webhook(self, mock_firestore):
        app = create_webhook_app({"TESTING": True, "ZAPUPI_WEBHOOK_SECRET": "s"})
        response = app.test_client().post("/webhook", json={"order_id": "1"})
        self.assertEqual(response.status_code, 401)
        mock_firestore.client.return_value.transaction.assert_not_called()


class TestProxyFix(unittest.TestCase):
    """Test case for ProxyFix middleware."""

    def test_https_scheme_with_proxy_headers(self):
        app = create_app({"TESTING": True})

        @app.route("/test_scheme")
        def test_scheme():
            from flask import request

            return request.scheme

        response = app.test_client().get(
            "/test_scheme", headers={"X-Forwarded-Proto": "https"}
        )
        self.assertEqual(response.data.decode(), "https")


if __name__ == "__main__":
    unittest.main()
