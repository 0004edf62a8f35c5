"""Standalone receiver for payment gateway webhooks."""

from arenaclash import create_webhook_app

app = create_webhook_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["WEBHOOK_PORT"])  # nosec
