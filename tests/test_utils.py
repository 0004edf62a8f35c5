"""Tests for helpers in arenaclash.utils."""

import datetime
import smtplib
import unittest
from unittest.mock import MagicMock, patch

from arenaclash import create_app
from arenaclash.utils import (
    EmailError,
    format_amount,
    generate_order_id,
    parse_amount,
    send_email,
    snapshot_to_dict,
    timestamp_sort_key,
)


class TestAmounts(unittest.TestCase):
    def test_parse_amount(self):
        self.assertEqual(parse_amount(50), 50.0)
        self.assertEqual(parse_amount("₹50"), 50.0)
        self.assertEqual(parse_amount("1,250.50"), 1250.5)
        self.assertEqual(parse_amount(None), 0.0)
        self.assertEqual(parse_amount("free"), 0.0)
        self.assertEqual(parse_amount(True), 0.0)

    def test_format_amount(self):
        self.assertEqual(format_amount(50), "50")
        self.assertEqual(format_amount(12.5), "12.50")


class TestIdsAndKeys(unittest.TestCase):
    def test_generate_order_id(self):
        order_id = generate_order_id()
        self.assertTrue(order_id.isdigit())
        self.assertGreaterEqual(len(order_id), 16)

    def test_timestamp_sort_key(self):
        ts = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
        self.assertEqual(timestamp_sort_key(ts), ts.timestamp())
        self.assertEqual(timestamp_sort_key(None), 0.0)
        self.assertEqual(timestamp_sort_key("2024"), 0.0)

    def test_snapshot_to_dict(self):
        doc = MagicMock(id="abc")
        doc.to_dict.return_value = {"name": "x"}
        self.assertEqual(snapshot_to_dict(doc), {"name": "x", "id": "abc"})


class TestEmailErrors(unittest.TestCase):
    """Test case for email errors."""

    def setUp(self):
        self.app = create_app({"TESTING": True, "MAIL_SUPPRESS_SEND": False})
        self.ctx = self.app.app_context()
        self.ctx.push()
        self.addCleanup(self.ctx.pop)

    def _send(self):
        send_email(
            "player@example.com",
            "Room details",
            "email/room_details.html",
            participant={"ingameName": "Sniper"},
            tournament={"title": "Sunday Scrim", "game": "BGMI"},
            room_id="1",
            room_password="p",
        )

    @patch("arenaclash.utils.mail.send")
    def test_send_email_smtp_534(self, mock_send):
        mock_send.side_effect = smtplib.SMTPAuthenticationError(534, b"5.7.9 login")

        with self.assertRaises(EmailError) as cm:
            self._send()
        self.assertIn("App Password", str(cm.exception))

    @patch("arenaclash.utils.mail.send")
    def test_send_email_generic_error(self, mock_send):
        mock_send.side_effect = Exception("Some other error")

        with self.assertRaises(EmailError) as cm:
            self._send()
        self.assertIn("Failed to send email: Some other error", str(cm.exception))

    @patch("arenaclash.utils.mail.send")
    def test_send_email_renders_room_details(self, mock_send):
        self._send()
        message = mock_send.call_args[0][0]
        self.assertIn("Sunday Scrim", message.html)
        self.assertEqual(message.recipients, ["player@example.com"])


if __name__ == "__main__":
    unittest.main()
