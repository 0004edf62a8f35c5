"""HTTP client for the ZapUPI payment gateway."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

from arenaclash.core.constants import ZAPUPI_BASE_URL, ZAPUPI_TIMEOUT_SECONDS
from arenaclash.errors import PaymentGatewayError


class ZapUPIClient:
    """Posts form-encoded requests to the gateway.

    Every call carries the merchant ``token_key`` and ``secret_key``. A call
    succeeds only when the HTTP status is OK and the body says
    ``"status": "success"``; anything else raises PaymentGatewayError.
    """

    def __init__(
        self,
        token_key: str | None,
        secret_key: str | None,
        base_url: str = ZAPUPI_BASE_URL,
        timeout: float = ZAPUPI_TIMEOUT_SECONDS,
    ) -> None:
        self.token_key = token_key
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ZapUPIClient:
        """Build a client from Flask configuration."""
        return cls(
            token_key=config.get("ZAPUPI_TOKEN_KEY"),
            secret_key=config.get("ZAPUPI_SECRET_KEY"),
            base_url=config.get("ZAPUPI_BASE_URL") or ZAPUPI_BASE_URL,
            timeout=float(config.get("ZAPUPI_TIMEOUT") or ZAPUPI_TIMEOUT_SECONDS),
        )

    def _post(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.token_key or not self.secret_key:
            raise PaymentGatewayError("Payment gateway is not configured.")

        url = f"{self.base_url}/{endpoint}"
        body = {"token_key": self.token_key, "secret_key": self.secret_key, **params}
        try:
            response = requests.post(url, data=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.error(f"ZapUPI {endpoint} request failed: {e}")
            raise PaymentGatewayError(f"Could not reach the payment gateway: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logging.error(
                f"ZapUPI {endpoint} returned a non-JSON body (HTTP {response.status_code})"
            )
            raise PaymentGatewayError("Invalid response from the payment gateway.") from e

        if not isinstance(data, dict):
            data = {}
        # Never log the request body, it carries the merchant keys.
        logging.info(
            f"ZapUPI {endpoint} for order {params.get('order_id')}: "
            f"HTTP {response.status_code}, status {data.get('status')}"
        )
        if not response.ok or data.get("status") != "success":
            raise PaymentGatewayError(
                data.get("message") or "Gateway Error", payload=data
            )
        return data

    def create_order(
        self,
        amount: float,
        order_id: str,
        customer_mobile: str,
        redirect_url: str,
        remark: str,
    ) -> dict[str, Any]:
        """Open a payment session and return the gateway response."""
        return self._post(
            "create-order",
            {
                "amount": amount,
                "order_id": order_id,
                "customer_mobile": customer_mobile,
                "redirect_url": redirect_url,
                "remark": remark,
            },
        )

    def order_status(self, order_id: str) -> dict[str, Any]:
        """Return the ``data`` block describing an order."""
        result = self._post("order-status", {"order_id": order_id})
        data = result.get("data")
        return data if isinstance(data, dict) else {}
