"""
Payment Gateway — Razorpay Orders API client and payment signature verification.

One client is built at startup from settings and injected into the renewal
workflow; it holds the HTTP connection pool and the shared key secret.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.config import Settings
from app.utils.hashing import generate_hmac_sha256, signatures_match

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Order creation failed at the provider."""

    def __init__(self, message: str, description: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.description = description
        self.code = code


class RazorpayClient:
    """Thin synchronous client for the subset of Razorpay used by renewals."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.key_id = key_id
        self._key_secret = key_secret
        self._http = httpx.Client(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
            transport=transport,
        )
        logger.info(
            "Razorpay client initialized (key id: %s, secret: %s)",
            key_id or "not set",
            "****" if key_secret else "not set",
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayClient":
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_BASE_URL,
            timeout=settings.RAZORPAY_TIMEOUT_SECONDS,
        )

    def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, Any]) -> Dict[str, Any]:
        """Create a provider order. Returns the provider's order object (has `id`).

        Raises:
            PaymentGatewayError: on transport failure or a non-2xx response.
        """
        payload = {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes}
        try:
            response = self._http.post("/orders", json=payload)
        except httpx.HTTPError as exc:
            logger.error("Razorpay order request failed: %s", exc)
            raise PaymentGatewayError(str(exc) or exc.__class__.__name__) from exc

        if response.is_success:
            order = response.json()
            logger.info("Razorpay order %s created for receipt %s", order.get("id"), receipt)
            return order

        error: Dict[str, Any] = {}
        try:
            error = response.json().get("error") or {}
        except ValueError:
            pass
        logger.error(
            "Razorpay order creation error: status=%s code=%s description=%s source=%s step=%s reason=%s",
            response.status_code,
            error.get("code"),
            error.get("description"),
            error.get("source"),
            error.get("step"),
            error.get("reason"),
        )
        raise PaymentGatewayError(
            f"Razorpay responded with HTTP {response.status_code}",
            description=error.get("description"),
            code=error.get("code"),
        )

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        """HMAC-SHA256 hex digest of "{order_id}|{payment_id}" keyed by the key secret."""
        return generate_hmac_sha256(f"{order_id}|{payment_id}", self._key_secret)

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return signatures_match(self.expected_signature(order_id, payment_id), signature)

    def close(self) -> None:
        self._http.close()
