# dietbuddy/payments.py
from __future__ import annotations

import hashlib
import hmac

import requests

from .errors import UpstreamError

PLACEHOLDER_KEY_ID = "rzp_test_placeholder"
PLACEHOLDER_KEY_SECRET = "placeholder_secret"


class RazorpayConfig:
    """Gateway credentials, built once from the app config in create_app."""

    def __init__(self, key_id: str, key_secret: str, api_base: str = "https://api.razorpay.com/v1", timeout: int = 20):
        key_id = (key_id or "").strip()
        key_secret = (key_secret or "").strip()
        self.has_valid_credentials = bool(key_id and key_secret)
        self.key_id = key_id if self.has_valid_credentials else PLACEHOLDER_KEY_ID
        self.key_secret = key_secret if self.has_valid_credentials else PLACEHOLDER_KEY_SECRET
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_app_config(cls, config) -> "RazorpayConfig":
        return cls(
            key_id=config.get("RAZORPAY_KEY_ID", ""),
            key_secret=config.get("RAZORPAY_KEY_SECRET", ""),
            api_base=config.get("RAZORPAY_API_BASE", "https://api.razorpay.com/v1"),
            timeout=int(config.get("RAZORPAY_TIMEOUT_SECONDS", 20)),
        )


class RazorpayGateway:
    def __init__(self, config: RazorpayConfig):
        self.config = config

    @property
    def key_id(self) -> str:
        return self.config.key_id

    def create_order(self, amount: int, currency: str, receipt: str) -> dict:
        if not self.config.has_valid_credentials:
            raise UpstreamError("Razorpay credentials not configured")

        payload = {
            "amount": int(amount),
            "currency": currency,
            "receipt": receipt[:40],
            "payment_capture": 1,
        }
        try:
            r = requests.post(
                f"{self.config.api_base}/orders",
                auth=(self.config.key_id, self.config.key_secret),
                json=payload,
                timeout=self.config.timeout,
            )
            j = r.json() if r.content else {}
        except (requests.RequestException, ValueError) as e:
            raise UpstreamError(f"Razorpay request failed: {e}") from e

        if 200 <= r.status_code < 300 and j.get("id"):
            return {"id": j["id"], "amount": j.get("amount", payload["amount"]), "currency": j.get("currency", currency)}

        error = (j.get("error") or {}).get("description") if isinstance(j.get("error"), dict) else None
        raise UpstreamError(error or f"Razorpay HTTP {r.status_code}")

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(self.config.key_secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def verify_signature(self, order_id: str | None, payment_id: str | None, signature: str | None) -> bool:
        if not order_id or not payment_id or not signature:
            return False
        return hmac.compare_digest(self.expected_signature(order_id, payment_id), signature.strip())
