import hashlib
import hmac
import logging
import re
import time

import httpx

from app.services.errors import GatewayTimeout, GatewayUnavailable, PaymentError

logger = logging.getLogger(__name__)

AUTHENTIC_PAYMENT_STATUSES = {"captured", "authorized"}
PAYMENT_ID_PATTERN = re.compile(r"pay_[A-Za-z0-9]+")


class RazorpayApiError(Exception):
    def __init__(self, message: str, *, status_code: int | None = None, timed_out: bool = False, raw: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out
        self.raw = raw

    def to_payment_error(self) -> PaymentError:
        if self.timed_out:
            return GatewayTimeout("Payment gateway did not respond in time. Please retry.")
        return GatewayUnavailable("Payment gateway is unavailable. Please retry shortly.")


def verify_payment_signature(
    order_id: str | None,
    payment_id: str | None,
    signature: str | None,
    secret: str | None,
    *,
    test_mode: bool = False,
) -> bool:
    if test_mode:
        return True
    if not all(isinstance(value, str) and value for value in (order_id, payment_id, signature, secret)):
        return False
    message = f"{order_id}|{payment_id}".encode("utf-8")
    computed = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
    return hmac.compare_digest(computed.encode("utf-8"), signature.strip().encode("utf-8"))


class RazorpayClient:
    def __init__(self, key_id: str, key_secret: str, base_url: str, timeout: int = 15):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = str(base_url or "").rstrip("/")
        self.timeout = timeout

    def _extract_error_message(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict):
                description = error.get("description")
                if isinstance(description, str) and description.strip():
                    return description.strip()
        text = (response.text or "").strip()
        return text[:300] if text else f"HTTP {response.status_code}"

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        url = f"{self.base_url}{path}"
        start = time.time()
        try:
            with httpx.Client(timeout=self.timeout, auth=(self.key_id, self.key_secret)) as client:
                response = client.request(method, url, json=payload)
        except httpx.TimeoutException as exc:
            raise RazorpayApiError("Razorpay request timed out.", timed_out=True, raw=str(exc)) from exc
        except httpx.HTTPError as exc:
            raise RazorpayApiError("Unable to reach Razorpay.", raw=str(exc)) from exc

        duration_ms = round((time.time() - start) * 1000, 2)
        logger.info("Razorpay API %s %s status=%s duration=%sms", method, path, response.status_code, duration_ms)
        if response.status_code >= 400:
            message = self._extract_error_message(response)
            raise RazorpayApiError(message, status_code=response.status_code, raw=response.text)
        try:
            return response.json()
        except ValueError as exc:
            raise RazorpayApiError("Razorpay returned invalid JSON response.", status_code=response.status_code, raw=response.text) from exc

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> dict:
        # Single attempt: a retried create could leave an orphan order at the gateway.
        data = self._request("POST", "/orders", {"amount": int(amount_minor), "currency": currency, "receipt": receipt})
        if not data.get("id"):
            raise RazorpayApiError("Razorpay order response is missing an id.", raw=str(data))
        return {
            "id": data["id"],
            "amount": data.get("amount", int(amount_minor)),
            "currency": data.get("currency", currency),
            "receipt": data.get("receipt", receipt),
        }

    def fetch_payment(self, payment_id: str) -> dict:
        # The id goes into the URL path, so anything but a Razorpay payment id is refused up front.
        if not isinstance(payment_id, str) or not PAYMENT_ID_PATTERN.fullmatch(payment_id):
            raise RazorpayApiError("Invalid Razorpay payment id.", status_code=400)
        return self._request("GET", f"/payments/{payment_id}")
