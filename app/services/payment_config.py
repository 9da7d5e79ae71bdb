import logging

from app.core.config import Settings
from app.services.errors import GatewayUnavailable
from app.services.razorpay import RazorpayClient

logger = logging.getLogger(__name__)


class PaymentConfig:
    """Gateway client plus mode flags, built once at startup and injected."""

    def __init__(self, *, key_id: str | None, key_secret: str | None, currency: str, test_mode: bool, gateway=None):
        self.key_id = key_id
        self.key_secret = key_secret
        self.currency = currency
        self.test_mode = bool(test_mode)
        self.gateway = gateway

    @property
    def is_configured(self) -> bool:
        return bool(self.key_id and self.key_secret and self.gateway is not None)

    def require_gateway(self):
        if not self.is_configured:
            raise GatewayUnavailable(
                "Payment service not configured. Please contact administrator.",
                code="gateway_not_configured",
            )
        return self.gateway


def build_payment_config(settings: Settings) -> PaymentConfig:
    key_id = (settings.razorpay_key_id or "").strip() or None
    key_secret = (settings.razorpay_key_secret or "").strip() or None
    gateway = None
    if key_id and key_secret:
        gateway = RazorpayClient(
            key_id=key_id,
            key_secret=key_secret,
            base_url=str(settings.razorpay_base_url),
            timeout=settings.razorpay_timeout_seconds,
        )
        logger.info("Payment gateway running in %s mode", "TEST" if settings.payment_test_mode else "PRODUCTION")
    else:
        logger.warning("Razorpay credentials not found. Payment endpoints will answer 503.")
    return PaymentConfig(
        key_id=key_id,
        key_secret=key_secret,
        currency=(settings.payment_currency or "INR").upper(),
        test_mode=settings.payment_test_mode,
        gateway=gateway,
    )
