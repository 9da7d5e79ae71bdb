class PaymentError(Exception):
    """Base for every failure the payment services surface to the API layer."""

    status_code = 500
    code = "payment_error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class NotFound(PaymentError):
    status_code = 404
    code = "not_found"


class Conflict(PaymentError):
    status_code = 409
    code = "conflict"


class GatewayUnavailable(PaymentError):
    status_code = 503
    code = "gateway_unavailable"


class GatewayTimeout(PaymentError):
    status_code = 504
    code = "gateway_timeout"


class VerificationFailed(PaymentError):
    status_code = 400
    code = "verification_failed"


class InvalidInput(PaymentError):
    status_code = 422
    code = "invalid_input"


class IllegalTransition(Conflict):
    code = "illegal_transition"
