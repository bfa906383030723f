"""
Checkout error taxonomy.
Services raise these; the HTTP layer maps status_code to the response.
"""


class CheckoutError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequest(CheckoutError):
    """Missing or malformed input."""
    status_code = 400


class SignatureInvalid(CheckoutError):
    """Gateway callback signature does not match."""
    status_code = 400


class NotFound(CheckoutError):
    """Product, order, token or file is absent."""
    status_code = 404


class Expired(CheckoutError):
    """Download token is past its TTL."""
    status_code = 410


class UpstreamError(CheckoutError):
    """Payment gateway call failed."""
    status_code = 502
