import json


class BridgeError(Exception):
    """Base exception for everything the app raises on purpose."""

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class ConfigurationError(BridgeError):
    """Raised at startup when a required setting is missing."""
    pass


class ValidationError(BridgeError):
    """Raised when user input cannot be used as given."""
    pass


class ShopifyAPIError(BridgeError):
    """Raised when a GraphQL call fails at the transport level or returns top-level errors."""

    def __init__(self, message, errors=None):
        super().__init__(message, detail=errors)
        self.errors = errors or []


class UserErrors(BridgeError):
    """Raised when a mutation answers with a non-empty userErrors array."""

    def __init__(self, fields):
        super().__init__("Shopify rejected the request", detail=fields)
        self.fields = fields


class PartnerAPIError(BridgeError):
    """Raised when a partner HTTP call fails."""

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message, detail=_decode_body(body) if body is not None else message)
        self.status_code = status_code
        self.body = body

    def json(self):
        decoded = _decode_body(self.body)
        return decoded if isinstance(decoded, dict) else None


class SessionNotFound(BridgeError):
    """Raised when a session record to delete does not exist."""
    pass


def _decode_body(body):
    if isinstance(body, (dict, list)):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        return body
