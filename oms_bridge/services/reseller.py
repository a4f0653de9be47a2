import logging

from oms_bridge.errors import BridgeError, ShopifyAPIError, ValidationError
from oms_bridge.graphql_queries.query_builders.query_builders import ResellerContextQueryBuilder
from oms_bridge.utils.helper import gid_tail, shop_url

logger = logging.getLogger(__name__)

TOKEN_FORMAT_MESSAGE = "Invalid token format. Please use 'authorization_token:connection_token'."
FAILURE_MESSAGE = "Failed to connect sales channel. Please check your token and try again."
SUCCESS_MESSAGE = "Sales channel connected successfully!"


def parse_connection_token(raw_token):
    """Split ``authToken:connectionToken`` on the first colon."""
    raw_token = (raw_token or "").strip()
    if ":" not in raw_token:
        raise ValidationError(TOKEN_FORMAT_MESSAGE)
    auth_token, connection_token = raw_token.split(":", 1)
    if not auth_token or not connection_token:
        raise ValidationError(TOKEN_FORMAT_MESSAGE)
    return auth_token, connection_token


class SalesChannelConnector:
    def __init__(self, admin, session, partners, prefix):
        self.admin = admin
        self.session = session
        self.partners = partners
        self.prefix = prefix

    def fetch_context(self):
        data = self.admin.graphql(ResellerContextQueryBuilder().build(locations_limit=1))
        edges = (data.get("locations") or {}).get("edges") or []
        installation = data.get("currentAppInstallation") or {}
        scopes = installation.get("accessScopes")
        if not edges or scopes is None:
            raise ShopifyAPIError("Failed to retrieve essential data from Shopify.")

        location = edges[0]["node"]
        return {
            "currency_code": (data.get("shop") or {}).get("currencyCode"),
            "location_id": gid_tail(location["id"]),
            "country_code": (location.get("address") or {}).get("countryCode"),
            "scopes": [scope["handle"] for scope in scopes],
        }

    def build_payload(self, context):
        return {
            "accessToken": self.session.access_token,
            "baseUrl": shop_url(self.session.shop),
            "preFix": self.prefix,
            "currencyCode": context["currency_code"],
            "locationId": context["location_id"],
            "scope": context["scopes"],
        }

    def run(self, raw_token):
        try:
            auth_token, connection_token = parse_connection_token(raw_token)
        except ValidationError as e:
            return {"success": False, "message": e.message, "error": e.detail, "code": 400}

        try:
            context = self.fetch_context()
            self.partners.connect_sales_channel(auth_token, connection_token, self.build_payload(context))
        except BridgeError as e:
            logger.error("[Reseller] API chain failed for %s: %s", self.session.shop, e.detail)
            return {"success": False, "message": FAILURE_MESSAGE, "error": e.detail}

        return {"success": True, "message": SUCCESS_MESSAGE}
