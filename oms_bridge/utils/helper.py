import logging

import requests
from flask import current_app

from oms_bridge.errors import ShopifyAPIError, UserErrors

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def shopify_headers(access_token):
    return {
        "Content-Type": "application/json",
        "X-Shopify-Access-Token": access_token,
    }

def shop_url(shop):
    return f"https://{shop}"

def shopify_request(query, shop_url, access_token, api_version, variables=None):
    payload = {"query": query}
    if variables:
        payload["variables"] = variables
    headers = shopify_headers(access_token=access_token)
    shopify_graphql_url = f"{shop_url}/admin/api/{api_version}/graphql.json"
    response = requests.post(shopify_graphql_url, json=payload, headers=headers, timeout=DEFAULT_TIMEOUT)
    return response


class AdminClient:
    """Issues Admin GraphQL calls on behalf of one installed shop."""

    def __init__(self, shop, access_token, api_version):
        self.shop = shop
        self.access_token = access_token
        self.api_version = api_version

    @classmethod
    def for_session(cls, session):
        return cls(session.shop, session.access_token, current_app.config["SHOPIFY_API_VERSION"])

    def graphql(self, query, variables=None):
        """Run a query and return its ``data`` object.

        Raises ShopifyAPIError on transport failures, non-200 answers and
        top-level ``errors``. ``userErrors`` are left for the caller.
        """
        try:
            response = shopify_request(
                query=query,
                shop_url=shop_url(self.shop),
                access_token=self.access_token,
                api_version=self.api_version,
                variables=variables,
            )
        except requests.RequestException as e:
            logger.error("[Shopify] Request to %s failed: %s", self.shop, e)
            raise ShopifyAPIError(f"Request to Shopify failed: {e}") from e

        if response.status_code != 200:
            logger.error("[Shopify] %s answered HTTP %s", self.shop, response.status_code)
            raise ShopifyAPIError(
                f"Shopify answered HTTP {response.status_code}",
                errors=[response.text[:500]],
            )

        try:
            json_data = response.json()
        except ValueError as e:
            raise ShopifyAPIError("Shopify returned a non-JSON response") from e

        if json_data.get("errors"):
            logger.error("[Shopify] GraphQL errors for %s: %s", self.shop, json_data["errors"])
            raise ShopifyAPIError("Shopify API error", errors=json_data["errors"])

        return json_data.get("data") or {}


def gid_tail(gid: str) -> str:
    """``gid://shopify/Location/72754430000`` -> ``72754430000``"""
    return gid.rsplit("/", 1)[-1]


def map_user_errors(user_errors):
    """Key each userError by the second element of its field path.

    ``{"field": ["product", "title"], "message": "..."}`` lands under ``title``;
    a missing or one-element path lands under ``general``. Later errors for
    the same key win.
    """
    errors = {}
    for error in user_errors or []:
        field = error.get("field") or []
        key = field[1] if len(field) > 1 else "general"
        errors[key] = error.get("message", "")
    return errors


def raise_for_user_errors(payload):
    user_errors = (payload or {}).get("userErrors") or []
    if user_errors:
        raise UserErrors(map_user_errors(user_errors))
