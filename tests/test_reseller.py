from unittest.mock import MagicMock

import pytest

from oms_bridge.errors import PartnerAPIError, ValidationError
from oms_bridge.services.reseller import SalesChannelConnector, parse_connection_token
from tests.conftest import SHOP

CONTEXT_DATA = {
    "shop": {"currencyCode": "USD"},
    "locations": {"edges": [{"node": {"id": "gid://shopify/Location/72754430000", "address": {"countryCode": "PK"}}}]},
    "currentAppInstallation": {"accessScopes": [{"handle": "write_products"}, {"handle": "read_orders"}]},
}


def test_parse_connection_token_splits_on_first_colon():
    assert parse_connection_token("auth:conn") == ("auth", "conn")
    assert parse_connection_token(" auth:conn:with:colons ") == ("auth", "conn:with:colons")


@pytest.mark.parametrize("raw", [None, "", "no-colon-here", ":conn", "auth:"])
def test_parse_connection_token_rejects_malformed(raw):
    with pytest.raises(ValidationError):
        parse_connection_token(raw)


@pytest.fixture
def admin():
    admin = MagicMock()
    admin.graphql.return_value = CONTEXT_DATA
    return admin


@pytest.fixture
def partners():
    return MagicMock()


def connector(admin, partners, shop_session):
    return SalesChannelConnector(admin, shop_session, partners, prefix="JAW")


@pytest.mark.parametrize("raw", ["", "justonetoken", "   "])
def test_malformed_token_makes_no_calls(app, admin, partners, shop_session, raw):
    result = connector(admin, partners, shop_session).run(raw)

    assert result["success"] is False
    assert result["code"] == 400
    assert "authorization_token:connection_token" in result["message"]
    admin.graphql.assert_not_called()
    partners.connect_sales_channel.assert_not_called()


def test_connects_sales_channel(app, admin, partners, shop_session):
    result = connector(admin, partners, shop_session).run("auth-abc:conn-xyz")

    assert result == {"success": True, "message": "Sales channel connected successfully!"}
    auth_token, connection_token, payload = partners.connect_sales_channel.call_args.args
    assert auth_token == "auth-abc"
    assert connection_token == "conn-xyz"
    assert payload == {
        "accessToken": "shpat_test_token",
        "baseUrl": f"https://{SHOP}",
        "preFix": "JAW",
        "currencyCode": "USD",
        "locationId": "72754430000",
        "scope": ["write_products", "read_orders"],
    }


@pytest.mark.parametrize("data", [
    {**CONTEXT_DATA, "locations": {"edges": []}},
    {**CONTEXT_DATA, "currentAppInstallation": {"accessScopes": None}},
    {"shop": {"currencyCode": "USD"}},
])
def test_missing_location_or_scopes_fails(app, admin, partners, shop_session, data):
    admin.graphql.return_value = data

    result = connector(admin, partners, shop_session).run("auth:conn")

    assert result["success"] is False
    assert result["error"] == "Failed to retrieve essential data from Shopify."
    partners.connect_sales_channel.assert_not_called()


def test_partner_failure_is_reported(app, admin, partners, shop_session):
    partners.connect_sales_channel.side_effect = PartnerAPIError(
        "HTTP 401", status_code=401, body='{"message": "invalid connection token"}'
    )

    result = connector(admin, partners, shop_session).run("auth:conn")

    assert result == {
        "success": False,
        "message": "Failed to connect sales channel. Please check your token and try again.",
        "error": {"message": "invalid connection token"},
    }
