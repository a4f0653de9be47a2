from unittest.mock import patch

from oms_bridge.services.onboarding import BrandOnboarding
from oms_bridge.services.partners import PartnerClient
from oms_bridge.utils.helper import AdminClient

SHOP_DATA = {"shop": {"email": "owner@example.com", "shopOwnerName": "Ada Lovelace", "currencyCode": "USD"}}


def test_index_links_pages(logged_in_client):
    response = logged_in_client.get("/app")
    assert response.status_code == 200
    for path in (b"/app/products/create", b"/app/orders/create", b"/app/onboard", b"/app/reseller"):
        assert path in response.data


def test_onboard_page_renders(logged_in_client):
    response = logged_in_client.get("/app/onboard")
    assert response.status_code == 200
    assert b"Onboard Your Brand" in response.data


def test_onboard_post_returns_json_result(logged_in_client):
    with patch.object(AdminClient, "graphql", return_value=SHOP_DATA), \
            patch.object(PartnerClient, "create_realm") as create_realm, \
            patch.object(PartnerClient, "get_account_id", return_value="acc-9"), \
            patch.object(PartnerClient, "onboard_brand") as onboard_brand:
        response = logged_in_client.post("/app/onboard")

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "message": "Onboarding successful!",
        "data": {"realm": "my_cool_shop", "accountId": "acc-9"},
    }
    create_realm.assert_called_once()
    onboard_brand.assert_called_once()


def test_onboard_post_failure_is_structured(logged_in_client):
    failure = {"success": False, "message": "Onboarding failed. Please try again.", "error": "boom"}
    with patch.object(BrandOnboarding, "run", return_value=failure):
        response = logged_in_client.post("/app/onboard")

    assert response.status_code == 502
    assert response.get_json() == failure


def test_reseller_rejects_malformed_token_without_calls(logged_in_client):
    with patch.object(AdminClient, "graphql") as graphql, \
            patch.object(PartnerClient, "connect_sales_channel") as connect:
        response = logged_in_client.post("/app/reseller", data={"token_input": "missing-separator"})

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert "authorization_token:connection_token" in body["message"]
    graphql.assert_not_called()
    connect.assert_not_called()


def test_reseller_connects(logged_in_client):
    context = {
        "shop": {"currencyCode": "USD"},
        "locations": {"edges": [{"node": {"id": "gid://shopify/Location/1", "address": {"countryCode": "US"}}}]},
        "currentAppInstallation": {"accessScopes": [{"handle": "write_orders"}]},
    }
    with patch.object(AdminClient, "graphql", return_value=context), \
            patch.object(PartnerClient, "connect_sales_channel") as connect:
        response = logged_in_client.post("/app/reseller", data={"token_input": "auth:conn"})

    assert response.status_code == 200
    assert response.get_json()["success"] is True
    assert connect.call_args.args[:2] == ("auth", "conn")


def test_debug_webhooks_lists_subscriptions(logged_in_client):
    data = {"webhookSubscriptions": {"edges": [{"node": {
        "id": "gid://shopify/WebhookSubscription/1",
        "topic": "ORDERS_CREATE",
        "format": "JSON",
        "createdAt": "2025-01-01T00:00:00Z",
        "updatedAt": "2025-01-01T00:00:00Z",
        "apiVersion": {"handle": "2025-01"},
        "endpoint": {"__typename": "WebhookHttpEndpoint", "callbackUrl": "https://bridge.example.com/webhooks/orders/create"},
    }}]}}
    with patch.object(AdminClient, "graphql", return_value=data):
        response = logged_in_client.get("/app/debug/webhooks")

    assert response.status_code == 200
    assert b"Found 1 webhook(s)" in response.data
    assert b"https://bridge.example.com/webhooks/orders/create" in response.data


def test_debug_webhooks_shows_errors(logged_in_client):
    from oms_bridge.errors import ShopifyAPIError

    with patch.object(AdminClient, "graphql", side_effect=ShopifyAPIError("Shopify API error")):
        response = logged_in_client.get("/app/debug/webhooks")

    assert response.status_code == 200
    assert b"Error loading webhooks" in response.data
