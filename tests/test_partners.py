from unittest.mock import MagicMock, patch

import pytest
import requests

from oms_bridge.errors import PartnerAPIError
from oms_bridge.services.partners import (
    REALM_EXISTS,
    REALM_FAILED,
    PartnerClient,
    classify_realm_error,
    reports_existing_realm,
)

# Error page the realm service sends back when the realm is taken.
REALM_EXISTS_HTML = """<!DOCTYPE html>
<html lang="en"><head><meta charset="utf-8"><title>Error</title></head>
<body><pre>Error: The realm already exists<br> &nbsp; &nbsp;at RealmService.create (/app/dist/realm.service.js:41:19)</pre></body>
</html>"""

SERVER_ERROR_HTML = """<!DOCTYPE html>
<html lang="en"><head><title>Error</title></head>
<body><pre>Internal Server Error</pre></body></html>"""


def test_reports_existing_realm_matches_sample_page():
    assert reports_existing_realm(REALM_EXISTS_HTML)
    assert reports_existing_realm(REALM_EXISTS_HTML.encode("utf-8"))
    assert not reports_existing_realm(SERVER_ERROR_HTML)
    assert not reports_existing_realm(None)
    # wording is matched exactly
    assert not reports_existing_realm("the realm already exists")


@pytest.mark.parametrize("error, expected", [
    (PartnerAPIError("x", status_code=500, body=REALM_EXISTS_HTML), REALM_EXISTS),
    (PartnerAPIError("x", status_code=409, body="Conflict"), REALM_EXISTS),
    (PartnerAPIError("x", status_code=400, body='{"errorCode": "REALM_ALREADY_EXISTS"}'), REALM_EXISTS),
    (PartnerAPIError("x", status_code=500, body=SERVER_ERROR_HTML), REALM_FAILED),
    (PartnerAPIError("x", status_code=400, body='{"code": "INVALID_EMAIL"}'), REALM_FAILED),
    (PartnerAPIError("Request failed"), REALM_FAILED),
])
def test_classify_realm_error(error, expected):
    assert classify_realm_error(error) == expected


@pytest.fixture
def partners():
    return PartnerClient("https://realm.example.com/v1/", "https://oe.example.com/configs", "onboard-token", timeout=5)


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_data
    return response


def test_create_realm_posts_payload(partners):
    with patch("oms_bridge.services.partners.requests.request") as request:
        request.return_value = _response(json_data={"ok": True})
        partners.create_realm({"realm": "my_shop"})

    method, url = request.call_args.args
    assert method == "POST"
    assert url == "https://realm.example.com/v1/realm/create"
    assert request.call_args.kwargs["json"] == {"realm": "my_shop"}
    assert request.call_args.kwargs["timeout"] == 5


def test_create_realm_failure_keeps_body(partners):
    with patch("oms_bridge.services.partners.requests.request") as request:
        request.return_value = _response(status_code=500, text=REALM_EXISTS_HTML)
        with pytest.raises(PartnerAPIError) as exc_info:
            partners.create_realm({"realm": "my_shop"})

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == REALM_EXISTS_HTML


def test_get_account_id(partners):
    with patch("oms_bridge.services.partners.requests.request") as request:
        request.return_value = _response(json_data={"accountId": "acc-123"})
        assert partners.get_account_id("my_shop") == "acc-123"
    assert request.call_args.args == ("GET", "https://realm.example.com/v1/realms/my_shop/account-id")


@pytest.mark.parametrize("json_data", [{"error": "not found"}, {"accountId": None}, {}, None])
def test_get_account_id_rejects_bad_payloads(partners, json_data):
    with patch("oms_bridge.services.partners.requests.request") as request:
        request.return_value = _response(json_data=json_data, text="oops")
        with pytest.raises(PartnerAPIError) as exc_info:
            partners.get_account_id("my_shop")
    assert exc_info.value.message == "Failed to retrieve account ID from realm API."


def test_onboard_brand_sends_token_header(partners):
    with patch("oms_bridge.services.partners.requests.request") as request:
        request.return_value = _response(json_data={"id": 7})
        assert partners.onboard_brand({"name": "my-shop Test Brand"}) == {"id": 7}

    assert request.call_args.args[1] == "https://oe.example.com/configs/brands/onboard"
    assert request.call_args.kwargs["headers"]["token"] == "onboard-token"


def test_connect_sales_channel_passes_tokens(partners):
    with patch("oms_bridge.services.partners.requests.request") as request:
        request.return_value = _response(text="connected")
        partners.connect_sales_channel("auth-abc", "conn-xyz", {"baseUrl": "https://s.myshopify.com"})

    kwargs = request.call_args.kwargs
    assert request.call_args.args[1] == "https://oe.example.com/configs/connect-sales-channel"
    assert kwargs["params"] == {"connection_token": "conn-xyz"}
    assert kwargs["headers"]["Authorization"] == "auth-abc"


def test_transport_error_becomes_partner_error(partners):
    with patch("oms_bridge.services.partners.requests.request") as request:
        request.side_effect = requests.Timeout("slow")
        with pytest.raises(PartnerAPIError) as exc_info:
            partners.onboard_brand({})
    assert exc_info.value.status_code is None
