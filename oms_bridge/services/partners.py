"""HTTP clients for the two partner systems.

Partner A (realm service) owns tenants: a realm per shop plus its account id.
Partner B (OMS configs) owns brands and sales-channel links.
"""
import logging

import requests

from oms_bridge.errors import PartnerAPIError

logger = logging.getLogger(__name__)

REALM_EXISTS = "realm_exists"
REALM_FAILED = "realm_failed"

REALM_EXISTS_CODES = {"REALM_ALREADY_EXISTS", "realm_already_exists"}
REALM_EXISTS_PHRASE = "The realm already exists"


def reports_existing_realm(body) -> bool:
    """True when an unstructured realm-create error body says the realm exists.

    The realm service answers with an HTML error page, so this is a plain
    substring match on its wording.
    """
    if body is None:
        return False
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return REALM_EXISTS_PHRASE in str(body)


def classify_realm_error(error: PartnerAPIError) -> str:
    """Tag a realm-create failure as REALM_EXISTS or REALM_FAILED.

    Structured signals are checked first (an error code in a JSON body,
    then HTTP 409); the phrase match is the fallback.
    """
    payload = error.json()
    if payload:
        code = payload.get("errorCode") or payload.get("code")
        if code in REALM_EXISTS_CODES:
            return REALM_EXISTS
    if error.status_code == 409:
        return REALM_EXISTS
    if reports_existing_realm(error.body):
        return REALM_EXISTS
    return REALM_FAILED


class PartnerClient:
    def __init__(self, realm_api_url, oe_api_url, onboard_token, timeout=15):
        self.realm_api_url = realm_api_url.rstrip("/")
        self.oe_api_url = oe_api_url.rstrip("/")
        self.onboard_token = onboard_token
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            realm_api_url=config["REALM_API_URL"],
            oe_api_url=config["OE_API_URL"],
            onboard_token=config["OE_ONBOARD_TOKEN"],
            timeout=config.get("PARTNER_TIMEOUT", 15),
        )

    def _send(self, method, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("[Partner] %s %s failed: %s", method, url, e)
            raise PartnerAPIError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            logger.error("[Partner] %s %s answered HTTP %s", method, url, response.status_code)
            raise PartnerAPIError(
                f"{method} {url} answered HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    def create_realm(self, payload):
        url = f"{self.realm_api_url}/realm/create"
        self._send("POST", url, json=payload, headers={"Content-Type": "application/json"})
        logger.info("[Partner] Realm %s created", payload.get("realm"))

    def get_account_id(self, realm_name):
        url = f"{self.realm_api_url}/realms/{realm_name}/account-id"
        response = self._send("GET", url)
        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict) or data.get("error") or not data.get("accountId"):
            raise PartnerAPIError(
                "Failed to retrieve account ID from realm API.",
                status_code=response.status_code,
                body=data if data is not None else response.text,
            )
        return data["accountId"]

    def onboard_brand(self, payload):
        url = f"{self.oe_api_url}/brands/onboard"
        headers = {"token": self.onboard_token, "Content-Type": "application/json"}
        response = self._send("POST", url, json=payload, headers=headers)
        logger.info("[Partner] Brand %s onboarded", payload.get("name"))
        return _json_or_text(response)

    def connect_sales_channel(self, auth_token, connection_token, payload):
        url = f"{self.oe_api_url}/connect-sales-channel"
        headers = {"Content-Type": "application/json", "Authorization": auth_token}
        response = self._send(
            "POST", url, json=payload, headers=headers, params={"connection_token": connection_token}
        )
        logger.info("[Partner] Sales channel connected for %s", payload.get("baseUrl"))
        return _json_or_text(response)


def _json_or_text(response):
    try:
        return response.json()
    except ValueError:
        return response.text
