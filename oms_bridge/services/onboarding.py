import logging

from pymongo.errors import PyMongoError

from oms_bridge.errors import BridgeError, PartnerAPIError, ShopifyAPIError
from oms_bridge.graphql_queries.query_builders.query_builders import ShopMetadataQueryBuilder
from oms_bridge.models import Realm
from oms_bridge.services.partners import REALM_EXISTS, classify_realm_error

logger = logging.getLogger(__name__)

REALM_ROLES = ["oe", "logistics-admin"]
BRAND_SHOP_TYPE = "Fabrics"
BRAND_CHANNEL_TYPE = "shopify"
BRAND_TIME_ZONE = "-05:00"
# Location lookup is not wired yet; every brand gets this one.
BRAND_LOCATION = {
    "name": "Shop location test 21",
    "address": "Gulberg",
    "phone": "+923184948635",
    "city": "Lahore",
    "country": "PK",
    "channel_location_id": 72754430000,
}

FAILURE_MESSAGE = "Onboarding failed. Please try again."
SUCCESS_MESSAGE = "Onboarding successful!"


def derive_realm_name(shop):
    """``my-cool-shop.myshopify.com`` -> ``my_cool_shop``"""
    return shop.split(".")[0].replace("-", "_")


def split_owner_name(owner_name):
    parts = (owner_name or "").split()
    first_name = parts[0] if parts else ""
    last_name = parts[1] if len(parts) > 1 else ""
    return first_name, last_name


def build_realm_payload(realm_name, email, owner_name):
    first_name, last_name = split_owner_name(owner_name)
    return {
        "realm": realm_name,
        "username": email,
        "email": email,
        "firstName": first_name,
        "lastName": last_name,
        "realmRoles": list(REALM_ROLES),
        "userRoles": list(REALM_ROLES),
    }


def build_brand_payload(shop, account_id, email, currency, access_token):
    return {
        "name": f"{shop.split('.')[0]} Test Brand",
        "company_code": account_id,
        "email": email,
        "shop_type": BRAND_SHOP_TYPE,
        "currency": currency,
        "channel_type": BRAND_CHANNEL_TYPE,
        "time_zone": BRAND_TIME_ZONE,
        "locations": [dict(BRAND_LOCATION)],
        "stores": [
            {
                "base_url": shop,
                "access_token": access_token,
                "currency": currency,
            }
        ],
    }


class BrandOnboarding:
    """Registers a shop with both partner systems.

    Steps run in order and stop at the first failure; nothing already done
    is undone. The only tolerated failure is realm creation reporting that
    the realm exists, which lets a repeat run reach the account-id lookup.
    """

    def __init__(self, admin, session, partners):
        self.admin = admin
        self.session = session
        self.partners = partners

    def fetch_shop_metadata(self):
        data = self.admin.graphql(ShopMetadataQueryBuilder().build())
        shop = data.get("shop")
        if not shop:
            raise ShopifyAPIError("Failed to retrieve shop data from Shopify.")
        return shop

    def create_realm(self, payload):
        try:
            self.partners.create_realm(payload)
        except PartnerAPIError as e:
            if classify_realm_error(e) != REALM_EXISTS:
                raise
            logger.info("[Partner] Realm '%s' already exists. Continuing to next step.", payload["realm"])

    def run(self):
        shop = self.session.shop
        try:
            metadata = self.fetch_shop_metadata()
            email = metadata.get("email")
            currency = metadata.get("currencyCode")
            realm_name = derive_realm_name(shop)

            self.create_realm(build_realm_payload(realm_name, email, metadata.get("shopOwnerName")))
            account_id = self.partners.get_account_id(realm_name)

            Realm(account_id, realm_name, email, shop).save()
            logger.info("[DB] Saved realm %s for %s", realm_name, shop)

            self.partners.onboard_brand(
                build_brand_payload(shop, account_id, email, currency, self.session.access_token)
            )
        except BridgeError as e:
            logger.error("[Onboard] API chain failed for %s: %s", shop, e.detail)
            return {"success": False, "message": FAILURE_MESSAGE, "error": e.detail}
        except PyMongoError as e:
            logger.error("[Onboard] Saving realm failed for %s: %s", shop, e)
            return {"success": False, "message": FAILURE_MESSAGE, "error": str(e)}

        return {
            "success": True,
            "message": SUCCESS_MESSAGE,
            "data": {"realm": realm_name, "accountId": account_id},
        }
