import base64
import hashlib
import hmac
import json
import logging
import re
from collections import namedtuple
from urllib.parse import urlencode, urlparse

import jwt
import requests
from flask import abort, current_app, jsonify, redirect, request, url_for
from flask_login import current_user

from .errors import ShopifyAPIError
from .shopify_session import ShopSession, session_storage
from .utils.helper import AdminClient

logger = logging.getLogger(__name__)

WebhookContext = namedtuple("WebhookContext", ["shop", "topic", "payload", "webhook_id"])

SHOP_NAME_PATTERN = r"[a-zA-Z0-9][a-zA-Z0-9\-]*"
RETRY_HEADER = "X-Shopify-Retry-Invalid-Session-Request"


def allowed_shop_domains():
    custom = current_app.config.get("SHOP_CUSTOM_DOMAIN") or ""
    return ["myshopify.com"] + [d.strip() for d in custom.split(",") if d.strip()]


def is_valid_shop_domain(shop):
    if not shop or "/" in shop:
        return False
    domains = "|".join(re.escape(d) for d in allowed_shop_domains())
    return re.fullmatch(rf"{SHOP_NAME_PATTERN}\.({domains})", shop) is not None


# --- Admin requests -------------------------------------------------------

def session_token_from_request():
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header.split(" ", 1)[1].strip()
    return request.args.get("id_token") or request.form.get("id_token")


def shop_from_session_token(token):
    """Verify a Shopify session token and return the shop it was issued for."""
    config = current_app.config
    try:
        claims = jwt.decode(
            token,
            config["SHOPIFY_API_SECRET"],
            algorithms=["HS256"],
            audience=config["SHOPIFY_API_KEY"],
            leeway=10,
            options={"verify_exp": True},
        )
    except jwt.PyJWTError as e:
        logger.info("[Auth] Rejected session token: %s", e)
        return None

    shop = urlparse(claims.get("dest", "")).hostname
    if not is_valid_shop_domain(shop):
        logger.info("[Auth] Session token names an invalid shop: %s", shop)
        return None
    return shop


def load_user(session_id):
    return session_storage.load_session(session_id)


def load_user_from_request(req):
    token = session_token_from_request()
    if not token:
        return None
    shop = shop_from_session_token(token)
    if not shop:
        return None
    return session_storage.load_session(ShopSession.offline_id(shop))


def handle_unauthorized():
    if request.headers.get("Authorization", "").startswith("Bearer "):
        response = jsonify({"success": False, "message": "Invalid session"})
        response.status_code = 401
        response.headers[RETRY_HEADER] = "1"
        return response

    shop = request.args.get("shop")
    if is_valid_shop_domain(shop):
        return redirect(url_for("auth.begin", shop=shop))
    return redirect(url_for("auth.login"))


def get_admin_client():
    return AdminClient.for_session(current_user)


# --- Webhooks -------------------------------------------------------------

def verify_webhook_hmac(raw_body, provided):
    digest = hmac.new(
        current_app.config["SHOPIFY_API_SECRET"].encode("utf-8"),
        raw_body,
        hashlib.sha256,
    ).digest()
    expected = base64.b64encode(digest).decode("utf-8")
    return hmac.compare_digest(expected, provided or "")


def authenticate_webhook(req):
    """Verify a webhook delivery.

    Aborts with 401 if the signature is bad and with 400 unless the body is
    a JSON object.
    """
    raw_body = req.get_data()
    if not verify_webhook_hmac(raw_body, req.headers.get("X-Shopify-Hmac-Sha256")):
        logger.warning("[Webhook] Invalid HMAC for %s", req.path)
        abort(401)

    try:
        payload = json.loads(raw_body or b"{}")
    except ValueError:
        abort(400)
    if not isinstance(payload, dict):
        logger.warning("[Webhook] Payload for %s is not a JSON object", req.path)
        abort(400)

    return WebhookContext(
        shop=req.headers.get("X-Shopify-Shop-Domain"),
        topic=req.headers.get("X-Shopify-Topic"),
        payload=payload,
        webhook_id=req.headers.get("X-Shopify-Webhook-Id"),
    )


# --- OAuth install --------------------------------------------------------

def callback_url():
    app_url = current_app.config.get("SHOPIFY_APP_URL")
    if app_url:
        return f"{app_url.rstrip('/')}{url_for('auth.callback')}"
    return url_for("auth.callback", _external=True)


def build_authorize_url(shop, state):
    config = current_app.config
    query = urlencode({
        "client_id": config["SHOPIFY_API_KEY"],
        "scope": config["SCOPES"],
        "redirect_uri": callback_url(),
        "state": state,
    })
    return f"https://{shop}/admin/oauth/authorize?{query}"


def verify_oauth_hmac(params):
    query = {k: v for k, v in params.items() if k not in ("hmac", "signature")}
    message = "&".join(f"{k}={v}" for k, v in sorted(query.items()))
    expected = hmac.new(
        current_app.config["SHOPIFY_API_SECRET"].encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(expected, params.get("hmac", ""))


def exchange_code(shop, code):
    """Trade an OAuth code for an offline access token and store the session."""
    config = current_app.config
    try:
        response = requests.post(
            f"https://{shop}/admin/oauth/access_token",
            json={
                "client_id": config["SHOPIFY_API_KEY"],
                "client_secret": config["SHOPIFY_API_SECRET"],
                "code": code,
            },
            timeout=15,
        )
    except requests.RequestException as e:
        raise ShopifyAPIError(f"Token exchange failed: {e}") from e

    if response.status_code != 200:
        raise ShopifyAPIError(
            f"Token exchange answered HTTP {response.status_code}",
            errors=[response.text[:500]],
        )

    data = response.json()
    session = ShopSession(
        id=ShopSession.offline_id(shop),
        shop=shop,
        access_token=data["access_token"],
        scope=data.get("scope", ""),
    )
    session_storage.store_session(session)
    logger.info("[Auth] Installed on %s", shop)
    return session
