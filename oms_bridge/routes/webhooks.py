import logging

from flask import Blueprint, request

from ..auth import authenticate_webhook
from ..errors import SessionNotFound
from ..shopify_session import session_storage

logger = logging.getLogger(__name__)

webhooks_bp = Blueprint('webhooks', __name__, url_prefix='/webhooks')

@webhooks_bp.route('/orders/create', methods=['POST'])
def orders_create():
    webhook = authenticate_webhook(request)
    payload = webhook.payload
    logger.info("[Webhook] Order created on %s: %s", webhook.shop, {
        "id": payload.get("id"),
        "name": payload.get("name"),
        "total_price": payload.get("total_price"),
        "created_at": payload.get("created_at"),
    })
    return "OK", 200

@webhooks_bp.route('/products/create', methods=['POST'])
def products_create():
    webhook = authenticate_webhook(request)
    payload = webhook.payload
    logger.info("[Webhook] Product created on %s: %s", webhook.shop, {
        "id": payload.get("id"),
        "title": payload.get("title"),
        "handle": payload.get("handle"),
        "created_at": payload.get("created_at"),
    })
    return "OK", 200

@webhooks_bp.route('/app/uninstalled', methods=['POST'])
def app_uninstalled():
    webhook = authenticate_webhook(request)
    logger.info("[Webhook] Received %s webhook for %s", webhook.topic, webhook.shop)

    # Deliveries repeat; the session may already be gone.
    sessions = session_storage.find_sessions_by_shop(webhook.shop)
    if sessions:
        try:
            session_storage.delete_session(sessions[0].id)
        except SessionNotFound as e:
            logger.info("[Webhook] session not found in DB: %s", e)
    return "OK", 200
