import logging

from oms_bridge.errors import ShopifyAPIError
from oms_bridge.graphql_queries.query_builders.query_builders import (
    WebhookSubscriptionCreateMutationBuilder,
    WebhookSubscriptionsQueryBuilder,
)

logger = logging.getLogger(__name__)

WEBHOOK_TOPICS = {
    "ORDERS_CREATE": "/webhooks/orders/create",
    "PRODUCTS_CREATE": "/webhooks/products/create",
    "APP_UNINSTALLED": "/webhooks/app/uninstalled",
}


def register_webhooks(admin, app_url):
    """Subscribe the shop to every topic this app handles.

    Failures are logged per topic and never raised; a reinstall usually
    reports the address as already taken.
    """
    mutation = WebhookSubscriptionCreateMutationBuilder().build()
    registered = []
    for topic, path in WEBHOOK_TOPICS.items():
        variables = {
            "topic": topic,
            "webhookSubscription": {"callbackUrl": f"{app_url.rstrip('/')}{path}", "format": "JSON"},
        }
        try:
            data = admin.graphql(mutation, variables=variables)
        except ShopifyAPIError as e:
            logger.warning("[Webhook] Registering %s failed: %s", topic, e.detail)
            continue

        user_errors = (data.get("webhookSubscriptionCreate") or {}).get("userErrors") or []
        if user_errors:
            logger.warning("[Webhook] Registering %s rejected: %s", topic, user_errors)
            continue
        registered.append(topic)

    logger.info("[Webhook] Registered %s for %s", registered, admin.shop)
    return registered


def list_webhooks(admin, limit=50):
    data = admin.graphql(WebhookSubscriptionsQueryBuilder().build(limit=limit))
    webhooks = []
    for edge in (data.get("webhookSubscriptions") or {}).get("edges", []):
        node = edge["node"]
        endpoint = node.get("endpoint") or {}
        webhooks.append({
            "id": node.get("id"),
            "topic": node.get("topic"),
            "format": node.get("format"),
            "address": endpoint.get("callbackUrl"),
            "created_at": node.get("createdAt"),
            "updated_at": node.get("updatedAt"),
            "api_version": (node.get("apiVersion") or {}).get("handle"),
        })
    return webhooks
