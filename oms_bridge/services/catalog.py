import logging

from oms_bridge.errors import ShopifyAPIError
from oms_bridge.graphql_queries.query_builders.query_builders import (
    OrderCreateMutationBuilder,
    ProductCreateMutationBuilder,
    VariantsBulkUpdateMutationBuilder,
)
from oms_bridge.models import Order, Product
from oms_bridge.utils.helper import raise_for_user_errors

logger = logging.getLogger(__name__)


def create_product(admin, title, price):
    """Create a product, set its default variant's price, then mirror it.

    ``productCreate`` takes no price in this API version, hence the second
    mutation. Raises UserErrors if either mutation is rejected.
    """
    data = admin.graphql(
        ProductCreateMutationBuilder().build(variants_limit=1),
        variables={"product": {"title": title}},
    )
    payload = data.get("productCreate") or {}
    raise_for_user_errors(payload)

    product = payload.get("product")
    if not product:
        raise ShopifyAPIError("Shopify did not return the created product")
    edges = (product.get("variants") or {}).get("edges") or []
    if not edges:
        raise ShopifyAPIError("Created product has no default variant")
    variant_id = edges[0]["node"]["id"]

    data = admin.graphql(
        VariantsBulkUpdateMutationBuilder().build(),
        variables={
            "productId": product["id"],
            "variants": [{"id": variant_id, "price": price}],
        },
    )
    raise_for_user_errors(data.get("productVariantsBulkUpdate"))

    record = Product(product["id"], product.get("title", title), price, variant_id).save()
    logger.info("[DB] Saved product %s (%s)", product["id"], title)
    return record


def build_line_item(product, currency):
    line_item = {
        "title": product.get("title") or "Untitled product",
        "priceSet": {
            "shopMoney": {
                "amount": product.get("price") or 0,
                "currencyCode": currency,
            },
        },
        "quantity": 1,
    }
    if product.get("variantId"):
        line_item["variantId"] = product.get("variantId")
    return line_item


def create_order(admin, product, order_name, currency):
    total_price = product.get("price") or 0
    data = admin.graphql(
        OrderCreateMutationBuilder().build(),
        variables={
            "order": {
                "name": order_name,
                "currency": currency,
                "lineItems": [build_line_item(product, currency)],
            },
        },
    )
    payload = data.get("orderCreate") or {}
    raise_for_user_errors(payload)

    order = payload.get("order")
    if not order:
        raise ShopifyAPIError("Something went wrong")

    record = Order(order["id"], order.get("name"), total_price, product.option_value).save()
    logger.info("[DB] Saved order %s", order["id"])
    return record
