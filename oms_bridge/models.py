from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId

from . import store


def utcnow():
    return datetime.now(timezone.utc)


class Record:
    """A document mirrored into one collection. Saving always inserts."""

    __collection__ = None

    def __init__(self, **fields):
        self.fields = fields
        self.created_at = fields.pop("createdAt", None) or utcnow()
        self.inserted_id = fields.pop("_id", None)

    @classmethod
    def collection(cls):
        return store.collection(cls.__collection__)

    def to_document(self):
        document = dict(self.fields)
        document["createdAt"] = self.created_at
        return document

    def save(self):
        result = self.collection().insert_one(self.to_document())
        self.inserted_id = result.inserted_id
        return self

    def __getitem__(self, key):
        if key == "createdAt":
            return self.created_at
        return self.fields[key]

    def get(self, key, default=None):
        return self.fields.get(key, default)


class Realm(Record):
    __collection__ = "realms"

    def __init__(self, account_id, name, email, shop, **extra):
        super().__init__(id=account_id, name=name, email=email, shop=shop, **extra)


class Product(Record):
    __collection__ = "products"

    def __init__(self, shopify_id, title, price, variant_id=None, **extra):
        super().__init__(shopifyId=shopify_id, title=title, price=price, variantId=variant_id, **extra)

    @classmethod
    def from_document(cls, document):
        doc = dict(document)
        return cls(
            doc.pop("shopifyId", None),
            doc.pop("title", None),
            doc.pop("price", None),
            doc.pop("variantId", None),
            **doc
        )

    @classmethod
    def all(cls):
        return [cls.from_document(doc) for doc in cls.collection().find({}).sort("createdAt", 1)]

    @classmethod
    def find(cls, product_id):
        """Look a product up by its Shopify GID or by the local ObjectId."""
        if not product_id:
            return None
        clauses = [{"shopifyId": product_id}]
        try:
            clauses.append({"_id": ObjectId(product_id)})
        except (InvalidId, TypeError):
            pass
        document = cls.collection().find_one({"$or": clauses})
        return cls.from_document(document) if document else None

    @property
    def option_value(self):
        return self.get("shopifyId") or str(self.inserted_id)

    @property
    def option_label(self):
        title = self.get("title") or "Untitled product"
        price = self.get("price")
        return f"{title} (${price})" if price else f"{title} (no price)"


class Order(Record):
    __collection__ = "orders"

    def __init__(self, shopify_id, name, total_price, product_id=None, **extra):
        super().__init__(shopifyId=shopify_id, name=name, totalPrice=total_price, productId=product_id, **extra)
