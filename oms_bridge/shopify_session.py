import logging

from flask_login import UserMixin

from . import store
from .errors import SessionNotFound

logger = logging.getLogger(__name__)


class ShopSession(UserMixin):
    """An installed shop: domain plus the offline Admin API token."""

    def __init__(self, id, shop, access_token, scope="", is_online=False, state=""):
        self.id = id
        self.shop = shop
        self.access_token = access_token
        self.scope = scope
        self.is_online = is_online
        self.state = state

    @staticmethod
    def offline_id(shop):
        return f"offline_{shop}"

    def get_id(self):
        return self.id

    def to_document(self):
        return {
            "id": self.id,
            "shop": self.shop,
            "accessToken": self.access_token,
            "scope": self.scope,
            "isOnline": self.is_online,
            "state": self.state,
        }

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=doc["id"],
            shop=doc["shop"],
            access_token=doc.get("accessToken"),
            scope=doc.get("scope", ""),
            is_online=doc.get("isOnline", False),
            state=doc.get("state", ""),
        )


class SessionStorage:
    collection_name = "sessions"

    @property
    def collection(self):
        return store.collection(self.collection_name)

    def store_session(self, session):
        self.collection.replace_one({"id": session.id}, session.to_document(), upsert=True)
        logger.info("[DB] Stored session %s", session.id)
        return True

    def load_session(self, session_id):
        doc = self.collection.find_one({"id": session_id})
        return ShopSession.from_document(doc) if doc else None

    def find_sessions_by_shop(self, shop):
        return [ShopSession.from_document(doc) for doc in self.collection.find({"shop": shop})]

    def delete_session(self, session_id):
        result = self.collection.delete_one({"id": session_id})
        if result.deleted_count == 0:
            raise SessionNotFound(f"Session {session_id} not found")
        logger.info("[DB] Deleted session %s", session_id)


session_storage = SessionStorage()
