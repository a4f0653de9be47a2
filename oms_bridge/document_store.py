import logging

from flask import current_app, has_app_context
from pymongo import MongoClient

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

COLLECTIONS = ("realms", "products", "orders", "sessions")


class DocumentStore:
    """Handle to the logical Mongo database of the current application.

    ``init_app`` opens one client per application object and keeps it in
    ``app.extensions["document_store"]``; every lookup goes through the
    active app, so two apps never share a client. Tests hand in their own
    client (mongomock).
    """

    def __init__(self, app=None, client=None):
        if app is not None:
            self.init_app(app, client=client)

    def init_app(self, app, client=None):
        uri = app.config.get("MONGO_URI")
        db_name = app.config.get("MONGO_DB_NAME")
        if client is None and not uri:
            raise ConfigurationError(
                "MONGO_URI (or DATABASE_URL) is not defined in the environment variables."
            )
        if not db_name:
            raise ConfigurationError("MONGO_DB_NAME must not be empty.")

        client = client if client is not None else MongoClient(uri)
        app.extensions["document_store"] = {"client": client, "db": client[db_name]}
        logger.info("[DB] Using database %s", db_name)

    def _state(self):
        if not has_app_context():
            raise RuntimeError("DocumentStore used outside an application context")
        state = current_app.extensions.get("document_store")
        if state is None:
            raise RuntimeError("DocumentStore used before init_app()")
        return state

    @property
    def client(self):
        return self._state()["client"]

    @property
    def db(self):
        return self._state()["db"]

    def collection(self, name):
        return self.db[name]

    def counts(self):
        return {name: self.collection(name).count_documents({}) for name in COLLECTIONS}

    def close(self):
        state = current_app.extensions.pop("document_store", None)
        if state is not None:
            state["client"].close()
