import mongomock
import pytest

from config import TestingConfig
from oms_bridge import create_app, store
from oms_bridge.shopify_session import ShopSession, session_storage

SHOP = "my-cool-shop.myshopify.com"


@pytest.fixture
def app():
    app = create_app(TestingConfig, mongo_client=mongomock.MongoClient())
    with app.app_context():
        yield app
        store.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def shop_session(app):
    session = ShopSession(
        id=ShopSession.offline_id(SHOP),
        shop=SHOP,
        access_token="shpat_test_token",
        scope="write_products,write_orders",
    )
    session_storage.store_session(session)
    return session


@pytest.fixture
def logged_in_client(client, shop_session):
    with client.session_transaction() as sess:
        sess["_user_id"] = shop_session.id
        sess["_fresh"] = True
    return client
