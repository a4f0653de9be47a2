import os

class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretkey")
    DEBUG = False
    TESTING = False
    TEMPLATES_AUTO_RELOAD = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Embedded in the Shopify admin iframe, so the cookie must cross sites
    SESSION_COOKIE_SAMESITE = "None"
    SESSION_COOKIE_SECURE = True

    MONGO_URI = os.getenv("MONGO_URI") or os.getenv("DATABASE_URL")
    MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "ShopifyScaffoldRemix1")

    SHOPIFY_API_KEY = os.getenv("SHOPIFY_API_KEY", "")
    SHOPIFY_API_SECRET = os.getenv("SHOPIFY_API_SECRET", "")
    SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2025-01")
    SHOPIFY_APP_URL = os.getenv("SHOPIFY_APP_URL", "")
    SCOPES = os.getenv("SCOPES", "write_products,write_orders,read_locations")
    SHOP_CUSTOM_DOMAIN = os.getenv("SHOP_CUSTOM_DOMAIN", "")

    REALM_API_URL = os.getenv("REALM_API_URL", "https://api-copilot-stage-local.xstak.com/v1")
    OE_API_URL = os.getenv("OE_API_URL", "https://api-oe-local-stage.xstak.com/configs")
    OE_ONBOARD_TOKEN = os.getenv("OE_ONBOARD_TOKEN", "")
    PARTNER_TIMEOUT = float(os.getenv("PARTNER_TIMEOUT", "15"))

    SALES_CHANNEL_PREFIX = os.getenv("SALES_CHANNEL_PREFIX", "JAW")
    ORDER_CURRENCY = os.getenv("ORDER_CURRENCY", "USD")

class DevelopmentConfig(Config):
    DEBUG = True
    TEMPLATES_AUTO_RELOAD = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    MONGO_URI = os.getenv("DEV_MONGO_URI") or Config.MONGO_URI

class ProductionConfig(Config):
    pass

class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SESSION_COOKIE_SECURE = False
    MONGO_URI = "mongodb://localhost:27017"
    MONGO_DB_NAME = "oms_bridge_test"
    SHOPIFY_API_KEY = "test-api-key"
    SHOPIFY_API_SECRET = "test-api-secret"
    SHOPIFY_APP_URL = "https://bridge.example.com"
    SCOPES = "write_products,write_orders"
    SHOP_CUSTOM_DOMAIN = ""
    REALM_API_URL = "https://realm.example.com/v1"
    OE_API_URL = "https://oe.example.com/configs"
    OE_ONBOARD_TOKEN = "onboard-token"
