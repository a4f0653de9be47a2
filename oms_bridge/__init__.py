import logging
import os
from flask import Flask
from flask_login import LoginManager
from dotenv import load_dotenv

# Load environment variables from .env before config classes read them
load_dotenv()

from config import Config, DevelopmentConfig, ProductionConfig, TestingConfig  # noqa: E402
from .document_store import DocumentStore  # noqa: E402

# Initialize extensions without app
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message_category = "info"

store = DocumentStore()

config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": Config
}

def create_app(config_object=None, mongo_client=None):
    app = Flask(__name__)

    # Pick config based on FLASK_ENV
    if config_object is None:
        config_type = os.getenv("FLASK_ENV", "development").lower()
        config_object = config_map.get(config_type, DevelopmentConfig)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Fails here, before any request, if MONGO_URI is missing
    store.init_app(app, client=mongo_client)
    login_manager.init_app(app)

    from . import auth

    login_manager.user_loader(auth.load_user)
    login_manager.request_loader(auth.load_user_from_request)
    login_manager.unauthorized_handler(auth.handle_unauthorized)

    # Import and register blueprints
    from .routes import main
    from .routes.auth import auth_bp
    from .routes.webhooks import webhooks_bp
    app.register_blueprint(main)
    app.register_blueprint(auth_bp)
    app.register_blueprint(webhooks_bp)

    from .cli import store_cli
    app.cli.add_command(store_cli)

    @app.context_processor
    def inject_shopify_api_key():
        return {"shopify_api_key": app.config["SHOPIFY_API_KEY"]}

    return app
