"""
Factory de la aplicación Flask
"""
import logging
import os

from flask import Flask
from flask_cors import CORS

from .config import BASE_DIR, get_config
from .db import init_db
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(config_name=None):
    """
    Crea la aplicación.

    Args:
        config_name: development | production | testing. Si no se indica
                     se usa FLASK_ENV.
    """
    config = get_config(config_name)
    setup_logging(config.LOG_LEVEL)

    app = Flask(__name__)
    app.config.from_object(config)

    logger.info("📍 Database URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    # El bot llama desde otro origen; en producción se limitan los dominios
    allowed_origins = [o.strip() for o in app.config["ALLOWED_ORIGINS"].split(",") if o.strip()]
    cors_options = {
        "origins": "*" if "*" in allowed_origins else allowed_origins,
        "methods": CORS_METHODS,
        "allow_headers": CORS_HEADERS,
    }
    CORS(app, resources={r"/api/*": cors_options, r"/health": cors_options})

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith(f"sqlite:///{BASE_DIR}"):
        os.makedirs(BASE_DIR / "instance", exist_ok=True)

    init_db(app)

    from .api import orders_bp, analytics_bp

    app.register_blueprint(orders_bp, url_prefix="/api/orders")
    app.register_blueprint(analytics_bp, url_prefix="/api/analytics")

    @app.route("/health")
    def health():
        return {"status": "ok", "message": "Pedidos backend is running! 🍔"}

    return app
