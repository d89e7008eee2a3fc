import logging

import click
from flask import Blueprint, Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import DBStorage
from services.auth_service import AuthService
from services.geocoding import NominatimGeocoder
from services.refresh_tokens import RefreshTokenStore
from services.zone_index import ZoneIndex, load_zones
from utils.security import TokenSigner

logger = logging.getLogger(__name__)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "TechBook Rental API",
        "version": "1.0.0",
        "description": "Account authentication and service-zone address validation (Kazakhstan).",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())


def create_app(config_name: str | None = None, zone_index: ZoneIndex | None = None,
               geocoder=None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    Collaborators are built once from the loaded configuration and kept in
    app.extensions; tests may pass a prebuilt zone_index or geocoder.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    configure_logging(app.config["LOG_LEVEL"])

    if not app.config.get("JWT_SECRET"):
        raise RuntimeError("JWT_SECRET is not configured")

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()

    signer = TokenSigner.from_config(app.config)
    tokens = RefreshTokenStore(storage, lifetime=app.config["REFRESH_TOKEN_EXPIRES"])
    if zone_index is None:
        zone_index = ZoneIndex(load_zones(app.config["ZONES_FILE"]))

    app.extensions["storage"] = storage
    app.extensions["token_signer"] = signer
    app.extensions["refresh_tokens"] = tokens
    app.extensions["auth_service"] = AuthService(storage, signer, tokens)
    app.extensions["zone_index"] = zone_index
    app.extensions["geocoder"] = geocoder or NominatimGeocoder.from_config(app.config)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .zones import bp as zones_bp
    from .geocoding import bp as geocoding_bp

    api_v1 = Blueprint("api_v1", __name__, url_prefix="/api/v1")
    api_v1.register_blueprint(health_bp)
    api_v1.register_blueprint(auth_bp)
    api_v1.register_blueprint(zones_bp)
    api_v1.register_blueprint(geocoding_bp)
    app.register_blueprint(api_v1)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to TechBook Rental API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    @app.cli.command("purge-tokens")
    def purge_tokens():
        """Delete expired and revoked rotation tokens for every account."""
        removed = tokens.purge_stale()
        storage.save()
        logger.info("Purged %d stale rotation tokens", removed)
        click.echo(f"Removed {removed} stale rotation tokens")

    return app
