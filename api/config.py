"""
Environment-aware configuration.
Values are read once, when create_app() loads the selected class; nothing
re-reads them at runtime.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///techbook-rental.db")
    SQL_ECHO = False

    # jwt configurations
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me-to-32-bytes-or-more")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "techbook-rental-api")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "techbook-rental-clients")
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.getenv("ACCESS_TOKEN_EXPIRES_MINUTES", "15")))
    REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv("REFRESH_TOKEN_EXPIRES_DAYS", "7")))

    ZONES_FILE = os.getenv("ZONES_FILE", os.path.join(PROJECT_ROOT, "data", "zones.json"))

    # Nominatim; results restricted to Kazakhstan by default
    GEOCODING_BASE_URL = os.getenv("GEOCODING_BASE_URL", "https://nominatim.openstreetmap.org/search")
    GEOCODING_COUNTRY_CODE = os.getenv("GEOCODING_COUNTRY_CODE", "kz")
    GEOCODING_COUNTRY_NAME = os.getenv("GEOCODING_COUNTRY_NAME", "Казахстан")
    GEOCODING_LANGUAGE = os.getenv("GEOCODING_LANGUAGE", "ru")
    GEOCODING_MAX_RESULTS = int(os.getenv("GEOCODING_MAX_RESULTS", "5"))
    GEOCODING_TIMEOUT_SECONDS = float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "10"))
    GEOCODING_USER_AGENT = os.getenv("GEOCODING_USER_AGENT", "TechBookRentalApp/1.0 (contact@techbook.kz)")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQL_ECHO = os.getenv("SQL_ECHO", "0").lower() in ("1", "true", "yes")


class ProductionConfig(BaseConfig):
    DEBUG = False
    # No fallback: create_app refuses to start without it
    JWT_SECRET = os.getenv("JWT_SECRET")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    JWT_SECRET = "test-secret-with-at-least-thirty-two-bytes"
    LOG_LEVEL = "WARNING"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/test).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
