import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Site resolution
    LOCAL_DEV_DOMAIN = os.getenv("LOCAL_DEV_DOMAIN", "localhost:3000")
    HOMEPAGE_SLUG = os.getenv("HOMEPAGE_SLUG", "home")
    SITE_DRAFT_VISIBLE = _env_flag("SITE_DRAFT_VISIBLE", True)
    SITE_MAPPINGS_FILE = os.getenv("SITE_MAPPINGS_FILE")

    LOG_JSON = _env_flag("LOG_JSON", False)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///sitebuilder-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")
    LOG_JSON = _env_flag("LOG_JSON", True)


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    SITE_MAPPINGS_FILE = None
    SITE_DRAFT_VISIBLE = True


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
