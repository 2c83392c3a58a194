import os

from dotenv import dotenv_values

from voltbid.constants import DEFAULT_LABOR_RATE, DEFAULT_OVERHEAD_PCT, DEFAULT_PROFIT_PCT


class BaseConfig:
    # Secrets (env in prod; dev/test may use defaults). Also signs the session cookie that carries the draft token.
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-not-secure")

    # Database (env in prod; dev/test may use default)
    _ENV_FALLBACK = dotenv_values(".env")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or _ENV_FALLBACK.get("DATABASE_URL") or "sqlite:///voltbid.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging / misc
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    JSON_SORT_KEYS = False

    # Cookies: secure-by-default
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Flask-Limiter: no global default; export routes carry their own limit
    EXPORT_RATE_LIMIT = os.getenv("EXPORT_RATE_LIMIT", "30 per minute")

    # --- House defaults: seed CompanySettings and fill new projects ---
    COMPANY_NAME = os.getenv("COMPANY_NAME", "Manny Source Electric Corp")
    COMPANY_ADDRESS = os.getenv("COMPANY_ADDRESS", "3932 SW 160th St, Miami, FL 33177")
    COMPANY_PHONE = os.getenv("COMPANY_PHONE", "(786) 299-2168")
    COMPANY_LICENSE = os.getenv("COMPANY_LICENSE", "ER13016064")
    COMPANY_WEBSITE = os.getenv("COMPANY_WEBSITE", "mannysourceelectric.com")
    DEFAULT_LABOR_RATE = float(os.getenv("DEFAULT_LABOR_RATE", DEFAULT_LABOR_RATE))
    DEFAULT_OVERHEAD_PCT = float(os.getenv("DEFAULT_OVERHEAD_PCT", DEFAULT_OVERHEAD_PCT))
    DEFAULT_PROFIT_PCT = float(os.getenv("DEFAULT_PROFIT_PCT", DEFAULT_PROFIT_PCT))
    DEFAULT_TERMS = os.getenv(
        "DEFAULT_TERMS",
        "Payment terms: Net 30. This estimate is valid for 30 days from the date of issue. "
        "All work performed in accordance with the National Electrical Code (NEC) and "
        "Florida Building Code (FBC). Permit fees not included unless specified.",
    )

    # Seed file for `flask seed materials`
    MATERIALS_SEED_PATH = os.getenv("MATERIALS_SEED_PATH", "data/materials_seed.csv")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")
    SESSION_COOKIE_SECURE = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
    SESSION_COOKIE_SECURE = True
    # allow override if you need "Strict" for purely internal apps
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")


class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SESSION_COOKIE_SECURE = False


_ENV_MAP = {
    "development": DevelopmentConfig,
    "staging": ProductionConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config():
    env = os.environ.get("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)
