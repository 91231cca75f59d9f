# config.py
import os

from dotenv import load_dotenv

load_dotenv(override=False)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _https_only(url):
    # Proxy prefix is always https
    if url and url.startswith("http://"):
        return url.replace("http://", "https://", 1)
    return url


class Config:
    """Base configuration class"""
    # Upstream catalogs
    NETFILM_API_URL = os.getenv("NETFILM_API_URL", "https://net-film.vercel.app")

    # Indirection layer in front of upstream APIs (empty = call upstream directly)
    PROXY_URL = _https_only(os.getenv("PROXY_URL") or "")

    # Outbound HTTP
    REQUEST_TIMEOUT = _float_env("REQUEST_TIMEOUT", 12.0)
    USER_AGENT = os.getenv("USER_AGENT", "streamresolver/1.0")

    # Application settings
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    RESOLVE_RATE_LIMIT = os.getenv("RESOLVE_RATE_LIMIT", "30 per minute")
    DEBUG = os.getenv("FLASK_ENV") == "development"
    TESTING = False


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    PROXY_URL = ""
    RATELIMIT_ENABLED = False


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
