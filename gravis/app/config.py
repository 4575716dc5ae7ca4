import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JSON_SORT_KEYS = False

    # Remote REST backend that owns products, categories, cart, inquiries, customers
    BACKEND_URL = os.getenv("GRAVIS_BACKEND_URL", "http://localhost:3007/api").rstrip("/")
    BACKEND_TIMEOUT = float(os.getenv("GRAVIS_BACKEND_TIMEOUT", "10"))
    STAGING = _env_flag("GRAVIS_STAGING")
    GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")

    # Comma-separated list
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

    PRODUCTS_PAGE_SIZE = int(os.getenv("PRODUCTS_PAGE_SIZE", "24"))
    POPULAR_PRODUCTS_LIMIT = int(os.getenv("POPULAR_PRODUCTS_LIMIT", "8"))
    SEARCH_DEBOUNCE_MS = int(os.getenv("SEARCH_DEBOUNCE_MS", "700"))
    CART_MAX_QUANTITY = 100

    AUTH_COOKIE_SECURE = _env_flag("AUTH_COOKIE_SECURE")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT = int(os.getenv("APP_PORT", "8080"))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    BACKEND_URL = "http://backend.test/api"
    BACKEND_TIMEOUT = 2.0
