import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoicing.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # FBR Digital Invoicing gateway. Empty token switches to the mock gateway.
    FBR_API_TOKEN = data.get("FBR_API_TOKEN", os.environ.get("FBR_API_TOKEN", ""))
    FBR_USE_SANDBOX = bool(data.get("FBR_USE_SANDBOX", True))
    FBR_BASE_URL = data.get("FBR_BASE_URL", "https://gw.fbr.gov.pk")
    FBR_TIMEOUT_SECONDS = float(data.get("FBR_TIMEOUT_SECONDS", 30.0))

    # Authentication
    JWT_SECRET = data.get("JWT_SECRET", os.environ.get("JWT_SECRET", "change-me-in-production"))
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    SESSION_TTL_DAYS = int(data.get("SESSION_TTL_DAYS", 7))
    AUTH_COOKIE_NAME = data.get("AUTH_COOKIE_NAME", "auth-token")

    # Operator alerts for invoices accepted by the gateway but not recorded locally
    ALERT_WEBHOOK_URL = data.get("ALERT_WEBHOOK_URL", None)

    # User statistics reconciliation
    STATS_RECONCILIATION_ENABLED = bool(data.get("STATS_RECONCILIATION_ENABLED", True))
    STATS_RECONCILIATION_INTERVAL_SECONDS = data.get("STATS_RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
    STATS_RECONCILIATION_REPAIR = bool(data.get("STATS_RECONCILIATION_REPAIR", True))
