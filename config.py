import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("CREDENTIAL_SERVICE_CONFIG", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./credentials.db")
    DB_CONNECT_RETRIES = int(data.get("DB_CONNECT_RETRIES", 5))
    DB_CONNECT_BASE_DELAY = float(data.get("DB_CONNECT_BASE_DELAY", 1.0))
    DB_CONNECT_MAX_DELAY = float(data.get("DB_CONNECT_MAX_DELAY", 30.0))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 5000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", ["http://localhost:5173"])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Session tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    SESSION_TTL_HOURS = int(data.get("SESSION_TTL_HOURS", 24))

    # Credentials
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    PASSWORD_MIN_LENGTH = int(data.get("PASSWORD_MIN_LENGTH", 6))
    RESET_TOKEN_TTL_MINUTES = int(data.get("RESET_TOKEN_TTL_MINUTES", 10))

    # Store retry policy
    STORE_MAX_RETRIES = int(data.get("STORE_MAX_RETRIES", 3))
    STORE_RETRY_BASE_DELAY = float(data.get("STORE_RETRY_BASE_DELAY", 1.0))
    STORE_MAX_OPERATION_TIME = float(data.get("STORE_MAX_OPERATION_TIME", 15.0))

    # Mail relay
    MAIL_SERVER = data.get("MAIL_SERVER", "localhost")
    MAIL_PORT = int(data.get("MAIL_PORT", 465))
    MAIL_USERNAME = data.get("MAIL_USERNAME", "")
    MAIL_PASSWORD = data.get("MAIL_PASSWORD", "")
    MAIL_FROM = data.get("MAIL_FROM", "no-reply@example.com")
    MAIL_FROM_NAME = data.get("MAIL_FROM_NAME", "Credential Service")
    MAIL_STARTTLS = bool(data.get("MAIL_STARTTLS", False))
    MAIL_SSL_TLS = bool(data.get("MAIL_SSL_TLS", True))
    MAIL_VALIDATE_CERTS = bool(data.get("MAIL_VALIDATE_CERTS", True))
    MAIL_SUPPRESS_SEND = bool(data.get("MAIL_SUPPRESS_SEND", False))
    MAIL_MAX_RETRIES = int(data.get("MAIL_MAX_RETRIES", 3))
    MAIL_RETRY_BASE_DELAY = float(data.get("MAIL_RETRY_BASE_DELAY", 1.0))
    MAIL_SEND_TIMEOUT = int(data.get("MAIL_SEND_TIMEOUT", 5))
    FRONTEND_URL = data.get("FRONTEND_URL", "http://localhost:5173")
