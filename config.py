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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./session_auth.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENVIRONMENT = data.get("ENVIRONMENT", "development")

    # Session tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    JWT_EXPIRES_IN_DAYS = int(data.get("JWT_EXPIRES_IN_DAYS", 90))
    COOKIE_NAME = data.get("COOKIE_NAME", "jwt")
    COOKIE_EXPIRES_IN_DAYS = int(data.get("COOKIE_EXPIRES_IN_DAYS", 90))

    # Passwords and reset flow
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    PASSWORD_RESET_EXPIRES_MINUTES = int(data.get("PASSWORD_RESET_EXPIRES_MINUTES", 10))
    FORGOT_PASSWORD_REVEAL_UNKNOWN_EMAIL = bool(
        data.get("FORGOT_PASSWORD_REVEAL_UNKNOWN_EMAIL", True)
    )

    # Outbound email
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    EMAIL_FROM = data.get("EMAIL_FROM", "no-reply@localhost")
