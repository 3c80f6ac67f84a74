import os
from datetime import timedelta

from dotenv import load_dotenv

# Load .env from project root so local development MONGO_URI is picked up
load_dotenv()

DEFAULT_JWT_SECRET = "change-this-jwt-secret"
MIN_JWT_SECRET_LENGTH = 32


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", DEFAULT_JWT_SECRET)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_EXPIRES_HOURS", "168")))

    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/?directConnection=true")
    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "taskboard")

    CORS_ORIGINS = os.environ.get("FRONTEND_URL", "http://localhost:5173")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    DUE_SOON_DEFAULT_HOURS = int(os.environ.get("DUE_SOON_DEFAULT_HOURS", "24"))
    DEFAULT_TODO_SLOTS = int(os.environ.get("DEFAULT_TODO_SLOTS", "6"))
    TASKS_PAGE_SIZE = int(os.environ.get("TASKS_PAGE_SIZE", "10"))

    ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"


def check_config(app):
    """Sanity-check secrets before the app starts serving."""
    secret = app.config.get("JWT_SECRET_KEY") or ""
    if app.config.get("ENV") == "production" and secret == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set in production")
    if len(secret) < MIN_JWT_SECRET_LENGTH:
        app.logger.warning(
            "JWT_SECRET_KEY is shorter than %d characters; use a longer secret.",
            MIN_JWT_SECRET_LENGTH,
        )
