# backend/config.py
import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/fitlog"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT: identity only, tokens are issued elsewhere
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    LEADERBOARD_SIZE = int(os.environ.get("LEADERBOARD_SIZE", "10"))
    INSIGHTS_MAX_LOGS = int(os.environ.get("INSIGHTS_MAX_LOGS", "50"))

    # Callables taking a JSON string / dict and returning the structured
    # coaching output. None disables the /api/coach endpoints.
    COACH_INSIGHTS_GENERATOR = None
    COACH_RECOMMENDATIONS_GENERATOR = None


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-32b"
    LOG_LEVEL = "DEBUG"
