# config.py
import os
from datetime import timedelta


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    ENV = (os.environ.get("DIETBUDDY_ENV", "dev") or "dev").strip().lower()

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/dietbuddy"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # 🔐 JWT config
    JWT_TOKEN_LOCATION = ["headers"]     # where to look for tokens
    JWT_HEADER_NAME = "Authorization"    # header name
    JWT_HEADER_TYPE = "Bearer"           # expected prefix
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # "auto" checks the database at startup and serves sample catalog data if it is down
    DATA_SOURCE = os.environ.get("DATA_SOURCE", "auto")

    # Razorpay / membership
    RAZORPAY_KEY_ID = os.environ.get("RAZORPAY_KEY_ID", "")
    RAZORPAY_KEY_SECRET = os.environ.get("RAZORPAY_KEY_SECRET", "")
    RAZORPAY_API_BASE = os.environ.get("RAZORPAY_API_BASE", "https://api.razorpay.com/v1")
    RAZORPAY_TIMEOUT_SECONDS = _env_int("RAZORPAY_TIMEOUT_SECONDS", 20)
    MEMBERSHIP_PRICE = _env_int("MEMBERSHIP_PRICE", 99900)  # paise
    MEMBERSHIP_CURRENCY = os.environ.get("MEMBERSHIP_CURRENCY", "INR")
    MEMBERSHIP_DURATION_DAYS = _env_int("MEMBERSHIP_DURATION_DAYS", 365)
    ALLOW_DUMMY_PAYMENTS = ENV not in ("prod", "production")

    # optimistic-concurrency retries for reward account writes
    REWARD_WRITE_ATTEMPTS = 3


class TestConfig(Config):
    TESTING = True
    ENV = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    DATA_SOURCE = "live"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    RAZORPAY_KEY_ID = "rzp_test_key"
    RAZORPAY_KEY_SECRET = "rzp_test_secret"
    ALLOW_DUMMY_PAYMENTS = True
    LOG_LEVEL = "WARNING"
