import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env", override=False)


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", f"sqlite:///{(BASE_DIR / 'student.db').as_posix()}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    # initial password of accounts created from the admin directory
    DEFAULT_PASSWORD = os.environ.get("DEFAULT_PASSWORD", "123456")
    # student/employee number generation tries per entropy width
    NUMBER_ATTEMPTS = int(os.environ.get("NUMBER_ATTEMPTS", "20"))


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    DEBUG = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "please-set-SECRET_KEY")


def get_config_object() -> str:
    env = os.getenv("APP_ENV", "development").lower()
    if env in {"prod", "production"}:
        return "config.ProductionConfig"
    if env in {"test", "testing"}:
        return "config.TestingConfig"
    return "config.DevelopmentConfig"
