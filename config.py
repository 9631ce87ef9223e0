from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    # часовой пояс ресторана: от него считается "сейчас" для окон изменения/отмены
    RESTAURANT_TZ = os.getenv("RESTAURANT_TZ", "Europe/Berlin")
    TABLE_COUNT = int(os.getenv("TABLE_COUNT", "12"))
    DEFAULT_TABLE_CAPACITY = int(os.getenv("DEFAULT_TABLE_CAPACITY", "4"))

    # лимит попыток логина
    AUTH_RL_MAX = 5
    AUTH_RL_WINDOW = 300

    WTF_CSRF_TIME_LIMIT = None
    WTF_CSRF_HEADERS = ["X-CSRF-Token", "X-CSRFToken"]

    SEED_TEST_DATA = False
    SEED_TABLES = False
    DEFAULT_USERS: list[dict] = []

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    SEED_TABLES = True
    DEFAULT_USERS = [
        {"email": "admin@example.com", "password": "pass", "role": "ADMIN", "name": "Admin"},
        {"email": "guest@example.com", "password": "pass", "role": "CUSTOMER", "name": "Guest"},
    ]

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    # CSRF проверяется отдельным тестом, в остальных мешает
    WTF_CSRF_ENABLED = False
    AUTH_RL_MAX = 100

class ProdConfig(BaseConfig):
    DEBUG = False
    SEED_TEST_DATA = False
    DEFAULT_USERS = []

config_map = {
    "dev": DevConfig,
    "testing": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
