import os

from config import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "lazyhr"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lazyhr"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

TIMEZONE = os.getenv("TIMEZONE", "UTC")

LOCK_TIMEOUT_SECONDS = float(os.getenv("LOCK_TIMEOUT_SECONDS", "5"))
SINGLE_OPEN_SESSION = env_flag("SINGLE_OPEN_SESSION")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/lazyhr.log")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB")
