import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "billing"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "billing_db"),
}

RATE_DEFAULTS = {
    "per_day_rate": os.getenv("DEFAULT_PER_DAY_RATE", "466"),
    "service_charge_rate_pct": os.getenv("DEFAULT_SERVICE_CHARGE_PCT", "7"),
    "overtime_rate": os.getenv("DEFAULT_OVERTIME_RATE", "0"),
    "bonus_rate_pct": os.getenv("DEFAULT_BONUS_PCT", "0"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
