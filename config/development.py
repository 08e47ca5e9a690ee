import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "billing_db"),
}

# Used when an invoice request leaves a rate out
RATE_DEFAULTS = {
    "per_day_rate": os.getenv("DEFAULT_PER_DAY_RATE", "466"),
    "service_charge_rate_pct": os.getenv("DEFAULT_SERVICE_CHARGE_PCT", "7"),
    "overtime_rate": os.getenv("DEFAULT_OVERTIME_RATE", "0"),
    "bonus_rate_pct": os.getenv("DEFAULT_BONUS_PCT", "0"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
