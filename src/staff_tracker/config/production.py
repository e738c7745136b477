import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:8080"),
    "timeout": float(os.getenv("API_TIMEOUT", "10")),
    "retries": int(os.getenv("API_RETRIES", "2")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")

DASHBOARD_ACTIVITY_LIMIT = 5
REPORT_ACTIVITY_LIMIT = 10
