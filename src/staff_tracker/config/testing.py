import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://api.test"),
    "timeout": 2.0,
    "retries": 0,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SESSION_DAYS = 1
CURRENCY_SYMBOL = "₹"

DASHBOARD_ACTIVITY_LIMIT = 5
REPORT_ACTIVITY_LIMIT = 10
