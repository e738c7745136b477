"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ALL = "all"

CALENDAR_WEEKS = 6
CALENDAR_CELLS = CALENDAR_WEEKS * 7

DASHBOARD_ACTIVITY_LIMIT = 5
REPORT_ACTIVITY_LIMIT = 10
REPORT_MONTH_OPTIONS = 12

DEFAULT_SESSION_DAYS = 7
DEFAULT_CURRENCY_SYMBOL = "₹"

SESSION_TOKEN_KEY = "auth_token"
SESSION_BOARD_KEY = "attendance_board_id"
SESSION_CALENDAR_MONTH_KEY = "calendar_month"

PROTECTED_PREFIXES = ("/dashboard", "/attendance", "/expenses", "/reports", "/employees", "/menu")
