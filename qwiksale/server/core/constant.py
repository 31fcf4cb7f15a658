"""Static constants shared by the HTTP layer."""

PROJECT_NAME = "QwikSale"
API_VERSION = "1.0.0"

API_STR = "/api"
ADMIN_STR = f"{API_STR}/admin"

# Deep pagination guard for public listings
MAX_RESULT_WINDOW = 10_000

# A carrier counts as live when seen within this many seconds
CARRIER_LIVE_CUTOFF_SECONDS = 90
