"""Internal constants shared across the library."""

DEFAULT_BASE_URL = "http://localhost:8080"
USER_AGENT = "proxwatch/0 (+aiohttp)"
API_PREFIX = "/api/v1"

#: Default refresh period for cluster status polling (30 seconds).
DEFAULT_STATUS_POLL_INTERVAL_MS = 30_000

# Usage thresholds (percent) used to grade CPU/memory/swap gauges.
USAGE_WARNING = 50.0
USAGE_HIGH = 75.0
USAGE_CRITICAL = 90.0
