"""Internal constants shared across the library."""

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_INTERVAL = 60
DEFAULT_LOG_PATH = "locations.jsonl"
DEFAULT_API_URL = "http://ip-api.com/json"
DEFAULT_MAP_PATH = "map/index.html"
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_WRITE_ATTEMPTS = 3
DEFAULT_WRITE_RETRY_DELAY = 0.5
DEFAULT_RECENT_COUNT = 10

USER_AGENT = "pylocust/0.1"

# ------------------------------------------------------------------
# Map view-fit
# ------------------------------------------------------------------

WORLD_CENTER: tuple[float, float] = (0.0, 0.0)
WORLD_ZOOM = 2
SINGLE_POINT_ZOOM = 10

# Longest log line echoed back in warnings.
MAX_LOGGED_LINE = 120
