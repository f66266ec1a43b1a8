"""
Network Configuration Constants
"""


class Network:
    """HTTP client defaults."""

    DEFAULT_TIMEOUT_SECONDS = 30
    USER_AGENT = "pondus/0.1.0"
    ACCEPT_JSON = "application/json"

    # Transient 5xx responses are retried; the last response is kept so the
    # caller still sees its status
    MAX_RETRIES = 2
    BACKOFF_FACTOR = 0.5
    RETRY_STATUS_CODES = (500, 502, 503, 504)
