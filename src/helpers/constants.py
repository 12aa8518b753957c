"""Common configuration constants used across the application."""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

# Retry Configuration
MAX_RETRIES = 5
"""Default maximum number of retry attempts"""

RETRY_BASE_DELAY = 1.0
"""Base delay for exponential backoff in seconds"""

RETRY_MAX_DELAY = 60.0
"""Maximum delay between retries in seconds"""

# Output Constants
OUTPUT_DATE_FORMAT = "%Y-%m-%d"
"""Date format used in output file names and the default row date format"""

INPUT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
"""Format accepted for --from and --to on the command line"""

CSV_DELIMITER = ";"
"""Field delimiter of exported rows"""


__all__ = [
    "CSV_DELIMITER",
    "DEFAULT_TIMEOUT",
    "INPUT_DATETIME_FORMAT",
    "MAX_RETRIES",
    "OUTPUT_DATE_FORMAT",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
]
