"""Process-wide logging: stdout, one line per record, request ID on each line."""

import logging
import sys

from briefsnap.core.config import get_settings
from briefsnap.shared.context import get_request_id

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"

# Libraries that log every call at INFO (httpx) or warn on each discovery
# build without a file cache (googleapiclient).
QUIET_LOGGERS = ("httpx", "httpcore", "googleapiclient.discovery_cache", "google.auth")


class RequestIdFilter(logging.Filter):
    """Attach the current request ID (or "-") to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def setup_logging() -> None:
    """Configure the root logger once; later calls are no-ops.

    DEBUG when settings.debug is set, INFO otherwise.
    """
    root = logging.getLogger()
    if any(isinstance(f, RequestIdFilter) for h in root.handlers for f in h.filters):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if get_settings().debug else logging.INFO)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
