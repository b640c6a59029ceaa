from __future__ import annotations

import time
from datetime import datetime

from . import __version__
from .dsn import Dsn

SENTRY_VERSION = 7
PRODUCT_NAME = "ravenpost"
USER_AGENT = f"{PRODUCT_NAME}/{__version__}"
AUTH_HEADER = "X-Sentry-Auth"


def create_auth_header(dsn: Dsn, timestamp: datetime | float | None = None) -> str:
    """Build the X-Sentry-Auth value for one request. Call once per send."""
    if timestamp is None:
        ts = time.time()
    elif isinstance(timestamp, datetime):
        ts = timestamp.timestamp()
    else:
        ts = float(timestamp)

    pairs = [
        f"sentry_version={SENTRY_VERSION}",
        f"sentry_client={USER_AGENT}",
        f"sentry_timestamp={int(ts)}",
        f"sentry_key={dsn.public_key}",
    ]
    if dsn.secret_key:
        pairs.append(f"sentry_secret={dsn.secret_key}")
    return "Sentry " + ", ".join(pairs)
