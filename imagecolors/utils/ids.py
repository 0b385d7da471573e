"""
Request ids for correlating log lines of one extraction.

Format: ``<prefix>-<UTC yyyymmddHHMMSS>-<8 hex chars>``.
"""
import secrets
from datetime import datetime, timezone
from typing import Optional

_TIME_FORMAT = "%Y%m%d%H%M%S"


def generate_request_id(prefix: str = "colors") -> str:
    """Return a new request id; ids from the same second differ in the hex suffix."""
    stamp = datetime.now(timezone.utc).strftime(_TIME_FORMAT)
    return f"{prefix}-{stamp}-{secrets.token_hex(4)}"


def request_id_time(request_id: str) -> Optional[datetime]:
    """UTC creation time encoded in a request id, or None if it is not one of ours."""
    parts = request_id.rsplit("-", 2)
    if len(parts) != 3:
        return None
    try:
        return datetime.strptime(parts[1], _TIME_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None
