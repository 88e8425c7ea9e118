"""Extract the wake-up instant from a Garmin sleep payload."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def wake_time_from_sleep(payload: Optional[Dict[str, Any]]) -> Optional[datetime]:
    """
    Return the local wall-clock end of the night's sleep, or None.

    Garmin reports `sleepEndTimestampLocal` as epoch milliseconds already
    shifted into the device's timezone, so reading it as UTC yields the
    local wall-clock time. Falls back to `sleepEndTimestampGMT` converted to
    this machine's local time when the local stamp is missing.

    Sub-second parts are dropped; the dashboard ticks on whole seconds.
    """
    if not payload:
        return None
    dto = payload.get("dailySleepDTO") or {}

    local_ms = dto.get("sleepEndTimestampLocal")
    if local_ms:
        return datetime.fromtimestamp(local_ms // 1000, tz=timezone.utc).replace(tzinfo=None)

    gmt_ms = dto.get("sleepEndTimestampGMT")
    if gmt_ms:
        return datetime.fromtimestamp(gmt_ms // 1000)

    return None
