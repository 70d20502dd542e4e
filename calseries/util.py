"""Zone helpers for calseries.

The recurrence engine always works in UTC; the governing zone is only used
to interpret zone-less input and is resolved through the host's zoneinfo
database.
"""

from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo

UTC: tzinfo = timezone.utc


def resolve_zone(tz: str | tzinfo | None, default: tzinfo = UTC) -> tzinfo:
    """Resolve an IANA name or tzinfo into a tzinfo, falling back to `default`."""
    if tz is None:
        return default
    if isinstance(tz, tzinfo):
        return tz
    if isinstance(tz, str):
        if tz.upper() in ("UTC", "Z"):
            return UTC
        return ZoneInfo(tz)
    raise TypeError(
        f"Zone must be an IANA name, a tzinfo, or None.\n"
        f"Got {type(tz).__name__!r}: {tz!r}\n"
        f"Examples:\n"
        f"  tz='US/Pacific'\n"
        f"  tz=ZoneInfo('Europe/Berlin')\n"
        f"  tz=timezone.utc"
    )
