import calendar
from datetime import date, datetime, timedelta, timezone


def seconds_to_hhmmss(total_seconds: int) -> str:
    """
    Convert total seconds (int) -> 'HH:MM:SS'.
    Example: 2732 -> '00:45:32'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_pace(pace_min_per_km: float | None) -> str | None:
    """
    Format a pace in decimal minutes per km as 'M:SS/km'.
    Example: 11.5 -> '11:30/km'. Returns None when pace is undefined.
    """
    if pace_min_per_km is None:
        return None
    total = int(round(pace_min_per_km * 60))
    return f"{total // 60}:{total % 60:02d}/km"


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_period(d: date, period: str, count: int = 1) -> date:
    """Add `count` weeks, months or years to a date."""
    if period == "week":
        return d + timedelta(weeks=count)
    if period == "month":
        return add_months(d, count)
    if period == "year":
        return add_months(d, 12 * count)
    raise ValueError(f"Unknown period '{period}'")


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
        try:
            return dt.astimezone(ZoneInfo(tz_name))
        except ZoneInfoNotFoundError:
            return dt.astimezone()
    return dt.astimezone()


def local_today(tz_name: str | None = None) -> date:
    """Calendar date 'today' in the configured timezone."""
    return to_local_datetime(datetime.now(timezone.utc), tz_name).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
