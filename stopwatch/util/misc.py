from datetime import datetime

# English month abbreviations, independent of LC_TIME.
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Stand-in for "never started", shown as Jan  1 00:00:00 like any other stamp.
ZERO_INSTANT = datetime.min


# Simply returns the current local time as a timezone-aware datetime.
def now_local():
    return datetime.now().astimezone()


# Formats a datetime in the short "Jan _2 15:04:05" stamp layout: abbreviated month, space-padded day, 24h clock.
# No year and no timezone, it's only meant for eyeballing.
def format_stamp(dt):
    return f"{_MONTHS[dt.month - 1]} {dt.day:>2} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
