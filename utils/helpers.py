from datetime import datetime, timezone


def utcnow():
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def like_pattern(term):
    """`%term%` with LIKE wildcards in the user's text escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
