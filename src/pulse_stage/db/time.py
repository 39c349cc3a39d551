"""Clock used for post and notification timestamps."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Timezone-aware now, pinned to UTC so stored timestamps compare consistently."""
    return datetime.now(UTC)
