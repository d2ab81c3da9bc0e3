"""Session streak calculation."""

from datetime import date, timedelta
from typing import Iterable

from disciplog.analytics.common import as_date


def calculate_streak(session_dates: Iterable[date], today: date) -> int:
    """Count consecutive days with a session, ending today.

    Dates are deduplicated and walked newest first; the date at position
    ``i`` must equal ``today - i``. If there is no session today yet, a
    session yesterday still opens the streak. The first mismatch ends the
    walk.

    Args:
        session_dates: Session dates, duplicates allowed.
        today: The current date.

    Returns:
        Streak length, 0 when there are no sessions.
    """
    today = as_date(today)
    unique = sorted({as_date(d) for d in session_dates}, reverse=True)

    streak = 0
    for i, session_date in enumerate(unique):
        expected = today - timedelta(days=i)
        if session_date == expected:
            streak += 1
        elif i == 0 and session_date == expected - timedelta(days=1):
            streak += 1
        else:
            break
    return streak
