import logging
from datetime import date, timedelta

logger = logging.getLogger(__name__)


def day_key(day):
    return day.isoformat()


def current_streak(storage, habit_id, today=None):
    """Consecutive completed days ending today, or yesterday if today isn't done yet.

    A logged but incomplete entry for today neither breaks nor extends the
    streak; the walk simply starts from yesterday.
    """
    completions = storage.get_completions_for_habit(habit_id)
    if not completions:
        return 0

    done = {c.date: c.completed for c in completions}
    day = today or date.today()
    if not done.get(day_key(day)):
        day -= timedelta(days=1)

    streak = 0
    while done.get(day_key(day)):
        streak += 1
        day -= timedelta(days=1)
    logger.debug(f"Streak for habit {habit_id}: {streak}")
    return streak


def longest_streak(completions):
    """Longest run of consecutive completed days across a habit's history."""
    days = sorted(date.fromisoformat(c.date) for c in completions if c.completed)
    if not days:
        return 0

    best = cur = 1
    for prev, nxt in zip(days, days[1:]):
        if nxt == prev + timedelta(days=1):
            cur += 1
            best = max(best, cur)
        else:
            cur = 1
    return best
