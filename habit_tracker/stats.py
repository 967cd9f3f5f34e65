import logging
from datetime import date, timedelta

from .streak import current_streak

logger = logging.getLogger(__name__)

# Completion rate always divides by the full window, whatever the habit's age
WINDOW_DAYS = 30


def completion_rate(storage, habit_id, today=None):
    today = today or date.today()
    start = today - timedelta(days=WINDOW_DAYS - 1)
    completions = storage.get_completions_in_range(habit_id, start.isoformat(), today.isoformat())
    completed_days = sum(1 for c in completions if c.completed)
    return completed_days / WINDOW_DAYS * 100


def get_habit_stats(storage, habit_id, today=None):
    return {
        "streak": current_streak(storage, habit_id, today=today),
        "completionRate": completion_rate(storage, habit_id, today=today),
    }


def _mean(values):
    return sum(values) / len(values) if values else 0


def habit_rows(storage, user_id, today=None):
    rows = []
    for habit in storage.get_all_habits(user_id):
        stats = get_habit_stats(storage, habit.id, today=today)
        rows.append({
            "habitId": habit.id,
            "name": habit.name,
            "category": habit.category,
            "streak": stats["streak"],
            "completionRate": stats["completionRate"],
        })
    return rows


def overall_stats(rows):
    return {
        "totalCompletionRate": _mean([r["completionRate"] for r in rows]),
        "longestStreak": max((r["streak"] for r in rows), default=0),
        "averageStreak": _mean([r["streak"] for r in rows]),
    }


def category_stats(rows):
    groups = {}
    for row in rows:
        groups.setdefault(row["category"], []).append(row)
    return [
        {
            "category": category,
            "habits": members,
            "averageCompletionRate": _mean([m["completionRate"] for m in members]),
        }
        for category, members in groups.items()
    ]


def top_habits(rows, n):
    # sorted() is stable, so ties keep their enumeration order
    return sorted(rows, key=lambda r: r["completionRate"], reverse=True)[:n]


def get_overall_stats(storage, user_id, today=None):
    return overall_stats(habit_rows(storage, user_id, today=today))


def get_category_stats(storage, user_id, today=None):
    return category_stats(habit_rows(storage, user_id, today=today))


def get_top_habits(storage, user_id, n=3, today=None):
    return top_habits(habit_rows(storage, user_id, today=today), n)


def build_stats_report(storage, user_id, top=3, today=None):
    """Overall, per-category and top-habit stats from a single pass over the habits."""
    rows = habit_rows(storage, user_id, today=today)
    logger.debug(f"Stats computed for user {user_id}: {len(rows)} habits")
    return {
        "overallStats": overall_stats(rows),
        "categoryStats": category_stats(rows),
        "topHabits": top_habits(rows, top),
    }
