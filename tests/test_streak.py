from datetime import date, timedelta

from habit_tracker.streak import current_streak, longest_streak

TODAY = date(2024, 1, 5)


def _track(storage, habit, days, completed=True):
    for day in days:
        storage.track_completion(habit.id, day, completed, 100 if completed else 0)


def test_current_streak__no_completions_is_zero(storage, make_habit):
    habit = make_habit()
    assert current_streak(storage, habit.id, today=TODAY) == 0


def test_current_streak__counts_consecutive_days_through_today(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05"])
    assert current_streak(storage, habit.id, today=TODAY) == 5


def test_current_streak__missing_day_caps_streak(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-01-01", "2024-01-02", "2024-01-04", "2024-01-05"])
    assert current_streak(storage, habit.id, today=TODAY) == 2


def test_current_streak__incomplete_day_caps_streak(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-01-01", "2024-01-02", "2024-01-04", "2024-01-05"])
    _track(storage, habit, ["2024-01-03"], completed=False)
    assert current_streak(storage, habit.id, today=TODAY) == 2


def test_current_streak__today_not_logged_starts_from_yesterday(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-01-02", "2024-01-03", "2024-01-04"])
    assert current_streak(storage, habit.id, today=TODAY) == 3


def test_current_streak__today_incomplete_is_ignored(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-01-03", "2024-01-04"])
    storage.track_completion(habit.id, "2024-01-05", False, 50)
    assert current_streak(storage, habit.id, today=TODAY) == 2


def test_current_streak__yesterday_missing_is_zero(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-01-01", "2024-01-02", "2024-01-03"])
    assert current_streak(storage, habit.id, today=TODAY) == 0


def test_current_streak__crosses_month_boundary(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-02-28", "2024-02-29", "2024-03-01"])
    assert current_streak(storage, habit.id, today=date(2024, 3, 1)) == 3


def test_current_streak__defaults_to_system_date(storage, make_habit):
    habit = make_habit()
    today = date.today()
    _track(storage, habit, [(today - timedelta(days=i)).isoformat() for i in range(3)])
    assert current_streak(storage, habit.id) == 3


def test_longest_streak__returns_best_run(storage, make_habit):
    habit = make_habit()
    _track(storage, habit, ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"])
    _track(storage, habit, ["2024-01-06", "2024-01-07"])
    _track(storage, habit, ["2024-01-05"], completed=False)

    assert longest_streak(storage.get_completions_for_habit(habit.id)) == 4


def test_longest_streak__empty_history_is_zero():
    assert longest_streak([]) == 0
