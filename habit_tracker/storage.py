import logging
import threading
from collections import defaultdict

from flask import current_app
from sqlalchemy.exc import IntegrityError

from .models import db, User, Habit, HabitCompletion

logger = logging.getLogger(__name__)

# Fields a partial update may never touch
IMMUTABLE_HABIT_FIELDS = {"id", "created_at"}


def get_storage():
    return current_app.extensions["storage"]


class Storage:
    """Entity store and completion tracker backed by the SQLAlchemy session.

    One instance is built per process and handed to ``create_app``. Lookups
    return ``None`` (or ``False`` for deletes) when the entity is absent.
    Every method must run inside an application context.
    """

    def __init__(self):
        self._habit_locks = defaultdict(threading.Lock)
        self._habit_locks_guard = threading.Lock()

    # -- Users --

    def create_user(self, data):
        user = User(username=data["username"], password=data["password"])
        db.session.add(user)
        db.session.commit()
        logger.info(f"User created: {user.username} ({user.id})")
        return user

    def get_user(self, user_id):
        return db.session.get(User, user_id)

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    # -- Habits --

    def create_habit(self, data):
        habit = Habit(**data)
        db.session.add(habit)
        db.session.commit()
        logger.info(f"Habit created: {habit.name} ({habit.id}) for user {habit.user_id}")
        return habit

    def get_habit(self, habit_id):
        return db.session.get(Habit, habit_id)

    def get_all_habits(self, user_id):
        return Habit.query.filter_by(user_id=user_id).order_by(Habit.id).all()

    def update_habit(self, habit_id, data):
        habit = self.get_habit(habit_id)
        if habit is None:
            return None
        for key, value in data.items():
            if key in IMMUTABLE_HABIT_FIELDS or not hasattr(habit, key):
                continue
            setattr(habit, key, value)
        db.session.commit()
        logger.info(f"Habit {habit_id} updated: {sorted(data)}")
        return habit

    def delete_habit(self, habit_id):
        habit = self.get_habit(habit_id)
        if habit is None:
            return False
        removed = len(habit.completions)
        db.session.delete(habit)
        db.session.commit()
        with self._habit_locks_guard:
            self._habit_locks.pop(habit_id, None)
        logger.info(f"Habit {habit_id} deleted with {removed} completions")
        return True

    # -- Completions --

    def _lock_for(self, habit_id):
        with self._habit_locks_guard:
            return self._habit_locks[habit_id]

    def track_completion(self, habit_id, date, completed, completion_percentage):
        """Insert or overwrite the single completion of ``habit_id`` on ``date``.

        An existing record keeps its id; only ``completed`` and
        ``completion_percentage`` change.
        """
        with self._lock_for(habit_id):
            completion = self.get_completion_by_date(habit_id, date)
            if completion is None:
                completion = HabitCompletion(habit_id=habit_id, date=date)
                db.session.add(completion)
            completion.completed = completed
            completion.completion_percentage = completion_percentage
            try:
                db.session.commit()
            except IntegrityError:
                # Another process inserted the same (habit, date) first
                db.session.rollback()
                logger.warning(f"Concurrent insert for habit {habit_id} on {date}, updating instead")
                completion = self.get_completion_by_date(habit_id, date)
                completion.completed = completed
                completion.completion_percentage = completion_percentage
                db.session.commit()
        logger.debug(f"Tracked habit {habit_id} on {date}: {completion_percentage}%")
        return completion

    def get_completion_by_date(self, habit_id, date):
        return HabitCompletion.query.filter_by(habit_id=habit_id, date=date).first()

    def get_completions_for_habit(self, habit_id):
        return (
            HabitCompletion.query.filter_by(habit_id=habit_id)
            .order_by(HabitCompletion.date)
            .all()
        )

    def get_completions_in_range(self, habit_id, start_date, end_date):
        return (
            HabitCompletion.query.filter(
                HabitCompletion.habit_id == habit_id,
                HabitCompletion.date >= start_date,
                HabitCompletion.date <= end_date,
            )
            .order_by(HabitCompletion.date)
            .all()
        )

    def get_completions_for_user_on(self, user_id, date):
        results = []
        for habit in self.get_all_habits(user_id):
            completion = self.get_completion_by_date(habit.id, date)
            if completion is not None:
                results.append((habit.id, completion))
        return results
