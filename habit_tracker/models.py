from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def all_days():
    return list(range(7))


# SQLite drops the offset, values are always stored as UTC
def as_utc(value):
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class User(db.Model):
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password = db.Column(db.String(120), nullable=False)  # bcrypt hash
    habits = db.relationship("Habit", backref="user", lazy=True)

    def to_dict(self):
        return {"id": self.id, "username": self.username}


class Habit(db.Model):
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    frequency = db.Column(db.String(20), nullable=False, default="daily")  # daily, weekly, custom
    days_of_week = db.Column(db.JSON, nullable=False, default=all_days)  # 0 = Sunday
    reminder_time = db.Column(db.String(5))  # HH:MM
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    completions = db.relationship(
        "HabitCompletion",
        backref="habit",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="HabitCompletion.date",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "userId": self.user_id,
            "frequency": self.frequency,
            "daysOfWeek": self.days_of_week,
            "reminderTime": self.reminder_time,
            "notes": self.notes,
            "createdAt": as_utc(self.created_at).isoformat(),
        }


class HabitCompletion(db.Model):
    __table_args__ = (
        db.UniqueConstraint("habit_id", "date", name="uq_habit_completion_habit_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    habit_id = db.Column(db.Integer, db.ForeignKey("habit.id"), nullable=False)
    date = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD
    completed = db.Column(db.Boolean, nullable=False, default=False)
    completion_percentage = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "habitId": self.habit_id,
            "date": self.date,
            "completed": self.completed,
            "completionPercentage": self.completion_percentage,
        }
