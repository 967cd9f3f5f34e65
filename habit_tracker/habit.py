import logging
from datetime import date, datetime, timedelta, timezone

from flask import Blueprint, abort, jsonify, request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from .authentication import user_required
from .models import db
from .schemas import CompletionCreate, HabitCreate, HabitUpdate, error_fields
from .storage import get_storage
from .streak import current_streak, longest_streak

logger = logging.getLogger(__name__)

bp = Blueprint("habits", __name__, url_prefix="/api")


def owned_habit(user, habit_id):
    habit = get_storage().get_habit(habit_id)
    if habit is None:
        abort(404, description="Habit not found")
    if habit.user_id != user.id:
        logger.error(f"Unauthorized access to habit {habit_id} by user {user.id}")
        abort(403, description="Unauthorized")
    return habit


def last_week(habit_id, completions, today):
    by_date = {c.date: c for c in completions}
    week = []
    for offset in range(6, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        completion = by_date.get(day)
        if completion is not None:
            week.append(completion.to_dict())
        else:
            # Placeholder so the client always gets seven dots
            week.append({
                "id": 0,
                "habitId": habit_id,
                "date": day,
                "completed": False,
                "completionPercentage": 0,
            })
    return week


@bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}), 200


@bp.route("/habits", methods=["GET"])
@user_required
def list_habits(user):
    storage = get_storage()
    today = date.today()
    try:
        habits = storage.get_all_habits(user.id)
        results = []
        for habit in habits:
            completions = storage.get_completions_for_habit(habit.id)
            streak = current_streak(storage, habit.id, today=today)
            results.append({
                **habit.to_dict(),
                "completions": last_week(habit.id, completions, today),
                "streak": streak,
                "currentStreak": streak,
                "longestStreak": longest_streak(completions),
            })
        logger.debug(f"Fetched {len(habits)} habits for user {user.username}")
        return jsonify(results), 200
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching habits: {str(e)}")
        return jsonify({"message": "Failed to fetch habits"}), 500


@bp.route("/habits", methods=["POST"])
@user_required
def create_habit(user):
    data = request.get_json(silent=True)
    logger.debug(f"Create habit payload: {data}")
    try:
        habit_data = HabitCreate.model_validate(data or {})
    except ValidationError as e:
        logger.error(f"Invalid habit data: {e.error_count()} errors")
        return jsonify({"message": "Invalid habit data", "errors": error_fields(e)}), 400
    try:
        habit = get_storage().create_habit({**habit_data.model_dump(), "user_id": user.id})
        return jsonify(habit.to_dict()), 201
    except SQLAlchemyError as e:
        logger.error(f"Database error creating habit: {str(e)}")
        db.session.rollback()
        return jsonify({"message": "Failed to create habit"}), 500


@bp.route("/habits/<int:habit_id>", methods=["GET"])
@user_required
def get_habit(user, habit_id):
    habit = owned_habit(user, habit_id)
    storage = get_storage()
    completions = storage.get_completions_for_habit(habit_id)
    return jsonify({
        **habit.to_dict(),
        "completions": [c.to_dict() for c in completions],
        "streak": current_streak(storage, habit_id),
    }), 200


@bp.route("/habits/<int:habit_id>", methods=["PUT"])
@user_required
def update_habit(user, habit_id):
    owned_habit(user, habit_id)
    data = request.get_json(silent=True)
    logger.debug(f"Update habit {habit_id} payload: {data}")
    try:
        changes = HabitUpdate.model_validate(data or {}).model_dump(exclude_unset=True)
    except ValidationError as e:
        logger.error(f"Invalid habit update for {habit_id}: {e.error_count()} errors")
        return jsonify({"message": "Invalid habit data", "errors": error_fields(e)}), 400
    try:
        habit = get_storage().update_habit(habit_id, changes)
    except SQLAlchemyError as e:
        logger.error(f"Database error updating habit: {str(e)}")
        db.session.rollback()
        return jsonify({"message": "Failed to update habit"}), 500
    if habit is None:
        abort(404, description="Habit not found")
    return jsonify(habit.to_dict()), 200


@bp.route("/habits/<int:habit_id>", methods=["DELETE"])
@user_required
def delete_habit(user, habit_id):
    owned_habit(user, habit_id)
    try:
        deleted = get_storage().delete_habit(habit_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting habit {habit_id}: {str(e)}")
        db.session.rollback()
        return jsonify({"message": "Failed to delete habit"}), 500
    if not deleted:
        abort(404, description="Habit not found")
    return "", 204


@bp.route("/habits/<int:habit_id>/completions", methods=["POST"])
@user_required
def track_completion(user, habit_id):
    owned_habit(user, habit_id)
    data = request.get_json(silent=True)
    logger.debug(f"Completion payload for habit {habit_id}: {data}")
    try:
        entry = CompletionCreate.model_validate(data or {})
    except ValidationError as e:
        logger.error(f"Invalid completion data for habit {habit_id}: {e.error_count()} errors")
        return jsonify({"message": "Invalid completion data", "errors": error_fields(e)}), 400
    try:
        completion = get_storage().track_completion(
            habit_id, entry.date, entry.completed, entry.completion_percentage
        )
        return jsonify(completion.to_dict()), 201
    except SQLAlchemyError as e:
        logger.error(f"Database error tracking completion: {str(e)}")
        db.session.rollback()
        return jsonify({"message": "Failed to track habit completion"}), 500


@bp.route("/habits/<int:habit_id>/completions", methods=["GET"])
@user_required
def list_completions(user, habit_id):
    owned_habit(user, habit_id)
    storage = get_storage()
    start_date = request.args.get("startDate")
    end_date = request.args.get("endDate")
    if start_date and end_date:
        completions = storage.get_completions_in_range(habit_id, start_date, end_date)
    else:
        completions = storage.get_completions_for_habit(habit_id)
    return jsonify([c.to_dict() for c in completions]), 200
