import calendar
import logging
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from .authentication import user_required
from .stats import build_stats_report
from .storage import get_storage

logger = logging.getLogger(__name__)

bp = Blueprint("analysis", __name__, url_prefix="/api")


def month_bounds(year, month):
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()


@bp.route("/calendar", methods=["GET"])
@user_required
def get_calendar(user):
    raw_month = request.args.get("month")
    raw_year = request.args.get("year")
    if not raw_month or not raw_year:
        return jsonify({"message": "Month and year are required"}), 400
    try:
        month, year = int(raw_month), int(raw_year)
    except ValueError:
        return jsonify({"message": "Invalid month or year"}), 400
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return jsonify({"message": "Invalid month or year"}), 400

    storage = get_storage()
    start_date, end_date = month_bounds(year, month)
    try:
        calendar_data = [
            {
                "habitId": habit.id,
                "name": habit.name,
                "category": habit.category,
                "completions": [
                    c.to_dict()
                    for c in storage.get_completions_in_range(habit.id, start_date, end_date)
                ],
            }
            for habit in storage.get_all_habits(user.id)
        ]
        logger.debug(f"Calendar {year}-{month:02d} fetched for user {user.username}: {len(calendar_data)} habits")
        return jsonify(calendar_data), 200
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching calendar data: {str(e)}")
        return jsonify({"message": "Failed to fetch calendar data"}), 500


@bp.route("/stats", methods=["GET"])
@user_required
def get_stats(user):
    # Period only changes how the client labels the dashboard
    period = request.args.get("period", "week")
    try:
        report = build_stats_report(
            get_storage(), user.id, top=current_app.config["TOP_HABITS_LIMIT"]
        )
        return jsonify({"period": period, **report}), 200
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching stats: {str(e)}")
        return jsonify({"message": "Failed to fetch stats"}), 500
