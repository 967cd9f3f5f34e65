import logging
from functools import wraps

import bcrypt
from flask import current_app, jsonify

from .storage import get_storage

logger = logging.getLogger(__name__)


def hash_password(password, rounds=12):
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password, hashed):
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def seed_demo_user(storage, username, password, rounds=12):
    user = storage.get_user_by_username(username)
    if user:
        return user
    logger.info(f"Seeding demo user {username}")
    return storage.create_user({"username": username, "password": hash_password(password, rounds)})


# Resolves the acting user and passes it to the view, like a token check would
def user_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        user = get_storage().get_user_by_username(current_app.config["DEMO_USERNAME"])
        if not user:
            logger.error("Demo user missing from store")
            return jsonify({"message": "User not found"}), 401
        return f(user, *args, **kwargs)
    return decorated
