from flask import Blueprint, current_app, jsonify

from mealplanner.access.errors import StorageError, TrainerAccessError
from mealplanner.access.responses import to_http_outcome
from mealplanner.extensions import limiter

trainer_bp = Blueprint('trainer', __name__)

limiter.limit(lambda: current_app.config["TRAINER_RATE_LIMIT"])(trainer_bp)


def get_service():
    return current_app.extensions["trainer_customers"]


def respond(outcome, status=200):
    status, body = to_http_outcome(outcome, status)
    return jsonify(body), status


@trainer_bp.errorhandler(TrainerAccessError)
def handle_access_error(error):
    if isinstance(error, StorageError):
        current_app.logger.error(f"Storage failure ({error.public_message}): {error.detail}")
    return respond(error)


from . import customers, invitations, meal_plans, progress  # noqa: E402,F401
