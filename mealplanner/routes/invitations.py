from flask import Blueprint, current_app, request, jsonify

from mealplanner.access.context import current_user_context
from mealplanner.access.errors import StorageError, TrainerAccessError
from mealplanner.access.responses import to_http_outcome
from mealplanner.extensions import limiter

invitations_bp = Blueprint("invitations", __name__)

limiter.limit(lambda: current_app.config["INVITATION_RATE_LIMIT"])(invitations_bp)


def respond(outcome, status=200):
    status, body = to_http_outcome(outcome, status)
    return jsonify(body), status


@invitations_bp.errorhandler(TrainerAccessError)
def handle_invitation_error(error):
    if isinstance(error, StorageError):
        current_app.logger.error(f"Storage failure ({error.public_message}): {error.detail}")
    return respond(error)


@invitations_bp.route("/verify/<token>", methods=["GET"])
def verify_invitation(token):
    invitation = current_app.extensions["invitations"].verify_invitation(token)
    return respond({"invitation": invitation})


@invitations_bp.route("/accept", methods=["POST"])
def accept_invitation():
    customer = current_app.extensions["invitations"].accept_invitation(
        current_user_context(), request.get_json(silent=True)
    )
    return respond({"message": "Invitation accepted", "user": customer}, 201)
