from flask import current_app, request

from mealplanner.access.context import current_user_context
from . import trainer_bp, respond


def get_invitations():
    return current_app.extensions["invitations"]


@trainer_bp.route("/invitations", methods=["POST"])
def send_invitation():
    invitation = get_invitations().send_invitation(current_user_context(), request.get_json(silent=True))
    return respond({"message": "Invitation sent successfully", "invitation": invitation}, 201)


@trainer_bp.route("/invitations", methods=["GET"])
def list_invitations():
    invitations = get_invitations().list_invitations(current_user_context())
    return respond({"invitations": invitations})
