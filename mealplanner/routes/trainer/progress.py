from flask import request

from mealplanner.access.context import current_user_context
from . import trainer_bp, get_service, respond


@trainer_bp.route("/customers/<customer_id>/progress", methods=["GET"])
def list_progress(customer_id):
    progress = get_service().list_progress(current_user_context(), customer_id)
    return respond({"progress": progress})


@trainer_bp.route("/customers/<customer_id>/progress", methods=["PUT"])
def update_progress(customer_id):
    record = get_service().update_progress(
        current_user_context(), customer_id, request.get_json(silent=True)
    )
    return respond({"message": "Progress updated successfully", "progress": record})
