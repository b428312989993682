from flask import request

from mealplanner.access.context import current_user_context
from . import trainer_bp, get_service, respond


@trainer_bp.route("/customers", methods=["GET"])
def list_customers():
    result = get_service().list_customers(current_user_context(), request.args.to_dict())
    return respond(result)


@trainer_bp.route("/customers/<customer_id>", methods=["GET"])
def get_customer(customer_id):
    customer = get_service().get_customer(current_user_context(), customer_id)
    return respond({"customer": customer})


@trainer_bp.route("/customers/<customer_id>", methods=["DELETE"])
def unassign_customer(customer_id):
    get_service().unassign_customer(current_user_context(), customer_id)
    return respond({"message": "Customer unassigned successfully"})


@trainer_bp.route("/customers/<customer_id>", methods=["PATCH"])
def update_customer(customer_id):
    customer = get_service().update_customer_record(
        current_user_context(), customer_id, request.get_json(silent=True)
    )
    return respond({"message": "Customer updated successfully", "customer": customer})
