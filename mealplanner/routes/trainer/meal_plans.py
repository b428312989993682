from flask import request

from mealplanner.access.context import current_user_context
from . import trainer_bp, get_service, respond


# ================================
# Trainer meal plan library
# ================================
@trainer_bp.route("/meal-plans", methods=["GET"])
def list_meal_plans():
    plans = get_service().list_meal_plans(current_user_context())
    return respond({"mealPlans": plans})


@trainer_bp.route("/meal-plans", methods=["POST"])
def create_meal_plan():
    plan = get_service().create_meal_plan(current_user_context(), request.get_json(silent=True))
    return respond({"message": "Meal plan created successfully", "mealPlan": plan}, 201)


@trainer_bp.route("/meal-plans/<meal_plan_id>/assignments", methods=["POST"])
def bulk_assign_meal_plan(meal_plan_id):
    assignments = get_service().assign_meal_plan_to_customers(
        current_user_context(), meal_plan_id, request.get_json(silent=True)
    )
    return respond({"message": "Meal plan assigned successfully", "assignments": assignments}, 201)


# ================================
# Customer meal plan assignments
# ================================
@trainer_bp.route("/customers/<customer_id>/meal-plans", methods=["GET"])
def list_customer_meal_plans(customer_id):
    assignments = get_service().list_meal_plan_assignments(current_user_context(), customer_id)
    return respond({"assignments": assignments})


@trainer_bp.route("/customers/<customer_id>/meal-plans", methods=["POST"])
def assign_meal_plan(customer_id):
    assignment = get_service().assign_meal_plan(
        current_user_context(), customer_id, request.get_json(silent=True)
    )
    return respond({"message": "Meal plan assigned successfully", "assignment": assignment})


@trainer_bp.route("/customers/<customer_id>/meal-plans/<assignment_id>", methods=["DELETE"])
def remove_meal_plan_assignment(customer_id, assignment_id):
    assignment = get_service().cancel_meal_plan_assignment(
        current_user_context(), customer_id, assignment_id
    )
    return respond({"message": "Meal plan assignment removed", "assignment": assignment})
