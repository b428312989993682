from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import create_access_token, set_access_cookies

from mealplanner.models.user import User

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/login", methods=["POST"])
def login_post():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"success": False, "error": "Missing JSON"}), 400

    email = str(data.get("email") or "").strip().lower()
    password = str(data.get("password") or "")

    if not email or not password:
        return jsonify({"success": False, "error": "Email and password are required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        current_app.logger.info(f"Login failed for {email}")
        return jsonify({"success": False, "error": "Invalid credentials"}), 401

    if user.status == "pending":
        return jsonify({"success": False, "error": "Account is pending approval"}), 403

    if user.status == "suspended":
        return jsonify({"success": False, "error": "Account is suspended"}), 403

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role},
    )

    response = jsonify({
        "success": True,
        "accessToken": access_token,
        "user": {
            "id": user.id,
            "name": user.name,
            "role": user.role
        }
    })
    set_access_cookies(response, access_token)
    return response, 200
