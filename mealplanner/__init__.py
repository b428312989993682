import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from mealplanner.extensions import db, ma, jwt, migrate, limiter
from mealplanner.access.responses import rate_limited_outcome
from mealplanner.cache import MemoryCache
from mealplanner.config import config
from mealplanner.services.invitations import InvitationService
from mealplanner.services.trainer_customers import TrainerCustomerService
from mealplanner.storage.sql import SQLAlchemyStorage


def configure_logging(app):
    level = app.config.get('LOG_LEVEL', 'INFO')
    app.logger.setLevel(level)
    logging.getLogger('mealplanner').setLevel(level)


def create_app(config_name=None, storage=None, cache=None):
    """Application factory.

    ``storage`` and ``cache`` replace the SQL storage and in-process cache
    behind the trainer endpoints.
    """
    app = Flask(__name__)
    app.config.from_object(config[config_name or os.getenv('FLASK_CONFIG', 'default')])
    configure_logging(app)

    # Extensions
    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    CORS(app, resources={r"/*": {
        "origins": app.config['CORS_ORIGINS'],
        "allow_headers": ["Content-Type", "Authorization"],
        "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    }})

    storage = storage or SQLAlchemyStorage(db)
    cache = cache or MemoryCache()
    app.extensions['trainer_customers'] = TrainerCustomerService(
        storage=storage,
        cache=cache,
        cache_ttl=app.config['CUSTOMER_LIST_CACHE_TTL'],
        max_page_size=app.config['CUSTOMER_LIST_MAX_LIMIT'],
    )
    app.extensions['invitations'] = InvitationService(
        storage=storage,
        cache=cache,
        ttl_days=app.config['INVITATION_TTL_DAYS'],
    )

    @app.errorhandler(429)
    def rate_limit_handler(error):
        status, body = rate_limited_outcome()
        return jsonify(body), status

    @app.errorhandler(404)
    def not_found_handler(error):
        return jsonify({"success": False, "error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed_handler(error):
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error_handler(error):
        app.logger.error(f"Unhandled error: {error}")
        return jsonify({"success": False, "error": "Internal server error"}), 500

    # Blueprints
    from mealplanner.routes.auth import auth_bp
    from mealplanner.routes.invitations import invitations_bp
    from mealplanner.routes.trainer import trainer_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(invitations_bp, url_prefix="/api/invitations")
    app.register_blueprint(trainer_bp, url_prefix="/trainers")

    return app
