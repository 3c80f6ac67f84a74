import os
from datetime import datetime

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from dotenv import load_dotenv


def create_app(config_overrides=None, mongo_client=None):
    load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"), override=False)

    app = Flask(__name__)
    app.config.from_object("backend.config.Config")
    if config_overrides:
        app.config.update(config_overrides)
    app.json.sort_keys = False

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    from backend.config import check_config

    check_config(app)

    # Core extensions
    origins = [o.strip() for o in str(app.config["CORS_ORIGINS"]).split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)
    jwt = JWTManager(app)
    _register_jwt_handlers(jwt)

    # Initialize the MongoDB client
    from backend.utils.db import init_app as init_db

    init_db(app, client=mongo_client)

    # Register blueprints
    from backend.routes.auth_routes import auth_bp
    from backend.routes.task_routes import tasks_bp
    from backend.routes.notification_routes import notifications_bp
    from backend.routes.todo_routes import todos_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(notifications_bp, url_prefix="/api/tasks")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")
    app.register_blueprint(todos_bp, url_prefix="/api/todos")

    @app.get("/api/health")
    def health():
        return jsonify(
            status="ok",
            service="Taskboard API",
            timestamp=datetime.utcnow().isoformat(),
        ), 200

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(error="Not Found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify(error="Method Not Allowed"), 405

    @app.errorhandler(500)
    def server_error(exc):
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify(error="Internal Server Error"), 500

    return app


def _register_jwt_handlers(jwt):
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify(error="Not authorized, no token", detail=reason), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify(error="Not authorized, token failed", detail=reason), 401

    @jwt.expired_token_loader
    def expired_token(_header, _payload):
        return jsonify(error="Token has expired"), 401


if __name__ == "__main__":
    # Direct run support: python -m backend.app
    # `flask --app backend.app run` discovers create_app() on its own.
    create_app().run(
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "1") == "1",
    )
