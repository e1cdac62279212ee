from flask import Flask, jsonify
from lendbox.config import Config
from lendbox.errors import LendingError
from lendbox.extensions import db, migrate, jwt


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # 2) register tables on db.metadata
    from lendbox import models  # noqa: F401

    if app.config.get("CREATE_SCHEMA_ON_STARTUP"):
        with app.app_context():
            db.create_all()

    # 3) API blueprints
    from lendbox.controllers.borrow_request_controller import borrow_request_bp
    app.register_blueprint(borrow_request_bp, url_prefix="/api/requests")

    # service errors -> JSON; status code comes from the error kind
    @app.errorhandler(LendingError)
    def handle_lending_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    return app
