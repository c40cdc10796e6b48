"""
FLASK APP ENTRY POINT - AUTHNOTIFY BACKEND SERVER
==================================================

Builds the Flask app: configuration, logging, CORS, the account database,
the hash provider, the notification scheduler and the API blueprint.

MAIN FEATURES
- JSON API under /api (see backend/routes.py)
- CORS enabled so a separate frontend / extension can call the API
- Background notifications every 30 s while "enabled" is on
- Index endpoint listing the available routes
"""
import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from core import get_provider
from database import db_manager

from .config import Config, configure_logging
from .notifier import NotificationScheduler
from .routes import otp_bp

logger = logging.getLogger(__name__)


def create_app(overrides: dict = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])

    # Allow the UI (served from another origin) to call the API
    CORS(app)

    db_path = db_manager.init_db(app.config["DATABASE_FILE"])
    app.config["DATABASE_FILE"] = db_path

    provider = get_provider(app.config["HASH_PROVIDER"])
    settings = db_manager.get_settings(db_path)
    scheduler = NotificationScheduler(
        load_accounts=lambda: db_manager.list_accounts(db_path),
        interval=settings.interval,
        time_step=app.config["TIME_STEP"],
        provider=provider,
        is_enabled=lambda: db_manager.get_settings(db_path).enabled,
    )
    app.extensions["authnotify.provider"] = provider
    app.extensions["authnotify.scheduler"] = scheduler

    app.register_blueprint(otp_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({
            "service": "authnotify",
            "endpoints": sorted(
                f"{','.join(sorted(r.methods - {'HEAD', 'OPTIONS'}))} {r.rule}"
                for r in app.url_map.iter_rules()
                if r.endpoint != 'static'
            ),
        })

    if settings.enabled and app.config["NOTIFY_AUTOSTART"]:
        scheduler.start()

    logger.info("authnotify ready (db=%s, provider=%s)", db_path, provider.name)
    return app


# Only runs when executed directly (`python -m backend.app`)
if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config["DEBUG"], host=app.config["HOST"], port=app.config["PORT"])
