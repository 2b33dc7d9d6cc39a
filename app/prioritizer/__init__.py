import logging
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from app.prioritizer.auth import bp as auth_bp, load_current_user
from app.prioritizer.config import DEFAULT_ADMIN_PASSWORD, load_config
from app.prioritizer.modules.comments.api import bp as comments_bp
from app.prioritizer.modules.features.api import bp as features_bp
from app.prioritizer.modules.reports.api import bp as reports_bp
from app.prioritizer.modules.scoring_criteria.api import bp as scoring_criteria_bp
from app.prioritizer.routes import bp as routes_bp
from app.prioritizer.seed import seed_store
from app.prioritizer.store import FeatureStore, StoreError, store_from_config


def create_app(store: FeatureStore | None = None, *, seed: bool = True) -> Flask:
    """
    Build the API app. Pass `store` to inject one (tests do); otherwise the
    backend is chosen by STORE_BACKEND.
    """
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=8)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = True

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")
        if app.config.get("STORE_BACKEND") == "sql" and str(app.config.get("DATABASE_URL")).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if str(app.config.get("ADMIN_PASSWORD")) == DEFAULT_ADMIN_PASSWORD:
            raise RuntimeError("ADMIN_PASSWORD must be set to a non-default value in production.")
        if app.config.get("STORE_BACKEND") == "memory":
            app.logger.warning("STORE_BACKEND=memory in production; all data is lost on restart.")

    if store is None:
        store = store_from_config(app.config)
    app.extensions["feature_store"] = store
    if seed:
        seed_store(store, app.config)

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(features_bp, url_prefix="/api")
    app.register_blueprint(reports_bp, url_prefix="/api")
    app.register_blueprint(scoring_criteria_bp, url_prefix="/api")
    app.register_blueprint(comments_bp, url_prefix="/api")

    app.before_request(load_current_user)

    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):  # type: ignore[no-redef]
        if e.code == 401:
            return "", 401
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(StoreError)
    def _err_store(e: StoreError):  # type: ignore[no-redef]
        app.logger.exception("Store failure (path=%s request_id=%s)", request.path, getattr(g, "request_id", None))
        return jsonify({"message": "Storage operation failed"}), 500

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (path=%s request_id=%s)", request.path, getattr(g, "request_id", None))
        return jsonify({"message": "Internal server error"}), 500

    logging.getLogger(__name__).info(
        "create_app() complete; store=%s; app ready to serve", type(store).__name__
    )

    return app
