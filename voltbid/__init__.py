import os
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env", override=False)


from .config import get_config
from .extensions import db, migrate, limiter
from .security import init_security
from .observability import init_logging, init_sentry
from .services.errors import NotFoundError, ServiceError
from .utils.formatters import format_currency, format_number, format_percent


def create_app():
    app = Flask(__name__, template_folder="templates")

    # ---- Rate limiting storage ----
    app_env = (os.getenv("APP_ENV", "development") or "development").lower()
    use_redis = app_env in ("staging", "production")
    storage_uri = os.environ.get("REDIS_URL") if use_redis else "memory://"
    if use_redis and not storage_uri:
        # Hard fail in stage/prod so we never silently run without RL storage
        raise RuntimeError("REDIS_URL is required in staging/production for rate limiting")
    app.config["RATELIMIT_STORAGE_URI"] = storage_uri
    app.config.setdefault("RATELIMIT_HEADERS_ENABLED", True)

    # Config: clean, explicit, class-based
    app.config.from_object(get_config())
    app.config["APP_ENV"] = app_env

    # --- Required env validation for prod-like envs (staging/production) ---
    def _require(name: str):
        val = os.getenv(name)
        if not val:
            raise RuntimeError(f"Missing required environment variable: {name}")
        return val

    if app_env in ("staging", "production"):
        # Enforce hard requirements at startup (not at import time)
        _require("SECRET_KEY")
        _require("DATABASE_URL")

    # --- Observability & Security ---
    init_logging(app)
    init_sentry(app)

    # Apply HTTPS, HSTS & CSP only in staging/production
    if app_env in ("staging", "production"):
        init_security(app)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db, directory="migrations")
    limiter.init_app(app)

    # Models must be imported before migrations/create_all see the metadata
    from . import models  # noqa: F401

    # Blueprints (each carries its own url_prefix)
    from .blueprints.api import bp as api_bp
    from .blueprints.exports import bp as exports_bp
    from .blueprints.drafts import bp as drafts_bp

    app.register_blueprint(api_bp)       # /api
    app.register_blueprint(exports_bp)   # /export
    app.register_blueprint(drafts_bp)    # /drafts

    # Display filters for the printable estimate
    app.jinja_env.filters["currency"] = format_currency
    app.jinja_env.filters["percent"] = format_percent
    app.jinja_env.filters["number"] = format_number

    # Health
    @app.get("/healthz")
    @limiter.exempt
    def healthz():
        return {"status": "ok"}, 200

    # ---- Error handlers: JSON everywhere ----
    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        db.session.rollback()
        return jsonify({"error": "not_found", "detail": str(e)}), 404

    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        db.session.rollback()
        return jsonify({"error": str(e)}), 409

    # 429 Too Many Requests with Retry-After
    @app.errorhandler(429)
    def too_many_requests(e):
        retry_after = getattr(e, "retry_after", None)
        headers = {}
        payload = {"error": "rate_limited", "code": 429}
        if retry_after is not None:
            headers["Retry-After"] = str(int(retry_after))
            payload["retry_after"] = int(retry_after)
        return (payload, 429, headers)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.name.lower().replace(" ", "_"), "code": e.code}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        app.logger.exception("Unhandled error")
        return jsonify({"error": "server_error"}), 500

    # CLI commands (ops-grade utilities)
    from .cli import register_cli
    register_cli(app)

    return app
