import logging
import os
import uuid

from flask import Flask, g, render_template
from dotenv import load_dotenv
from sqlalchemy import inspect as sa_inspect

from app.fazbook.config import load_config
from app.fazbook.db import init_db
from app.fazbook.models import Base
from app.fazbook.method_override import MethodOverrideMiddleware
from app.fazbook.routes import bp as routes_bp
from app.fazbook.modules.users.routes import bp as users_bp
from app.fazbook.modules.users.service import InvalidUserPayload
from app.fazbook.modules.users.store import SqlUserStore, UserStore


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InvalidUserPayload)
    def _err_invalid_payload(e):  # type: ignore[no-redef]
        app.logger.info("Rejected user form (request_id=%s): %s", getattr(g, "request_id", None), e)
        return render_template("errors/400.html", message=str(e)), 400

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return render_template("errors/404.html", message="Not Found"), 404

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        # Ensure stack trace shows in server logs.
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return render_template("errors/500.html"), 500


def create_app(user_store: UserStore | None = None) -> Flask:
    """
    Application factory.

    ``user_store`` replaces the SQL-backed store (tests pass a MemoryUserStore).
    """
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    app.wsgi_app = MethodOverrideMiddleware(  # type: ignore[method-assign]
        app.wsgi_app,
        max_content_length=app.config.get("MAX_CONTENT_LENGTH"),
    )

    log_level = getattr(logging, app.config["LOG_LEVEL"], logging.INFO)
    app.logger.setLevel(log_level)

    @app.template_filter("dateformat")
    def _dateformat_filter(value, format: str = "%Y-%m-%d") -> str:
        if value is None:
            return "—"
        if hasattr(value, "strftime"):
            return value.strftime(format)
        return str(value)

    @app.before_request
    def _assign_request_id():
        if not getattr(g, "request_id", None):
            g.request_id = uuid.uuid4().hex

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    if app.config.get("CREATE_TABLES_ON_START"):
        Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])

    if user_store is None:
        user_store = SqlUserStore(app.extensions["sqlalchemy_sessionmaker"])
        _run_schema_health_check(app)
    app.extensions["user_store"] = user_store

    app.register_blueprint(routes_bp)
    app.register_blueprint(users_bp, url_prefix=app.config["USERS_URL_PREFIX"])
    register_error_handlers(app)

    logging.getLogger(__name__).info(
        "create_app() complete; users mounted at %s (strict_not_found=%s)",
        app.config["USERS_URL_PREFIX"],
        app.config["USERS_STRICT_NOT_FOUND"],
    )
    return app


def _run_schema_health_check(app: Flask) -> None:
    """Log loudly when the users table is missing or lacks expected columns."""
    missing: list[str] = []
    try:
        insp = sa_inspect(app.extensions["sqlalchemy_engine"])
        if not insp.has_table("users"):
            missing.append("users (table)")
        else:
            cols = {c["name"] for c in insp.get_columns("users")}
            for col in ("first_name", "last_name", "email", "dob"):
                if col not in cols:
                    missing.append(f"users.{col}")
    except Exception as e:
        app.logger.exception("Schema health check failed: %s", e)
        return

    if missing:
        app.logger.error("DB schema out of date; run `python scripts/init_db.py`. Missing: %s", ", ".join(missing))
