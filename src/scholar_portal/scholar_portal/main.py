from __future__ import annotations

import importlib
import logging
import re
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_mail import Mail

from config import get_settings_module

from .activities.controller import register as register_activities
from .container import Container, build_container
from .core.constants import MAX_IMAGE_BYTES, PASSWORD_HASH_METHOD
from .credentials.controller import register as register_credentials
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_scholar, list_tables
from .notifications.mailer import FlaskMailNotifier
from .payroll.controller import register as register_payroll
from .scholars.controller import register as register_scholars

logger = logging.getLogger("scholar_portal")

REPO_ROOT = Path(__file__).resolve().parents[3]

_RESET_PATH = re.compile(r"(/reset-password/)[^\s?/\"]+")


class ResetTokenFilter(logging.Filter):
    """Masks reset tokens in request lines written by the werkzeug access log."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "/reset-password/" in message:
            record.msg = _RESET_PATH.sub(r"\1<redacted>", message)
            record.args = ()
        return True


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="[scholar-portal] %(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    werkzeug_logger = logging.getLogger("werkzeug")
    if not any(isinstance(f, ResetTokenFilter) for f in werkzeug_logger.filters):
        werkzeug_logger.addFilter(ResetTokenFilter())


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", 7))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))
    # Room for the other form fields around a maximum-size image.
    app.config["MAX_CONTENT_LENGTH"] = MAX_IMAGE_BYTES + 64 * 1024
    app.config.update(getattr(settings, "MAIL_SETTINGS", {}))

    if container is None:
        if not app.config.get("MAIL_DEFAULT_SENDER"):
            raise RuntimeError("MAIL_DEFAULT_SENDER (or MAIL_USERNAME) must be set to send password reset mail")
        db_config = getattr(settings, "DB_CONFIG")
        hash_method = getattr(settings, "PASSWORD_HASH_METHOD", PASSWORD_HASH_METHOD)
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_scholar(db_config, password_hash_method=hash_method)
            logger.info("demo seed ready")

        mail = Mail(app)
        notifier = FlaskMailNotifier(mail, sender=app.config.get("MAIL_DEFAULT_SENDER"))
        container = build_container(db_config=db_config, notifier=notifier, password_hash_method=hash_method)

    app.extensions["scholar_portal"] = container

    register_credentials(app, container)
    register_scholars(app, container)
    register_payroll(app, container)
    register_activities(app, container)

    return app
