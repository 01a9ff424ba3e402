from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .cash.controller import register as register_cash
from .common.web import register_error_handlers
from .container import build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .ledger.controller import register as register_ledger
from .menus.controller import register as register_menus
from .notifications.controller import register as register_notifications
from .registrations.controller import register as register_registrations
from .tenants.controller import register as register_tenants
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

LOG_FORMAT = "[mess-system] %(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    store_path = getattr(settings, "STORE_PATH", None)
    logger.info("settings=%s store=%s", settings_module, store_path or "<memory>")

    container = build_container(
        store_path=store_path,
        admin_username=getattr(settings, "BOOTSTRAP_ADMIN_USERNAME", "admin"),
        admin_password=getattr(settings, "BOOTSTRAP_ADMIN_PASSWORD", "admin"),
        tenant_name=getattr(settings, "BOOTSTRAP_TENANT_NAME", "Main Mess"),
    )
    app.extensions["mess_container"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_tenants(app, container)
    register_attendance(app, container)
    register_ledger(app, container)
    register_cash(app, container)
    register_menus(app, container)
    register_notifications(app, container)
    register_registrations(app, container)
    register_audit(app, container)

    return app
