"""Lottery draw service (Flask application package)."""

from __future__ import annotations

import atexit
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from flask import Flask

if TYPE_CHECKING:  # pragma: no cover
    from lottery.db import InventoryStore


def create_app(config: object | None = None, store: "InventoryStore | None" = None) -> Flask:
    """Application factory.

    Args:
        config: Config class or object; resolved from APP_ENV when omitted.
        store: An already opened ``InventoryStore``. When omitted one is
            opened from ``DATABASE_URL`` and closed at interpreter exit.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lottery.config import get_config
    from lottery.db import InventoryStore, init_db
    from lottery.error_handlers import register_error_handlers
    from lottery.logging_config import configure_logging
    from lottery.routes.health import health_bp
    from lottery.routes.lottery import lottery_bp
    from lottery.routes.participants import participants_bp
    from lottery.routes.prizes import prizes_bp
    from lottery.services.draw_service import DrawEngine

    app = Flask(__name__)
    app.config.from_object(config or get_config())

    configure_logging(app)

    if store is None:
        store = InventoryStore.open(
            str(app.config["DATABASE_URL"]),
            pool_size=int(app.config["DB_POOL_SIZE"]),
            max_overflow=int(app.config["DB_MAX_OVERFLOW"]),
            pool_timeout=int(app.config["DB_POOL_TIMEOUT"]),
        )
        atexit.register(store.close)
    init_db(app, store)
    register_error_handlers(app)

    app.extensions["draw_engine"] = DrawEngine(
        store,
        participant_mode=str(app.config["PARTICIPANT_NAME_MODE"]),
        keep_participant_on_empty=bool(app.config["KEEP_PARTICIPANT_ON_EMPTY_DRAW"]),
    )

    app.register_blueprint(health_bp)
    app.register_blueprint(lottery_bp)
    app.register_blueprint(prizes_bp, url_prefix="/api")
    app.register_blueprint(participants_bp, url_prefix="/api")

    return app
