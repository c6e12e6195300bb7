from __future__ import annotations

import logging
import sys

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.boards import BoardCatalog
from .game.service import RoomRegistry
from .game.words import WordPool
from .routes.game import boards_bp
from .routes.game import bp as game_bp
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .realtime.handlers import register_socketio_handlers

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(RequestEntityTooLarge)
    def too_large(err):
        limit_mb = app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        return jsonify({"error": "File too large", "message": f"Image file must be less than {limit_mb}MB"}), 400

    @app.errorhandler(HTTPException)
    def http_error(err: HTTPException):
        if err.code == 404:
            return jsonify({"error": "Not Found", "message": f"Route {request.path} not found"}), 404
        return jsonify({"error": err.name, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def unhandled(err: Exception):
        logger.exception("[error] unhandled exception")
        return jsonify({"error": "Internal Server Error", "message": "Something went wrong"}), 500


def create_app(config_class=Config) -> tuple[Flask, SocketIO]:
    app = Flask(__name__, static_folder=None)
    app.config.from_object(config_class)

    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        logger.warning("[config] unknown LOG_LEVEL %r, using INFO", app.config.get("LOG_LEVEL"))
        level = logging.INFO
    logging.getLogger("krakel").setLevel(level)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}}, supports_credentials=True)

    env_async_mode = app.config.get("SOCKETIO_ASYNC_MODE", "")
    if env_async_mode:
        async_mode = env_async_mode
    else:
        # Default choice:
        # - Windows: threading (eventlet has known compatibility issues on newer Python)
        # - Python >= 3.13: threading (safer default)
        # - Otherwise: eventlet
        if sys.platform.startswith("win") or sys.version_info >= (3, 13):
            async_mode = "threading"
        else:
            async_mode = "eventlet"

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=async_mode,
    )

    boards = BoardCatalog(
        app.config["BOARDS_DIR"],
        base_url=app.config["BACKEND_URL"],
        fallback=app.config.get("FALLBACK_BOARD", "board1.jpg"),
    )
    registry = RoomRegistry(
        word_pool=app.config.get("WORD_POOL") or WordPool(),
        boards=boards,
        debug=app.config.get("DEBUG_RESULTS", False),
    )
    app.extensions["krakel"] = {"registry": registry, "boards": boards}

    app.register_blueprint(health_bp)
    app.register_blueprint(boards_bp)
    app.register_blueprint(rooms_bp, url_prefix="/api")
    app.register_blueprint(game_bp, url_prefix="/api")

    register_socketio_handlers(socketio, registry)
    _register_error_handlers(app)

    return app, socketio
