import os
from pathlib import Path


BACKEND_DIR = Path(__file__).resolve().parents[1]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    PORT = int(os.environ.get("PORT", "5000"))

    # CORS / Socket.IO handshake origin
    CORS_ORIGINS = os.environ.get("FRONTEND_URL", "http://localhost:3000")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Empty means: pick per platform in create_app
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Echo the assigned words back in result payloads
    DEBUG_RESULTS = os.environ.get("DEBUG", "false") == "true"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Boards
    BACKEND_URL = os.environ.get("BACKEND_URL", f"http://localhost:{PORT}")
    BOARDS_DIR = os.environ.get("BOARDS_DIR", str(BACKEND_DIR / "boards"))
    UPLOADS_DIR = os.environ.get("UPLOADS_DIR", str(BACKEND_DIR / "uploads"))
    FALLBACK_BOARD = os.environ.get("FALLBACK_BOARD", "board1.jpg")
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_UPLOAD_MB", "10")) * 1024 * 1024
