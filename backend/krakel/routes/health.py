from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    registry = current_app.extensions["krakel"]["registry"]
    return jsonify({
        "status": "OK",
        "message": "KrakelOrakel backend is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **registry.stats(),
    })
