from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    registry = current_app.extensions["krakel"]["registry"]
    with registry.session(code) as room:
        if room is None:
            return jsonify({"error": "room_not_found"}), 404
        return jsonify(registry.public_state(room))
