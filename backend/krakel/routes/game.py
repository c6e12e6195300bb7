from __future__ import annotations

import random
import time
from datetime import datetime, timezone
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from werkzeug.utils import secure_filename

from ..game.boards import is_image_file
from ..game.words import random_word

bp = Blueprint("game", __name__)


def _boards():
    return current_app.extensions["krakel"]["boards"]


def _save_upload(file, uploads_dir: Path) -> Path:
    uploads_dir.mkdir(parents=True, exist_ok=True)
    ext = Path(secure_filename(file.filename)).suffix.lower()
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    target = uploads_dir / f"board-{suffix}{ext}"
    file.save(target)
    return target


@bp.get("/game/word")
def get_word():
    word, category = random_word()
    return jsonify({
        "word": word,
        "category": category,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


@bp.get("/game/boards")
def list_boards():
    boards = _boards().describe()
    if not boards and not _boards().directory.is_dir():
        return jsonify({"boards": [], "message": "No boards directory found"})
    return jsonify({"boards": boards, "count": len(boards)})


@bp.get("/game/board/random")
def random_board():
    boards = _boards().describe()
    if not boards:
        return jsonify({"error": "No board images found"}), 404
    return jsonify(random.choice(boards))


@bp.post("/upload-board")
def upload_board():
    file = request.files.get("boardImage")
    if file is None or not file.filename:
        return jsonify({"error": "No image file provided"}), 400

    if not (file.mimetype or "").startswith("image/") or not is_image_file(file.filename):
        return jsonify({"error": "Only image files are allowed"}), 400

    saved = _save_upload(file, Path(current_app.config["UPLOADS_DIR"]))
    return jsonify({
        "message": "Board image uploaded successfully",
        "filename": saved.name,
        "originalName": secure_filename(file.filename),
        "size": saved.stat().st_size,
    })


boards_bp = Blueprint("boards", __name__)


@boards_bp.get("/boards/<path:filename>")
def board_file(filename: str):
    return send_from_directory(_boards().directory, filename)
