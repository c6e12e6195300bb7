from __future__ import annotations

import logging
from typing import Any

from flask import request
from flask_socketio import SocketIO, join_room, leave_room

from ..game.service import RoomRegistry
from ..utils.ip import get_client_ip
from . import events
from .dispatch import Dispatcher

logger = logging.getLogger(__name__)


MAX_NAME_LENGTH = 32


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > MAX_NAME_LENGTH:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _room_code(payload: dict) -> str:
    # Codes are opaque and case-sensitive; only non-strings are rejected.
    code = payload.get("roomCode")
    return code if isinstance(code, str) else ""


def _rotation(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0
    return raw


def register_socketio_handlers(socketio: SocketIO, registry: RoomRegistry) -> None:
    dispatcher = Dispatcher(socketio)

    def _leave_current(sid: str, transport_gone: bool = False) -> None:
        code = registry.room_of(sid)
        if code is None:
            return
        with registry.session(code) as room:
            if room is None:
                return
            outbox = registry.remove_player(room, sid)
            if not transport_gone:
                leave_room(code)
            dispatcher.deliver(outbox)

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.info("[connect] sid=%s ip=%s", request.sid, get_client_ip(request))

    @socketio.on(events.SET_PLAYER_NAME)
    def set_player_name(data):
        payload = data if isinstance(data, dict) else {}
        room_code = _room_code(payload)
        name = str(payload.get("name", "")).strip()

        if not room_code or not _validate_name(name):
            logger.debug("[join-drop] sid=%s invalid payload", request.sid)
            return

        current = registry.room_of(request.sid)
        if current is not None and current != room_code:
            _leave_current(request.sid)

        with registry.session(room_code, create=True) as room:
            join_room(room_code)
            outbox = registry.join(room, request.sid, name)
            dispatcher.deliver(outbox)

    @socketio.on(events.SUBMIT_DRAWING)
    def submit_drawing(data):
        payload = data if isinstance(data, dict) else {}
        room_code = _room_code(payload)
        drawing = payload.get("drawing")
        if not room_code or not isinstance(drawing, str):
            return

        with registry.session(room_code) as room:
            if room is None:
                return
            outbox = registry.submit_drawing(room, request.sid, drawing, _rotation(payload.get("rotation")))
            dispatcher.deliver(outbox)

    @socketio.on(events.UNSUBMIT_DRAWING)
    def unsubmit_drawing(data):
        payload = data if isinstance(data, dict) else {}
        room_code = _room_code(payload)
        if not room_code:
            return

        with registry.session(room_code) as room:
            if room is None:
                return
            dispatcher.deliver(registry.unsubmit_drawing(room, request.sid))

    @socketio.on(events.VOTE_WORD)
    def vote_word(data):
        payload = data if isinstance(data, dict) else {}
        room_code = _room_code(payload)
        word = payload.get("word")
        if not room_code or not isinstance(word, str):
            return

        with registry.session(room_code) as room:
            if room is None:
                return
            dispatcher.deliver(registry.vote_word(room, request.sid, word))

    @socketio.on(events.NEW_ROUND)
    def new_round(data):
        payload = data if isinstance(data, dict) else {}
        room_code = _room_code(payload)
        if not room_code:
            return

        with registry.session(room_code) as room:
            if room is None:
                return
            dispatcher.deliver(registry.new_round(room, request.sid))

    @socketio.on("disconnect")
    def on_disconnect(*args):
        logger.info("[disconnect] sid=%s", request.sid)
        _leave_current(request.sid, transport_gone=True)
