from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from flask_socketio import SocketIO


@dataclass(frozen=True)
class Envelope:
    event: str
    payload: Any
    to: str
    room_wide: bool


@dataclass
class Outbox:
    """Outbound events produced by one room operation, in emit order."""

    envelopes: list[Envelope] = field(default_factory=list)

    def room(self, room_code: str, event: str, payload: Any = None) -> None:
        self.envelopes.append(Envelope(event=event, payload=payload, to=room_code, room_wide=True))

    def player(self, player_id: str, event: str, payload: Any = None) -> None:
        self.envelopes.append(Envelope(event=event, payload=payload, to=player_id, room_wide=False))

    def events(self) -> list[str]:
        return [e.event for e in self.envelopes]

    def find(self, event: str) -> list[Envelope]:
        return [e for e in self.envelopes if e.event == event]

    def __bool__(self) -> bool:
        return bool(self.envelopes)

    def __len__(self) -> int:
        return len(self.envelopes)


class Dispatcher:
    def __init__(self, socketio: SocketIO) -> None:
        self.socketio = socketio

    def deliver(self, outbox: Outbox) -> None:
        # Room-wide envelopes address the Socket.IO room, player ones the sid.
        for env in outbox.envelopes:
            if env.payload is None:
                self.socketio.emit(env.event, to=env.to)
            else:
                self.socketio.emit(env.event, env.payload, to=env.to)
