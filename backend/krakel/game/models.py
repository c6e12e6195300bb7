from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock


@dataclass
class Player:
    id: str
    name: str
    joined: bool = False
    submitted: bool = False
    word: str | None = None
    board: str | None = None
    drawing: str | None = None
    rotation: float = 0


@dataclass
class RoundResults:
    drawings: list[dict] = field(default_factory=list)
    all_words: list[str] = field(default_factory=list)
    filler_words: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TurnSlot:
    player_id: str
    name: str
    word: str | None


@dataclass
class VotingPhase:
    turn_order: tuple[TurnSlot, ...]
    current_turn_index: int = 0
    eliminated_words: set[str] = field(default_factory=set)
    # Insertion order doubles as elimination order.
    votes_by_player: dict[str, str] = field(default_factory=dict)
    complete: bool = False


@dataclass
class Room:
    code: str
    created_at_ms: int
    players: dict[str, Player] = field(default_factory=dict)
    all_submitted: bool = False
    results: RoundResults | None = None
    voting: VotingPhase | None = None
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def joined_players(self) -> list[Player]:
        return [p for p in self.players.values() if p.joined]

    def joined_player(self, player_id: str) -> Player | None:
        player = self.players.get(player_id)
        if player is None or not player.joined:
            return None
        return player
