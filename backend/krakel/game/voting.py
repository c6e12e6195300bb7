from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

from .models import Player, TurnSlot, VotingPhase


@dataclass
class Tally:
    score: str
    correct_words: int
    total_players: int
    remaining_words: list[str] = field(default_factory=list)
    remaining_player_words: list[str] = field(default_factory=list)
    remaining_filler_words: list[str] = field(default_factory=list)
    voted_words: list[str] = field(default_factory=list)
    voted_player_words: list[str] = field(default_factory=list)
    voted_filler_words: list[str] = field(default_factory=list)
    player_votes: dict[str, str] = field(default_factory=dict)


def open_voting(players: Iterable[Player]) -> VotingPhase:
    order = tuple(TurnSlot(player_id=p.id, name=p.name, word=p.word) for p in players)
    return VotingPhase(turn_order=order)


def current_slot(phase: VotingPhase) -> TurnSlot | None:
    if phase.complete or phase.current_turn_index >= len(phase.turn_order):
        return None
    return phase.turn_order[phase.current_turn_index]


def advance(phase: VotingPhase, present_ids: Collection[str]) -> TurnSlot | None:
    """Moves past slots whose player has left; completes the phase at the end.

    Returns the slot now holding the turn, or None once voting is complete.
    """
    while phase.current_turn_index < len(phase.turn_order):
        slot = phase.turn_order[phase.current_turn_index]
        if slot.player_id in present_ids:
            return slot
        phase.current_turn_index += 1

    phase.complete = True
    return None


def voted_words(phase: VotingPhase) -> list[str]:
    # A word voted out twice is listed once, at its first elimination.
    return list(dict.fromkeys(phase.votes_by_player.values()))


def can_vote(phase: VotingPhase | None, player_id: str, word: str, all_words: Collection[str]) -> bool:
    if phase is None or phase.complete:
        return False
    slot = current_slot(phase)
    if slot is None or slot.player_id != player_id:
        return False
    if word not in all_words:
        return False
    return True


def cast_vote(phase: VotingPhase, player_id: str, word: str) -> None:
    """Records the elimination and moves the turn index forward by one.

    Callers check can_vote first and then call advance to settle the next turn.
    """
    phase.votes_by_player[player_id] = word
    phase.eliminated_words.add(word)
    phase.current_turn_index += 1


def tally(phase: VotingPhase, all_words: Iterable[str]) -> Tally:
    player_words = {slot.word for slot in phase.turn_order if slot.word}
    correct = len(player_words - phase.eliminated_words)
    total = len(phase.turn_order)

    remaining = [w for w in all_words if w not in phase.eliminated_words]
    voted = voted_words(phase)

    return Tally(
        score=f"{correct}/{total}",
        correct_words=correct,
        total_players=total,
        remaining_words=remaining,
        remaining_player_words=[w for w in remaining if w in player_words],
        remaining_filler_words=[w for w in remaining if w not in player_words],
        voted_words=voted,
        voted_player_words=[w for w in voted if w in player_words],
        voted_filler_words=[w for w in voted if w not in player_words],
        player_votes=dict(phase.votes_by_player),
    )
