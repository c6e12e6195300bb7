from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from threading import RLock

from ..realtime import events
from ..realtime.dispatch import Outbox
from . import voting
from .boards import BoardCatalog, rotate_boards
from .models import Player, Room, RoundResults
from .words import WordPool

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class RoomRegistry:
    """Owns every room of one server process.

    Room operations expect the caller to hold the room's lock, which
    ``session`` takes care of; each returns the Outbox to deliver before the
    lock is released.
    """

    def __init__(
        self,
        word_pool: WordPool,
        boards: BoardCatalog,
        debug: bool = False,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.word_pool = word_pool
        self.boards = boards
        self.debug = debug
        self._clock = clock
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._connections: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def get(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get(code)

    def get_or_create(self, code: str) -> Room:
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                room = Room(code=code, created_at_ms=self._clock())
                self._rooms[code] = room
                logger.info("[room-create] room=%s", code)
            return room

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def room_of(self, player_id: str) -> str | None:
        with self._lock:
            return self._connections.get(player_id)

    def _discard(self, room: Room) -> None:
        with self._lock:
            if self._rooms.get(room.code) is room:
                del self._rooms[room.code]
                logger.info("[room-delete] room=%s", room.code)

    @contextmanager
    def session(self, code: str, create: bool = False) -> Iterator[Room | None]:
        """Holds the lock of room ``code`` for one event.

        Yields None when the room does not exist and ``create`` is false. A room
        deleted while we waited for its lock is looked up again, so the body
        never runs against a room that is no longer registered.
        """
        while True:
            room = self.get_or_create(code) if create else self.get(code)
            if room is None:
                yield None
                return

            with room.lock:
                if self.get(code) is not room:
                    continue
                try:
                    yield room
                finally:
                    if not room.joined_players():
                        self._discard(room)
                return

    # ------------------------------------------------------------------
    # Payloads
    # ------------------------------------------------------------------

    @staticmethod
    def player_list(room: Room) -> list[dict]:
        return [
            {"id": p.id, "name": p.name, "joined": p.joined, "submitted": p.submitted}
            for p in room.joined_players()
        ]

    def _emit_roster(self, room: Room, out: Outbox, with_count: bool = True) -> None:
        if with_count:
            out.room(room.code, events.PLAYER_COUNT, len(room.joined_players()))
        out.room(room.code, events.PLAYER_LIST, self.player_list(room))

    def _results_payload(self, results: RoundResults) -> dict:
        drawings = []
        for d in results.drawings:
            item = {
                "playerId": d["playerId"],
                "playerName": d["playerName"],
                "drawing": d["drawing"],
                "rotation": d["rotation"],
            }
            if self.debug:
                item["originalWord"] = d["word"]
            drawings.append(item)

        payload = {"drawings": drawings, "allWords": list(results.all_words)}
        if self.debug:
            payload["additionalWords"] = list(results.filler_words)
        return payload

    @staticmethod
    def _turn_payload(phase, slot) -> dict:
        return {
            "currentPlayerId": slot.player_id,
            "currentPlayerName": slot.name,
            "playerIndex": phase.current_turn_index + 1,
            "totalPlayers": len(phase.turn_order),
        }

    @staticmethod
    def _complete_payload(tally: voting.Tally) -> dict:
        return {
            "score": tally.score,
            "correctWords": tally.correct_words,
            "totalPlayers": tally.total_players,
            "remainingWords": tally.remaining_words,
            "remainingPlayerWords": tally.remaining_player_words,
            "remainingAdditionalWords": tally.remaining_filler_words,
            "votedWords": tally.voted_words,
            "votedPlayerWords": tally.voted_player_words,
            "votedAdditionalWords": tally.voted_filler_words,
            "playerVotes": tally.player_votes,
        }

    def public_state(self, room: Room) -> dict:
        phase = room.voting
        if phase is None:
            state = "noVote"
        elif phase.complete:
            state = "complete"
        else:
            state = "voting"

        slot = voting.current_slot(phase) if phase else None
        return {
            "code": room.code,
            "createdAtMs": room.created_at_ms,
            "playerCount": len(room.joined_players()),
            "players": self.player_list(room),
            "allSubmitted": room.all_submitted,
            "votingState": state,
            "currentPlayerId": slot.player_id if slot else None,
            "allWords": list(room.results.all_words) if room.results else [],
            "votedWords": voting.voted_words(phase) if phase else [],
        }

    def stats(self) -> dict:
        rooms = self.list_rooms()
        sockets = joined = 0
        for room in rooms:
            with room.lock:
                sockets += len(room.players)
                joined += len(room.joined_players())
        return {"rooms": len(rooms), "totalSockets": sockets, "joinedPlayers": joined}

    # ------------------------------------------------------------------
    # Room operations
    # ------------------------------------------------------------------

    def join(self, room: Room, player_id: str, name: str) -> Outbox:
        out = Outbox()
        player = room.joined_player(player_id)

        if player is not None:
            player.name = name
            logger.info("[rename] room=%s player=%s name=%s", room.code, player_id, name)
        else:
            taken = [p.word for p in room.joined_players() if p.word]
            word = self.word_pool.draw(1, exclude=taken)[0]
            player = Player(id=player_id, name=name, joined=True, word=word, board=self.boards.pick())
            room.players[player_id] = player
            with self._lock:
                self._connections[player_id] = room.code
            # A newcomer has not submitted yet.
            room.all_submitted = False
            logger.info(
                "[join] room=%s player=%s name=%s word=%s board=%s",
                room.code, player_id, name, player.word, player.board,
            )

        out.player(player_id, events.WORD_ASSIGNED, {
            "word": player.word,
            "board": self.boards.url_for(player.board),
        })
        self._emit_roster(room, out)
        return out

    def submit_drawing(self, room: Room, player_id: str, drawing: str, rotation: float = 0) -> Outbox:
        out = Outbox()
        player = room.joined_player(player_id)
        if player is None or room.voting is not None:
            logger.debug("[submit-drop] room=%s player=%s", room.code, player_id)
            return out

        player.submitted = True
        player.drawing = drawing
        player.rotation = rotation
        logger.info("[submit] room=%s player=%s rotation=%s", room.code, player.name, rotation)

        self._refresh_submissions(room, out)
        self._emit_roster(room, out, with_count=False)
        out.room(room.code, events.ALL_SUBMITTED, room.all_submitted)
        return out

    def unsubmit_drawing(self, room: Room, player_id: str) -> Outbox:
        out = Outbox()
        player = room.joined_player(player_id)
        if player is None or room.voting is not None:
            logger.debug("[unsubmit-drop] room=%s player=%s", room.code, player_id)
            return out

        player.submitted = False
        player.drawing = None
        self._refresh_submissions(room, out)

        self._emit_roster(room, out, with_count=False)
        out.room(room.code, events.ALL_SUBMITTED, room.all_submitted)
        return out

    def vote_word(self, room: Room, player_id: str, word: str) -> Outbox:
        out = Outbox()
        player = room.joined_player(player_id)
        phase = room.voting
        results = room.results
        if player is None or results is None or not voting.can_vote(phase, player_id, word, results.all_words):
            logger.debug("[vote-drop] room=%s player=%s word=%s", room.code, player_id, word)
            return out

        voting.cast_vote(phase, player_id, word)
        logger.info("[vote] room=%s player=%s eliminated=%s", room.code, player.name, word)

        out.room(room.code, events.WORD_VOTED_OUT, {
            "word": word,
            "playerName": player.name,
            "votedWords": voting.voted_words(phase),
        })
        self._settle_turn(room, out)
        return out

    def new_round(self, room: Room, player_id: str) -> Outbox:
        out = Outbox()
        player = room.joined_player(player_id)
        if player is None:
            logger.debug("[new-round-drop] room=%s player=%s", room.code, player_id)
            return out

        joined = room.joined_players()
        words = self.word_pool.draw(len(joined))

        room.all_submitted = False
        room.results = None
        room.voting = None

        rotate_boards(joined)
        for p, word in zip(joined, words):
            p.submitted = False
            p.drawing = None
            p.rotation = 0
            p.word = word

        logger.info(
            "[new-round] room=%s by=%s words=[%s] boards=[%s]",
            room.code, player.name, ", ".join(words), ", ".join(str(p.board) for p in joined),
        )

        out.room(room.code, events.NEW_ROUND_STARTED, {"roomCode": room.code})
        for p in joined:
            out.player(p.id, events.NEW_WORD, {"word": p.word})
            out.player(p.id, events.NEW_BOARD, {"board": self.boards.url_for(p.board)})

        self._emit_roster(room, out, with_count=False)
        out.room(room.code, events.ALL_SUBMITTED, False)
        return out

    def remove_player(self, room: Room, player_id: str) -> Outbox:
        out = Outbox()
        player = room.players.pop(player_id, None)
        with self._lock:
            if self._connections.get(player_id) == room.code:
                del self._connections[player_id]

        if player is None:
            return out

        logger.info("[leave] room=%s player=%s", room.code, player.name)

        if not room.joined_players():
            self._discard(room)
            return out

        self._refresh_submissions(room, out)

        phase = room.voting
        if phase is not None and not phase.complete:
            before = phase.current_turn_index
            voting.advance(phase, {p.id for p in room.joined_players()})
            if phase.complete or phase.current_turn_index != before:
                self._announce_turn(room, out)

        self._emit_roster(room, out)
        out.room(room.code, events.ALL_SUBMITTED, room.all_submitted)
        return out

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _refresh_submissions(self, room: Room, out: Outbox) -> None:
        joined = room.joined_players()
        was = room.all_submitted
        room.all_submitted = bool(joined) and all(p.submitted for p in joined)

        if room.all_submitted and not was and room.voting is None:
            self._open_results(room, joined, out)

    def _open_results(self, room: Room, joined: list[Player], out: Outbox) -> None:
        player_words = [p.word for p in joined if p.word]
        fillers = self.word_pool.draw(len(joined), exclude=player_words)

        room.results = RoundResults(
            drawings=[
                {
                    "playerId": p.id,
                    "playerName": p.name,
                    "drawing": p.drawing,
                    "rotation": p.rotation or 0,
                    "word": p.word,
                }
                for p in joined
                if p.drawing is not None
            ],
            all_words=sorted(player_words + fillers),
            filler_words=fillers,
        )
        room.voting = voting.open_voting(joined)
        logger.info(
            "[results] room=%s player_words=[%s] fillers=[%s]",
            room.code, ", ".join(player_words), ", ".join(fillers),
        )

        out.room(room.code, events.GAME_RESULTS, self._results_payload(room.results))

        first = room.voting.turn_order[0]
        out.room(room.code, events.VOTING_STARTED, {
            "currentPlayerId": first.player_id,
            "currentPlayerName": first.name,
            "totalPlayers": len(room.voting.turn_order),
            "allWords": list(room.results.all_words),
        })

    def _settle_turn(self, room: Room, out: Outbox) -> None:
        voting.advance(room.voting, {p.id for p in room.joined_players()})
        self._announce_turn(room, out)

    def _announce_turn(self, room: Room, out: Outbox) -> None:
        phase = room.voting
        if phase.complete:
            result = voting.tally(phase, room.results.all_words)
            logger.info(
                "[voting-complete] room=%s score=%s", room.code, result.score,
            )
            out.room(room.code, events.VOTING_COMPLETE, self._complete_payload(result))
            return

        slot = voting.current_slot(phase)
        out.room(room.code, events.NEXT_PLAYER_TURN, self._turn_payload(phase, slot))
