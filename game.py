"""
Game session: the host loop that drives the board and the opponent.

The session owns the single active board and whose turn it is. Every
applied move produces a new immutable GameSnapshot which is pushed to
subscribers. When a game ends, completion listeners receive the final
GameStatus exactly once.

The opponent's reply can be deferred through a scheduler (e.g. to give
the UI a short "thinking" pause). Without one, the caller drives
respond() itself.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from board import (
    Board,
    GameStatus,
    InvalidMove,
    Turn,
    apply_move,
    board_from_json,
    board_to_json,
    evaluate,
    new_board,
    winning_line,
)
from opponent import choose_move

log = logging.getLogger(__name__)

OPPONENT_DELAY = 0.5  # seconds


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the session after a change."""
    board: Board
    turn: Turn
    status: GameStatus
    line: Optional[Tuple[int, int, int]] = None
    last_move: Optional[int] = None

    @classmethod
    def of(cls, board: Board, turn: Turn, last_move: Optional[int] = None) -> "GameSnapshot":
        return cls(board, turn, evaluate(board), winning_line(board), last_move)

    def to_json(self) -> dict:
        return {
            "board": board_to_json(self.board),
            "turn": self.turn.value,
            "status": self.status.value,
            "line": list(self.line) if self.line else None,
            "lastMove": self.last_move,
        }


class ImmediateScheduler:
    """Runs callbacks straight away, ignoring the delay."""

    class _Handle:
        def cancel(self):
            pass

    def schedule(self, delay: float, callback: Callable[[], None]):
        callback()
        return self._Handle()


class GameSession:
    def __init__(
        self,
        board: Optional[Board] = None,
        turn: Turn = Turn.PLAYER,
        rng=None,
        scheduler=None,
        opponent_delay: float = OPPONENT_DELAY,
    ):
        self._rng = rng
        self._scheduler = scheduler
        self._opponent_delay = opponent_delay
        self._pending = None
        self._listeners: List[Callable[[GameSnapshot], None]] = []
        self._completion_listeners: List[Callable[[GameStatus], None]] = []
        self._snapshot = GameSnapshot.of(board or new_board(), turn)

    @property
    def snapshot(self) -> GameSnapshot:
        return self._snapshot

    @property
    def status(self) -> GameStatus:
        return self._snapshot.status

    @property
    def turn(self) -> Turn:
        return self._snapshot.turn

    @property
    def pending(self) -> bool:
        """True while a scheduled opponent move has not run yet."""
        return self._pending is not None

    def subscribe(self, listener: Callable[[GameSnapshot], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_complete(self, listener: Callable[[GameStatus], None]):
        self._completion_listeners.append(listener)

    # --- Moves ---
    def play(self, index: int) -> GameSnapshot:
        """Apply the player's mark at index."""
        if self.status.is_terminal:
            raise InvalidMove("Game is already over")
        if self.turn is not Turn.PLAYER:
            raise InvalidMove("Not your turn")
        snapshot = self._advance(index)
        if not snapshot.status.is_terminal and self._scheduler is not None:
            handle = self._scheduler.schedule(self._opponent_delay, self._run_pending)
            # A scheduler may run the reply before returning.
            if self._snapshot is snapshot:
                self._pending = handle
        return self._snapshot

    def respond(self) -> GameSnapshot:
        """Compute and apply the opponent's move."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if not self.status.is_terminal and self.turn is not Turn.OPPONENT:
            raise InvalidMove("Not the opponent's turn")
        index = choose_move(self._snapshot.board, self._rng)
        return self._advance(index)

    def reset(self) -> GameSnapshot:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._publish(GameSnapshot.of(new_board(), Turn.PLAYER))
        return self._snapshot

    def _run_pending(self):
        self._pending = None
        self.respond()

    def _advance(self, index: int) -> GameSnapshot:
        turn = self.turn
        board = apply_move(self._snapshot.board, index, turn.mark)
        status = evaluate(board)
        # The turn stays put once the game is over.
        next_turn = turn if status.is_terminal else turn.other
        snapshot = GameSnapshot.of(board, next_turn, last_move=index)
        log.debug("%s took cell %d -> %s", turn.value, index, status.value)
        self._publish(snapshot)
        if status.is_terminal:
            log.info("Game over: %s", status.value)
            for listener in list(self._completion_listeners):
                listener(status)
        return snapshot

    def _publish(self, snapshot: GameSnapshot):
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    # --- Persistence ---
    def to_dict(self) -> dict:
        return {
            "board": board_to_json(self._snapshot.board),
            "turn": self.turn.value,
        }

    @classmethod
    def restore(cls, data: Optional[dict], **kwargs) -> "GameSession":
        """
        Rebuild a session from to_dict() output.

        Missing or malformed data starts a fresh game.
        """
        if not data:
            return cls(**kwargs)
        try:
            board = board_from_json(data["board"])
            turn = Turn(data["turn"])
        except (KeyError, TypeError, ValueError) as e:
            log.warning("Discarding unreadable saved game: %s", e)
            return cls(**kwargs)
        return cls(board=board, turn=turn, **kwargs)
