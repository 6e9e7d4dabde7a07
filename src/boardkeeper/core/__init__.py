"""Core domain layer: a pure chess state machine with zero external dependencies.

Quick start::

    from boardkeeper.core import Board, MoveStatus
    from boardkeeper.core.types import E2, E4

    board = Board()
    assert board.apply_move(E2, E4) == MoveStatus.OK
    print(board.render_transcript())  # "1. e4 *"
    board.revert_last_move()
"""

from boardkeeper.core.board import Board
from boardkeeper.core.enums import (
    CastlingRights,
    Color,
    GameResult,
    MoveStatus,
    PieceType,
)
from boardkeeper.core.errors import BoardInvariantError, FormatError, ReplayError
from boardkeeper.core.history import MoveHistory, MoveRecord
from boardkeeper.core.interfaces import IMoveValidator
from boardkeeper.core.notation import (
    STARTING_FEN,
    NotatedMove,
    board_from_fen,
    board_to_fen,
    parse_transcript,
)
from boardkeeper.core.piece import Piece
from boardkeeper.core.replay import replay_moves
from boardkeeper.core.types import Square
from boardkeeper.core.validator import MoveValidator

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveStatus",
    "PieceType",
    # Errors
    "BoardInvariantError",
    "FormatError",
    "ReplayError",
    # Domain objects
    "Board",
    "IMoveValidator",
    "MoveHistory",
    "MoveRecord",
    "MoveValidator",
    "Piece",
    "Square",
    # Notation / replay
    "STARTING_FEN",
    "NotatedMove",
    "board_from_fen",
    "board_to_fen",
    "parse_transcript",
    "replay_moves",
]
