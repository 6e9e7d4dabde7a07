"""Replay notated moves onto a board."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from boardkeeper.core.enums import MoveStatus
from boardkeeper.core.errors import FormatError, ReplayError
from boardkeeper.core.types import Square

if TYPE_CHECKING:
    from boardkeeper.core.board import Board
    from boardkeeper.core.notation.models import NotatedMove

_LOGGER = logging.getLogger(__name__)

_KING_HOME_FILE = 4


def _castle_squares(board: Board, move: NotatedMove) -> tuple[Square, Square]:
    home = board.side_to_move.home_rank
    to_file = 6 if move.castle_kingside else 2
    return Square(_KING_HOME_FILE, home), Square(to_file, home)


def replay_moves(board: Board, moves: Iterable[NotatedMove]) -> None:
    """Apply *moves* in order with full validation.

    Stops at the first move that cannot be resolved or is rejected; moves
    before it stay applied.

    Raises:
        FormatError: a move has no readable destination.
        ReplayError: a move has no unique origin or the board rejected it.
    """
    for move in moves:
        if move.is_castle:
            from_sq, to_sq = _castle_squares(board, move)
        else:
            if move.to_sq is None:
                _LOGGER.warning("Unreadable move %d: %r", move.ply, move.san)
                raise FormatError(
                    f"PGN move {move.ply} ({move.san!r}): destination square not found",
                    ply=move.ply,
                )
            to_sq = move.to_sq
            origin = board.validator.resolve_origin(board, move, to_sq)
            if origin is None:
                _LOGGER.warning("No origin for move %d: %r", move.ply, move.san)
                raise ReplayError(
                    f"PGN move {move.ply} ({move.san!r}): no unique "
                    f"{move.piece_type.name.lower()} can reach {to_sq}",
                    ply=move.ply,
                    piece_type=move.piece_type,
                    to_sq=to_sq,
                )
            from_sq = origin

        status = board.apply_move(from_sq, to_sq, move.promotion)
        if status != MoveStatus.OK:
            _LOGGER.warning(
                "Move %d %r rejected: %s", move.ply, move.san, status.name
            )
            raise ReplayError(
                f"PGN move {move.ply} failed: {move.piece_type.name.lower()} "
                f"from {from_sq} to {to_sq} ({status.name})",
                ply=move.ply,
                piece_type=move.piece_type,
                from_sq=from_sq,
                to_sq=to_sq,
                status=status,
            )
