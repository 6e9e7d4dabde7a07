"""Exception types raised by the board and its notation layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boardkeeper.core.enums import MoveStatus, PieceType
    from boardkeeper.core.types import Square


class FormatError(ValueError):
    """Malformed FEN or PGN input.

    Args:
        message: Human readable description.
        field: FEN field that failed to decode, if any.
        ply: 1-based transcript move index that failed, if any.
    """

    def __init__(
        self, message: str, field: str | None = None, ply: int | None = None
    ) -> None:
        super().__init__(message)
        self.field = field
        self.ply = ply


class ReplayError(FormatError):
    """A transcript move could not be resolved or was rejected by the board."""

    def __init__(
        self,
        message: str,
        ply: int,
        piece_type: PieceType,
        from_sq: Square | None = None,
        to_sq: Square | None = None,
        status: MoveStatus | None = None,
    ) -> None:
        super().__init__(message, ply=ply)
        self.piece_type = piece_type
        self.from_sq = from_sq
        self.to_sq = to_sq
        self.status = status


class BoardInvariantError(RuntimeError):
    """Board state contradicts an internal assumption (e.g. an expected piece is missing).

    Raised when a caller bypasses validation with an impossible move or the
    board has been corrupted; it is never a user-facing condition.
    """
