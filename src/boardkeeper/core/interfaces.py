"""Abstract collaborator interfaces for the board.

Follows Dependency Inversion: :class:`~boardkeeper.core.board.Board` depends on
this ABC, not on the concrete :class:`~boardkeeper.core.validator.MoveValidator`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boardkeeper.core.board import Board
    from boardkeeper.core.enums import MoveStatus
    from boardkeeper.core.notation.models import NotatedMove
    from boardkeeper.core.piece import Piece
    from boardkeeper.core.types import Square


class IMoveValidator(ABC):
    """Legality oracle consulted by the board on every transition.

    Implementations must treat *board* as read-only and keep no reference to
    it after returning.
    """

    @abstractmethod
    def validate_shape(self, board: Board, from_sq: Square, to_sq: Square) -> MoveStatus:
        """Piece geometry, path, own-capture and castling preconditions."""

    @abstractmethod
    def would_be_check(self, board: Board, from_sq: Square, to_sq: Square) -> bool:
        """Whether the move leaves the mover's own king attacked."""

    @abstractmethod
    def is_check(self, board: Board) -> bool:
        """Whether the side to move is in check."""

    @abstractmethod
    def is_checkmate(self, board: Board) -> bool:
        """Whether the side to move is checkmated."""

    @abstractmethod
    def resolve_origin(
        self, board: Board, notated: NotatedMove, to_sq: Square
    ) -> Square | None:
        """The unique origin square for a notated move, or ``None``."""

    @abstractmethod
    def is_ambiguous(
        self, board: Board, to_sq: Square, candidates: Iterable[Piece]
    ) -> bool:
        """Whether any of *candidates* could also legally reach *to_sq*."""
