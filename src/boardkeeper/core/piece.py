"""Piece owned by a single board slot."""

from __future__ import annotations

from boardkeeper.core.enums import PROMOTION_TYPES, Color, PieceType
from boardkeeper.core.mapping import fen_char, parse_fen_char
from boardkeeper.core.types import Square


class Piece:
    """A chess piece and the square it currently stands on.

    Color never changes.  Kind changes only through :meth:`promote` /
    :meth:`unpromote`, and the square only through :meth:`move_to`; the
    :class:`~boardkeeper.core.board.Board` owning the piece is the only caller
    of those three.
    """

    __slots__ = ("_piece_type", "_color", "_square")

    def __init__(self, piece_type: PieceType, color: Color, square: Square) -> None:
        if piece_type == PieceType.NONE:
            raise ValueError("A piece needs a concrete piece type")
        self._piece_type = piece_type
        self._color = color
        self._square = square

    @property
    def piece_type(self) -> PieceType:
        return self._piece_type

    @property
    def color(self) -> Color:
        return self._color

    @property
    def square(self) -> Square:
        return self._square

    # ── Board-owned mutation ─────────────────────────────────────────────

    def move_to(self, square: Square) -> None:
        self._square = square

    def promote(self, piece_type: PieceType) -> None:
        if self._piece_type != PieceType.PAWN:
            raise ValueError(f"Only pawns promote, not {self._piece_type.name}")
        if piece_type not in PROMOTION_TYPES:
            raise ValueError(f"Invalid promotion piece: {piece_type.name}")
        self._piece_type = piece_type

    def unpromote(self) -> None:
        self._piece_type = PieceType.PAWN

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        return fen_char(self._color, self._piece_type)

    @classmethod
    def from_char(cls, char: str, square: Square) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, piece_type = parse_fen_char(char)
        except ValueError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(piece_type, color, square)

    def copy(self) -> Piece:
        return Piece(self._piece_type, self._color, self._square)

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (
            self._piece_type == other._piece_type
            and self._color == other._color
            and self._square == other._square
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Piece({self._color}, {self._piece_type.name.lower()}, {self._square})"
