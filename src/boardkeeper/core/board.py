"""Board: complete game state (64 slots + metadata) with apply / revert."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from boardkeeper.core.enums import (
    PROMOTION_TYPES,
    CastlingRights,
    Color,
    GameResult,
    MoveStatus,
    PieceType,
)
from boardkeeper.core.errors import BoardInvariantError
from boardkeeper.core.history import MoveHistory, MoveRecord
from boardkeeper.core.mapping import letter_from_file
from boardkeeper.core.piece import Piece
from boardkeeper.core.types import Square
from boardkeeper.core.validator import DEFAULT_VALIDATOR, castling_rook_squares

if TYPE_CHECKING:
    from boardkeeper.core.interfaces import IMoveValidator

_LOGGER = logging.getLogger(__name__)

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _initial_pieces() -> list[Piece]:
    pieces: list[Piece] = []
    for color in Color:
        home = color.home_rank
        for file, piece_type in enumerate(_BACK_RANK):
            pieces.append(Piece(piece_type, color, Square(file, home)))
            pieces.append(Piece(PieceType.PAWN, color, Square(file, home + color.forward)))
    return pieces


class Board:
    """Full chess position: 64 slots, side to move, castling, en passant, clocks.

    All state changes go through :meth:`apply_move` and
    :meth:`revert_last_move`; every applied move pushes one
    :class:`~boardkeeper.core.history.MoveRecord` which is all the revert
    needs (Command pattern).

    A board is not thread-safe; use one instance per game.

    Args:
        pieces: Pieces to place. ``None`` sets up the standard start position.
        side_to_move: Color to move first.
        castling: Castling rights still available.
        en_passant: Square a pawn may capture onto en passant, if any.
        pawn_halfmove_clock: Plies since the last pawn move or capture.
        fullmove_number: Full-move counter, starting at 1.
        validator: Rule checker; defaults to :class:`MoveValidator`.
    """

    __slots__ = (
        "_validator",
        "_squares",
        "_history",
        "_side_to_move",
        "_castling",
        "_en_passant",
        "_pawn_halfmove_clock",
        "_halfmove",
        "_fullmove_number",
        "_is_check",
        "_is_checkmate",
        "result",
    )

    def __init__(
        self,
        pieces: Iterable[Piece] | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        pawn_halfmove_clock: int = 0,
        fullmove_number: int = 1,
        validator: IMoveValidator | None = None,
    ) -> None:
        self._validator = validator if validator is not None else DEFAULT_VALIDATOR
        self._squares: list[Piece | None] = [None] * 64
        self._history = MoveHistory()
        self._side_to_move = side_to_move
        self._castling = castling
        self._en_passant = en_passant
        self._pawn_halfmove_clock = pawn_halfmove_clock
        self._halfmove = 0
        self._fullmove_number = fullmove_number
        self.result = GameResult.IN_PROGRESS

        for piece in _initial_pieces() if pieces is None else pieces:
            if piece.square.is_out_of_bounds:
                raise ValueError(f"Piece placed off the board: {piece!r}")
            if self._squares[piece.square.index] is not None:
                raise ValueError(f"Two pieces placed on {piece.square}")
            self._squares[piece.square.index] = piece

        self._is_check = self._validator.is_check(self)
        self._is_checkmate = self._validator.is_checkmate(self)

    # ── Alternative constructors ─────────────────────────────────────────

    @classmethod
    def from_fen(cls, fen: str, validator: IMoveValidator | None = None) -> Board:
        """Build a board from a FEN string (raises :class:`FormatError`)."""
        from boardkeeper.core.notation.fen import board_from_fen

        return board_from_fen(fen, validator)

    @classmethod
    def from_pgn(cls, pgn: str, validator: IMoveValidator | None = None) -> Board:
        """Replay a PGN transcript from the start position.

        Raises :class:`FormatError` / :class:`ReplayError` naming the failing move.
        """
        from boardkeeper.core.notation.pgn import parse_transcript
        from boardkeeper.core.replay import replay_moves

        transcript = parse_transcript(pgn)
        board = cls(validator=validator)
        board.result = transcript.result
        replay_moves(board, transcript.moves)
        return board

    # ── Read-only state ──────────────────────────────────────────────────

    @property
    def validator(self) -> IMoveValidator:
        return self._validator

    @property
    def history(self) -> MoveHistory:
        return self._history

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def castling(self) -> CastlingRights:
        return self._castling

    @property
    def en_passant(self) -> Square | None:
        return self._en_passant

    @property
    def pawn_halfmove_clock(self) -> int:
        """Plies since the last pawn move or capture (fifty-move rule)."""
        return self._pawn_halfmove_clock

    @property
    def halfmove(self) -> int:
        """Plies applied on this board since setup."""
        return self._halfmove

    @property
    def fullmove_number(self) -> int:
        return self._fullmove_number

    @property
    def is_check(self) -> bool:
        return self._is_check

    @property
    def is_checkmate(self) -> bool:
        return self._is_checkmate

    def can_castle(self, color: Color, kingside: bool) -> bool:
        return bool(self._castling & CastlingRights.for_side(color, kingside))

    # ── Query helpers ────────────────────────────────────────────────────

    def piece_at(self, square: Square) -> Piece | None:
        if square.is_out_of_bounds:
            return None
        return self._squares[square.index]

    def slots(self) -> tuple[Piece | None, ...]:
        """Snapshot of the 64 slots indexed by ``Square.index``."""
        return tuple(self._squares)

    def pieces(self, color: Color, piece_type: PieceType) -> list[Piece]:
        return [
            p
            for p in self._squares
            if p is not None and p.color == color and p.piece_type == piece_type
        ]

    def all_pieces(self, color: Color) -> list[Piece]:
        return [p for p in self._squares if p is not None and p.color == color]

    def king_square(self, color: Color) -> Square | None:
        kings = self.pieces(color, PieceType.KING)
        return kings[0].square if kings else None

    # ── Core move operations ─────────────────────────────────────────────

    def apply_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType = PieceType.NONE,
        skip_validation: bool = False,
    ) -> MoveStatus:
        """Play *from_sq*→*to_sq*, pushing a history record.

        ``skip_validation`` trusts the caller (e.g. engine output) and skips
        the validator's legality checks.  The board is only mutated when
        :attr:`MoveStatus.OK` is returned.
        """
        if not skip_validation:
            status = self._validator.validate_shape(self, from_sq, to_sq)
            if status != MoveStatus.OK:
                _LOGGER.debug("Rejected %s-%s: %s", from_sq, to_sq, status.name)
                return status
            if self._validator.would_be_check(self, from_sq, to_sq):
                _LOGGER.debug("Rejected %s-%s: leaves king in check", from_sq, to_sq)
                return MoveStatus.WOULD_BE_CHECK

        piece = self._require_piece(from_sq)
        if to_sq.is_out_of_bounds:
            raise BoardInvariantError(f"Destination off the board: {to_sq!r}")
        color = piece.color
        moved_type = piece.piece_type

        promotes = moved_type == PieceType.PAWN and to_sq.rank == color.opposite.home_rank
        if promotes:
            if promotion == PieceType.NONE:
                _LOGGER.debug("Rejected %s-%s: promotion piece missing", from_sq, to_sq)
                return MoveStatus.PROMOTION_REQUIRED
            if promotion not in PROMOTION_TYPES:
                return MoveStatus.INVALID_PROMOTION
        else:
            promotion = PieceType.NONE

        captured = self._squares[to_sq.index]
        disambiguation = self._disambiguation(piece, to_sq)

        could_castle_kingside = self.can_castle(color, True)
        could_castle_queenside = self.can_castle(color, False)
        self._revoke_castling(piece)

        clock_before = self._pawn_halfmove_clock
        if moved_type == PieceType.PAWN or captured is not None:
            self._pawn_halfmove_clock = 0
        else:
            self._pawn_halfmove_clock += 1

        en_passant_before = self._en_passant
        en_passant_pawn_move, en_passant_capture = self._update_en_passant(
            piece, to_sq, captured
        )

        if promotes:
            piece.promote(promotion)

        self._squares[from_sq.index] = None
        self._place(piece, to_sq)

        if moved_type == PieceType.KING and abs(to_sq.file - from_sq.file) > 1:
            rook_from, rook_to = castling_rook_squares(color, to_sq.file > from_sq.file)
            rook = self._require_piece(rook_from)
            self._squares[rook_from.index] = None
            self._place(rook, rook_to)

        fullmove_before = self._fullmove_number
        if self._side_to_move == Color.BLACK:
            self._fullmove_number += 1
        self._side_to_move = self._side_to_move.opposite
        self._halfmove += 1
        self._is_check = self._validator.is_check(self)
        self._is_checkmate = self._validator.is_checkmate(self)

        if en_passant_capture:
            captured_type = PieceType.PAWN
        else:
            captured_type = captured.piece_type if captured is not None else PieceType.NONE

        record = MoveRecord(
            ply=self._halfmove,
            fullmove_number=fullmove_before,
            color=color,
            piece_type=moved_type,
            from_sq=from_sq,
            to_sq=to_sq,
            captured=captured_type,
            promotion=promotion,
            en_passant_capture=en_passant_capture,
            en_passant_pawn_move=en_passant_pawn_move,
            is_check=self._is_check,
            is_checkmate=self._is_checkmate,
            disambiguation=disambiguation,
            could_castle_kingside=could_castle_kingside,
            could_castle_queenside=could_castle_queenside,
            pawn_halfmove_clock=clock_before,
            en_passant_before=en_passant_before,
        )
        self._history.push(record)
        _LOGGER.debug(
            "Applied %s %s-%s (ply %d)", color, from_sq, to_sq, self._halfmove
        )
        return MoveStatus.OK

    def revert_last_move(self) -> None:
        """Undo the last :meth:`apply_move`; does nothing on an empty history."""
        record = self._history.last
        if record is None:
            return

        piece = self._require_piece(record.to_sq)
        color = piece.color

        self._squares[record.to_sq.index] = None
        if record.promotion != PieceType.NONE:
            piece.unpromote()
        self._place(piece, record.from_sq)

        if record.is_castle:
            rook_home, rook_castled = castling_rook_squares(
                color, record.to_sq.file > record.from_sq.file
            )
            rook = self._require_piece(rook_castled)
            self._squares[rook_castled.index] = None
            self._place(rook, rook_home)

        self._restore_castling(
            color, record.could_castle_kingside, record.could_castle_queenside
        )

        if record.is_capture:
            if record.en_passant_capture:
                capture_sq = record.to_sq.offset(0, -color.forward)
            else:
                capture_sq = record.to_sq
            self._place(Piece(record.captured, color.opposite, capture_sq), capture_sq)

        self._pawn_halfmove_clock = record.pawn_halfmove_clock
        self._en_passant = record.en_passant_before
        self._halfmove -= 1
        self._side_to_move = self._side_to_move.opposite
        if self._side_to_move == Color.BLACK:
            self._fullmove_number -= 1

        self._is_check = self._validator.is_check(self)
        # Not recomputed: a position reached by undoing a move is never mate.
        self._is_checkmate = False

        self._history.pop()
        _LOGGER.debug("Reverted %s %s-%s", color, record.from_sq, record.to_sq)

    # ── Notation ─────────────────────────────────────────────────────────

    def to_fen(self) -> str:
        from boardkeeper.core.notation.fen import board_to_fen

        return board_to_fen(self)

    def render_transcript(self, headers: Mapping[str, str] | None = None) -> str:
        """PGN movetext of the history; a full PGN document if *headers* given."""
        from boardkeeper.core.notation.pgn import build_pgn, movetext_from_history

        if headers is None:
            return movetext_from_history(self._history, self.result)
        return build_pgn(headers, self._history, self.result)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _require_piece(self, square: Square) -> Piece:
        piece = self.piece_at(square)
        if piece is None:
            raise BoardInvariantError(f"Expected a piece on {square}, found none")
        return piece

    def _place(self, piece: Piece, square: Square) -> None:
        self._squares[square.index] = piece
        piece.move_to(square)

    def _revoke_castling(self, piece: Piece) -> None:
        color = piece.color
        if piece.piece_type == PieceType.KING:
            self._castling &= ~(
                CastlingRights.for_side(color, True) | CastlingRights.for_side(color, False)
            )
        elif (
            piece.piece_type == PieceType.ROOK
            and piece.square.rank == color.home_rank
            and piece.square.file in (0, 7)
        ):
            self._castling &= ~CastlingRights.for_side(color, piece.square.file == 7)

    def _restore_castling(self, color: Color, kingside: bool, queenside: bool) -> None:
        for is_kingside, allowed in ((True, kingside), (False, queenside)):
            right = CastlingRights.for_side(color, is_kingside)
            if allowed:
                self._castling |= right
            else:
                self._castling &= ~right

    def _update_en_passant(
        self, pawn: Piece, to_sq: Square, captured: Piece | None
    ) -> tuple[bool, bool]:
        """Move the en-passant target; returns (pawn_move, capture) flags."""
        from_sq = pawn.square
        if pawn.piece_type == PieceType.PAWN:
            if abs(to_sq.rank - from_sq.rank) == 2:
                for df in (-1, 1):
                    neighbour = self.piece_at(to_sq.offset(df, 0))
                    if (
                        neighbour is not None
                        and neighbour.color != pawn.color
                        and neighbour.piece_type == PieceType.PAWN
                    ):
                        self._en_passant = to_sq.offset(0, -pawn.color.forward)
                        return True, False
            elif (
                to_sq == self._en_passant
                and to_sq.file != from_sq.file
                and captured is None
            ):
                victim_sq = to_sq.offset(0, -pawn.color.forward)
                self._require_piece(victim_sq)
                self._squares[victim_sq.index] = None
                self._en_passant = None
                return False, True

        self._en_passant = None
        return False, False

    def _disambiguation(self, piece: Piece, to_sq: Square) -> str:
        """SAN origin hint ('' when no other same-kind piece can reach *to_sq*)."""
        if piece.piece_type == PieceType.KING:
            return ""
        rivals = [
            p for p in self.pieces(piece.color, piece.piece_type) if p is not piece
        ]
        if not rivals or not self._validator.is_ambiguous(self, to_sq, rivals):
            return ""

        contenders = [p for p in rivals if self._validator.is_ambiguous(self, to_sq, (p,))]
        origin = piece.square
        if not any(p.square.file == origin.file for p in contenders):
            return letter_from_file(origin.file)
        if not any(p.square.rank == origin.rank for p in contenders):
            return str(origin.rank + 1)
        return origin.name

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Board:
        """Deep copy, history included."""
        board = Board(
            pieces=[p.copy() for p in self._squares if p is not None],
            side_to_move=self._side_to_move,
            castling=self._castling,
            en_passant=self._en_passant,
            pawn_halfmove_clock=self._pawn_halfmove_clock,
            fullmove_number=self._fullmove_number,
            validator=self._validator,
        )
        board._history = self._history.copy()
        board._halfmove = self._halfmove
        board._is_check = self._is_check
        board._is_checkmate = self._is_checkmate
        board.result = self.result
        return board

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        """Same slots and same flags/clocks; move history is not compared."""
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._squares == other._squares
            and self._side_to_move == other._side_to_move
            and self._castling == other._castling
            and self._en_passant == other._en_passant
            and self._pawn_halfmove_clock == other._pawn_halfmove_clock
            and self._halfmove == other._halfmove
            and self._fullmove_number == other._fullmove_number
            and self._is_check == other._is_check
            and self._is_checkmate == other._is_checkmate
            and self.result == other.result
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board({self.to_fen()!r})"
