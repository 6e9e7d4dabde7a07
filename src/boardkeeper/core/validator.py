"""Move legality checks and attack detection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from boardkeeper.core.enums import Color, MoveStatus, PieceType
from boardkeeper.core.interfaces import IMoveValidator
from boardkeeper.core.types import ALL_SQUARES, Square

if TYPE_CHECKING:
    from boardkeeper.core.board import Board
    from boardkeeper.core.notation.models import NotatedMove
    from boardkeeper.core.piece import Piece


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)

Slots = Sequence["Piece | None"]


def castling_rook_squares(color: Color, kingside: bool) -> tuple[Square, Square]:
    """(home corner, post-castle square) of the rook for *color*'s castle."""
    rank = color.home_rank
    if kingside:
        return Square(7, rank), Square(5, rank)
    return Square(0, rank), Square(3, rank)


# -- Attack detection on a raw 64-slot sequence ----------------------------


def _slot(slots: Slots, file: int, rank: int) -> Piece | None:
    if 0 <= file < 8 and 0 <= rank < 8:
        return slots[rank * 8 + file]
    return None


def _first_on_ray(slots: Slots, sq: Square, df: int, dr: int) -> Piece | None:
    file, rank = sq.file + df, sq.rank + dr
    while 0 <= file < 8 and 0 <= rank < 8:
        piece = slots[rank * 8 + file]
        if piece is not None:
            return piece
        file += df
        rank += dr
    return None


def _is_kind(piece: Piece | None, color: Color, kinds: tuple[PieceType, ...]) -> bool:
    return piece is not None and piece.color == color and piece.piece_type in kinds


def is_square_attacked(slots: Slots, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    # An attacking pawn stands one rank behind the target from its own side.
    pawn_rank = sq.rank - by_color.forward
    for df in (-1, 1):
        if _is_kind(_slot(slots, sq.file + df, pawn_rank), by_color, (PieceType.PAWN,)):
            return True

    for df, dr in KNIGHT_OFFSETS:
        if _is_kind(
            _slot(slots, sq.file + df, sq.rank + dr), by_color, (PieceType.KNIGHT,)
        ):
            return True

    for df, dr in KING_OFFSETS:
        if _is_kind(_slot(slots, sq.file + df, sq.rank + dr), by_color, (PieceType.KING,)):
            return True

    for df, dr in BISHOP_DIRS:
        if _is_kind(_first_on_ray(slots, sq, df, dr), by_color, _DIAGONAL_ATTACKERS):
            return True

    for df, dr in ROOK_DIRS:
        if _is_kind(_first_on_ray(slots, sq, df, dr), by_color, _STRAIGHT_ATTACKERS):
            return True

    return False


def _path_clear(slots: Slots, from_sq: Square, to_sq: Square) -> bool:
    """Squares strictly between two aligned squares are all empty."""
    df = (to_sq.file > from_sq.file) - (to_sq.file < from_sq.file)
    dr = (to_sq.rank > from_sq.rank) - (to_sq.rank < from_sq.rank)
    file, rank = from_sq.file + df, from_sq.rank + dr
    while (file, rank) != (to_sq.file, to_sq.rank):
        if slots[rank * 8 + file] is not None:
            return False
        file += df
        rank += dr
    return True


def _find_king(slots: Slots, color: Color) -> Square | None:
    for idx, piece in enumerate(slots):
        if (
            piece is not None
            and piece.color == color
            and piece.piece_type == PieceType.KING
        ):
            return ALL_SQUARES[idx]
    return None


def _simulate(slots: list[Piece | None], from_sq: Square, to_sq: Square) -> None:
    """Play *from_sq*→*to_sq* on *slots* in place (placement only)."""
    mover = slots[from_sq.index]
    assert mover is not None

    if (
        mover.piece_type == PieceType.PAWN
        and from_sq.file != to_sq.file
        and slots[to_sq.index] is None
    ):
        slots[Square(to_sq.file, from_sq.rank).index] = None

    if mover.piece_type == PieceType.KING and abs(to_sq.file - from_sq.file) > 1:
        rook_from, rook_to = castling_rook_squares(
            mover.color, to_sq.file > from_sq.file
        )
        slots[rook_to.index] = slots[rook_from.index]
        slots[rook_from.index] = None

    slots[to_sq.index] = mover
    slots[from_sq.index] = None


class MoveValidator(IMoveValidator):
    """Default rule checker operating on a :class:`Board`.

    Stateless; one instance may serve any number of boards.
    """

    __slots__ = ()

    # -- Public API ---------------------------------------------------------

    def validate_shape(self, board: Board, from_sq: Square, to_sq: Square) -> MoveStatus:
        if from_sq.is_out_of_bounds or to_sq.is_out_of_bounds:
            return MoveStatus.OUT_OF_BOUNDS

        piece = board.piece_at(from_sq)
        if piece is None:
            return MoveStatus.NO_PIECE
        if piece.color != board.side_to_move:
            return MoveStatus.WRONG_TURN
        if from_sq == to_sq:
            return MoveStatus.ILLEGAL_PATTERN

        target = board.piece_at(to_sq)
        if target is not None and target.color == piece.color:
            return MoveStatus.OWN_PIECE_CAPTURE

        df = to_sq.file - from_sq.file
        dr = to_sq.rank - from_sq.rank
        piece_type = piece.piece_type

        if piece_type == PieceType.PAWN:
            return self._pawn_shape(board, piece, to_sq, target)

        if piece_type == PieceType.KNIGHT:
            if (abs(df), abs(dr)) in ((1, 2), (2, 1)):
                return MoveStatus.OK
            return MoveStatus.ILLEGAL_PATTERN

        if piece_type == PieceType.KING:
            if max(abs(df), abs(dr)) == 1:
                return MoveStatus.OK
            if dr == 0 and abs(df) == 2:
                return self._castling_shape(board, piece, to_sq)
            return MoveStatus.ILLEGAL_PATTERN

        straight = df == 0 or dr == 0
        diagonal = abs(df) == abs(dr)
        if piece_type == PieceType.BISHOP and not diagonal:
            return MoveStatus.ILLEGAL_PATTERN
        if piece_type == PieceType.ROOK and not straight:
            return MoveStatus.ILLEGAL_PATTERN
        if piece_type == PieceType.QUEEN and not (straight or diagonal):
            return MoveStatus.ILLEGAL_PATTERN

        if not _path_clear(board.slots(), from_sq, to_sq):
            return MoveStatus.BLOCKED
        return MoveStatus.OK

    def would_be_check(self, board: Board, from_sq: Square, to_sq: Square) -> bool:
        slots = list(board.slots())
        mover = slots[from_sq.index]
        if mover is None:
            return False
        _simulate(slots, from_sq, to_sq)
        king_sq = _find_king(slots, mover.color)
        if king_sq is None:
            return False
        return is_square_attacked(slots, king_sq, mover.color.opposite)

    def is_check(self, board: Board) -> bool:
        color = board.side_to_move
        king_sq = board.king_square(color)
        if king_sq is None:
            return False
        return is_square_attacked(board.slots(), king_sq, color.opposite)

    def is_checkmate(self, board: Board) -> bool:
        if not self.is_check(board):
            return False
        return not self._has_legal_move(board)

    def resolve_origin(
        self, board: Board, notated: NotatedMove, to_sq: Square
    ) -> Square | None:
        matches = [
            piece.square
            for piece in board.pieces(board.side_to_move, notated.piece_type)
            if (notated.from_file is None or piece.square.file == notated.from_file)
            and (notated.from_rank is None or piece.square.rank == notated.from_rank)
            and self.is_legal(board, piece.square, to_sq)
        ]
        if len(matches) == 1:
            return matches[0]
        return None

    def is_ambiguous(
        self, board: Board, to_sq: Square, candidates: Iterable[Piece]
    ) -> bool:
        return bool(self.contenders(board, to_sq, candidates))

    def contenders(
        self, board: Board, to_sq: Square, candidates: Iterable[Piece]
    ) -> list[Piece]:
        """The subset of *candidates* that can legally move to *to_sq*."""
        return [p for p in candidates if self.is_legal(board, p.square, to_sq)]

    def is_legal(self, board: Board, from_sq: Square, to_sq: Square) -> bool:
        return self.validate_shape(
            board, from_sq, to_sq
        ) == MoveStatus.OK and not self.would_be_check(board, from_sq, to_sq)

    # -- Piece-specific checks (private) -----------------------------------

    @staticmethod
    def _pawn_shape(
        board: Board, pawn: Piece, to_sq: Square, target: Piece | None
    ) -> MoveStatus:
        from_sq = pawn.square
        forward = pawn.color.forward
        df = to_sq.file - from_sq.file
        dr = to_sq.rank - from_sq.rank

        if df == 0:
            if dr == forward:
                return MoveStatus.OK if target is None else MoveStatus.BLOCKED
            if dr == 2 * forward and from_sq.rank == pawn.color.home_rank + forward:
                middle = board.piece_at(from_sq.offset(0, forward))
                if target is not None or middle is not None:
                    return MoveStatus.BLOCKED
                return MoveStatus.OK
            return MoveStatus.ILLEGAL_PATTERN

        if abs(df) == 1 and dr == forward:
            if target is not None:
                return MoveStatus.OK
            if to_sq == board.en_passant:
                victim = board.piece_at(Square(to_sq.file, from_sq.rank))
                if (
                    victim is not None
                    and victim.color != pawn.color
                    and victim.piece_type == PieceType.PAWN
                ):
                    return MoveStatus.OK
        return MoveStatus.ILLEGAL_PATTERN

    @staticmethod
    def _castling_shape(board: Board, king: Piece, to_sq: Square) -> MoveStatus:
        color = king.color
        home = color.home_rank
        if king.square != Square(4, home):
            return MoveStatus.CASTLING_NOT_ALLOWED

        kingside = to_sq.file > king.square.file
        if not board.can_castle(color, kingside):
            return MoveStatus.CASTLING_NOT_ALLOWED

        rook_sq, _ = castling_rook_squares(color, kingside)
        rook = board.piece_at(rook_sq)
        if rook is None or rook.color != color or rook.piece_type != PieceType.ROOK:
            return MoveStatus.CASTLING_NOT_ALLOWED

        between = (5, 6) if kingside else (1, 2, 3)
        if any(board.piece_at(Square(f, home)) is not None for f in between):
            return MoveStatus.CASTLING_NOT_ALLOWED

        slots = board.slots()
        enemy = color.opposite
        passed = (4, 5, 6) if kingside else (4, 3, 2)
        if any(is_square_attacked(slots, Square(f, home), enemy) for f in passed):
            return MoveStatus.CASTLING_NOT_ALLOWED
        return MoveStatus.OK

    def _has_legal_move(self, board: Board) -> bool:
        for piece in board.all_pieces(board.side_to_move):
            for to_sq in ALL_SQUARES:
                if self.is_legal(board, piece.square, to_sq):
                    return True
        return False


DEFAULT_VALIDATOR = MoveValidator()
