"""FEN parsing and serialization."""

from __future__ import annotations

from typing import TYPE_CHECKING

from boardkeeper.core.board import Board
from boardkeeper.core.enums import CastlingRights, Color
from boardkeeper.core.errors import FormatError
from boardkeeper.core.piece import Piece
from boardkeeper.core.types import Square

if TYPE_CHECKING:
    from boardkeeper.core.interfaces import IMoveValidator

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_LETTERS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def _parse_placement(placement: str, fen: str) -> list[Piece]:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise FormatError(
            f"Invalid FEN board (must contain 8 ranks): {fen!r}", field="placement"
        )

    pieces: list[Piece] = []
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise FormatError(f"Invalid FEN digit {ch!r}: {fen!r}", field="placement")
                file += step
            else:
                if file >= 8:
                    raise FormatError(f"Invalid FEN rank width: {fen!r}", field="placement")
                try:
                    pieces.append(Piece.from_char(ch, Square(file, rank)))
                except ValueError as exc:
                    raise FormatError(f"{exc}: {fen!r}", field="placement") from exc
                file += 1
            if file > 8:
                raise FormatError(f"Invalid FEN rank width: {fen!r}", field="placement")
        if file != 8:
            raise FormatError(f"Invalid FEN rank width: {fen!r}", field="placement")
    return pieces


def _parse_en_passant(ep_part: str, side: Color) -> Square | None:
    if ep_part == "-":
        return None
    try:
        ep = Square.parse(ep_part)
    except ValueError:
        raise FormatError(
            f"Invalid FEN en-passant square: {ep_part!r}", field="en_passant"
        ) from None
    if ep.rank not in (2, 5):
        raise FormatError(
            f"Invalid FEN en-passant square: {ep_part!r}", field="en_passant"
        )
    # The target sits behind a pawn of the side that just moved.
    expected_rank = 5 if side == Color.WHITE else 2
    if ep.rank != expected_rank:
        raise FormatError(
            f"Invalid FEN en-passant square for side-to-move: {ep_part!r}",
            field="en_passant",
        )
    return ep


def _parse_counter(text: str, name: str, minimum: int) -> int:
    try:
        value = int(text)
    except ValueError:
        raise FormatError(f"Invalid FEN {name}: {text!r}", field=name) from None
    if value < minimum:
        raise FormatError(f"Invalid FEN {name}: {text!r}", field=name)
    return value


def board_from_fen(fen: str, validator: IMoveValidator | None = None) -> Board:
    """Parse a FEN string into a :class:`Board`.

    The half-move clock and full-move number are optional (defaults 0 and 1).
    Check and checkmate flags are computed by *validator* once placed.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise FormatError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    pieces = _parse_placement(placement, fen)

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise FormatError(
            f"Invalid FEN side-to-move field: {side_part!r}", field="side_to_move"
        )

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        for ch in castling_part:
            right = _CASTLING_LETTERS.get(ch)
            if right is None or castling & right:
                raise FormatError(
                    f"Invalid FEN castling field: {castling_part!r}", field="castling"
                )
            castling |= right

    # 4. En passant (written 1-based, stored 0-based)
    ep = _parse_en_passant(ep_part, side)

    # 5-6. Clocks (optional)
    halfmove = _parse_counter(parts[4], "halfmove_clock", 0) if len(parts) > 4 else 0
    fullmove = _parse_counter(parts[5], "fullmove_number", 1) if len(parts) > 5 else 1

    return Board(
        pieces=pieces,
        side_to_move=side,
        castling=castling,
        en_passant=ep,
        pawn_halfmove_clock=halfmove,
        fullmove_number=fullmove,
        validator=validator,
    )


def board_to_fen(board: Board) -> str:
    """Serialise a :class:`Board` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board.piece_at(Square(file, rank))
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if board.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(
        letter for letter, right in _CASTLING_LETTERS.items() if board.castling & right
    )
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = board.en_passant.name if board.en_passant is not None else "-"

    return (
        f"{board_str} {side_str} {castling_str} {ep_str} "
        f"{board.pawn_halfmove_clock} {board.fullmove_number}"
    )
