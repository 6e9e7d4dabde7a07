"""SAN (Standard Algebraic Notation) token decoding and rendering."""

from __future__ import annotations

from boardkeeper.core.enums import PieceType
from boardkeeper.core.history import MoveRecord
from boardkeeper.core.mapping import (
    FILE_LETTERS,
    file_from_letter,
    letter_from_file,
    letter_from_piece_type,
    piece_type_from_letter,
)
from boardkeeper.core.notation.models import NotatedMove
from boardkeeper.core.types import Square

_SAN_PIECE_LETTERS = "NBRQK"
_KINGSIDE_TOKENS = ("O-O", "0-0")
_QUEENSIDE_TOKENS = ("O-O-O", "0-0-0")


def parse_san_token(san: str, ply: int) -> NotatedMove:
    """Decode *san* without a board.

    Unreadable destinations yield ``to_sq=None``; the replay driver reports
    those as format errors.
    """
    clean = san.rstrip("+#!?")

    # Castling
    if clean in _QUEENSIDE_TOKENS:
        return NotatedMove(ply, san, PieceType.KING, castle_queenside=True)
    if clean in _KINGSIDE_TOKENS:
        return NotatedMove(ply, san, PieceType.KING, castle_kingside=True)

    # Promotion
    promotion = PieceType.NONE
    if "=" in clean:
        clean, _, promo_letter = clean.partition("=")
        try:
            promotion = piece_type_from_letter(promo_letter)
        except ValueError:
            promotion = PieceType.NONE

    # Destination (last two chars)
    to_sq: Square | None
    try:
        to_sq = Square.parse(clean[-2:])
    except ValueError:
        to_sq = None
    clean = clean[:-2]

    # Capture marker
    is_capture = clean.endswith("x")
    if is_capture:
        clean = clean[:-1]

    # Piece type
    if clean and clean[0] in _SAN_PIECE_LETTERS:
        piece_type = piece_type_from_letter(clean[0])
        clean = clean[1:]
    else:
        piece_type = PieceType.PAWN

    # Disambiguation
    from_file: int | None = None
    from_rank: int | None = None
    for ch in clean:
        if ch in FILE_LETTERS:
            from_file = file_from_letter(ch)
        elif ch in "12345678":
            from_rank = int(ch) - 1
        else:
            to_sq = None

    return NotatedMove(
        ply=ply,
        san=san,
        piece_type=piece_type,
        to_sq=to_sq,
        from_file=from_file,
        from_rank=from_rank,
        is_capture=is_capture,
        promotion=promotion,
    )


def record_to_san(record: MoveRecord) -> str:
    """Render a history record in SAN, including the check/mate suffix."""
    if record.is_castle:
        san = "O-O" if record.to_sq.file > record.from_sq.file else "O-O-O"
    else:
        san = ""
        if record.piece_type == PieceType.PAWN:
            if record.is_capture:
                san += letter_from_file(record.from_sq.file)
        else:
            san += letter_from_piece_type(record.piece_type) + record.disambiguation

        if record.is_capture:
            san += "x"

        san += record.to_sq.name

        if record.promotion != PieceType.NONE:
            san += "=" + letter_from_piece_type(record.promotion)

    if record.is_checkmate:
        san += "#"
    elif record.is_check:
        san += "+"
    return san
