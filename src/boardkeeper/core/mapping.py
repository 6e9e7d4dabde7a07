"""Letter ↔ index translation for files and piece kinds."""

from __future__ import annotations

from boardkeeper.core.enums import Color, PieceType

FILE_LETTERS = "abcdefgh"

# SAN / FEN uppercase letter ↔ PieceType
_PIECE_LETTERS: dict[str, PieceType] = {
    "P": PieceType.PAWN,
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}
_LETTERS_BY_TYPE: dict[PieceType, str] = {v: k for k, v in _PIECE_LETTERS.items()}


def file_from_letter(letter: str) -> int:
    """Column letter to file index, e.g. 'c' → 2."""
    if len(letter) != 1 or letter not in FILE_LETTERS:
        raise ValueError(f"Invalid file letter: {letter!r}")
    return FILE_LETTERS.index(letter)


def letter_from_file(file: int) -> str:
    """File index to column letter, e.g. 2 → 'c'."""
    if not 0 <= file < 8:
        raise ValueError(f"Invalid file index: {file}")
    return FILE_LETTERS[file]


def piece_type_from_letter(letter: str) -> PieceType:
    """Piece letter (either case) to :class:`PieceType`."""
    try:
        return _PIECE_LETTERS[letter.upper()]
    except KeyError:
        raise ValueError(f"Invalid piece letter: {letter!r}") from None


def letter_from_piece_type(piece_type: PieceType) -> str:
    """Uppercase piece letter, e.g. KNIGHT → 'N'."""
    try:
        return _LETTERS_BY_TYPE[piece_type]
    except KeyError:
        raise ValueError(f"No letter for piece type: {piece_type!r}") from None


def fen_char(color: Color, piece_type: PieceType) -> str:
    """FEN character (uppercase = white, lowercase = black)."""
    letter = letter_from_piece_type(piece_type)
    return letter if color == Color.WHITE else letter.lower()


def parse_fen_char(char: str) -> tuple[Color, PieceType]:
    """Inverse of :func:`fen_char`."""
    piece_type = piece_type_from_letter(char)
    return (Color.WHITE if char.isupper() else Color.BLACK), piece_type
