"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass, field

from boardkeeper.core.enums import GameResult, PieceType
from boardkeeper.core.types import Square


@dataclass(slots=True)
class PgnMove:
    """A single mainline move extracted from PGN movetext."""

    san: str
    comment: str = ""


@dataclass(slots=True)
class ParsedPgn:
    """Raw PGN payload: headers, mainline SAN tokens and the result token."""

    headers: dict[str, str]
    moves: list[PgnMove]
    result_token: str


@dataclass(frozen=True, slots=True)
class NotatedMove:
    """A SAN token decoded without a board.

    ``to_sq`` is ``None`` when the destination could not be read (castling
    tokens carry no destination; the castle flags say where the king goes).
    ``from_file`` / ``from_rank`` are the optional SAN disambiguation hints.
    """

    ply: int
    san: str
    piece_type: PieceType
    to_sq: Square | None = None
    from_file: int | None = None
    from_rank: int | None = None
    is_capture: bool = False
    castle_kingside: bool = False
    castle_queenside: bool = False
    promotion: PieceType = PieceType.NONE

    @property
    def move_number(self) -> int:
        """Full-move number, assuming white made the first ply."""
        return (self.ply + 1) // 2

    @property
    def is_castle(self) -> bool:
        return self.castle_kingside or self.castle_queenside


@dataclass(slots=True)
class Transcript:
    """A PGN game decoded into notated moves."""

    headers: dict[str, str] = field(default_factory=dict)
    moves: list[NotatedMove] = field(default_factory=list)
    result: GameResult = GameResult.IN_PROGRESS
