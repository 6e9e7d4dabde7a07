"""Move history: one immutable record per applied move, kept as a stack."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from boardkeeper.core.enums import Color, PieceType
from boardkeeper.core.types import Square


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """Everything needed to undo one move and to write it in SAN.

    ``piece_type`` is the kind that left ``from_sq`` (a pawn for promotions).
    The ``could_castle_*``, ``pawn_halfmove_clock`` and ``en_passant_before``
    fields hold the values from *before* the move.
    """

    ply: int
    fullmove_number: int
    color: Color
    piece_type: PieceType
    from_sq: Square
    to_sq: Square
    captured: PieceType = PieceType.NONE
    promotion: PieceType = PieceType.NONE
    en_passant_capture: bool = False
    en_passant_pawn_move: bool = False
    is_check: bool = False
    is_checkmate: bool = False
    disambiguation: str = ""
    could_castle_kingside: bool = False
    could_castle_queenside: bool = False
    pawn_halfmove_clock: int = 0
    en_passant_before: Square | None = None

    @property
    def is_capture(self) -> bool:
        return self.captured != PieceType.NONE

    @property
    def is_castle(self) -> bool:
        return (
            self.piece_type == PieceType.KING
            and abs(self.from_sq.file - self.to_sq.file) > 1
        )

    @property
    def is_ambiguous(self) -> bool:
        """Whether another piece of the same kind could reach ``to_sq``."""
        return bool(self.disambiguation)


class MoveHistory:
    """Last-in-first-out log of :class:`MoveRecord`."""

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: list[MoveRecord] = []

    def push(self, record: MoveRecord) -> None:
        self._records.append(record)

    def pop(self) -> MoveRecord:
        if not self._records:
            raise IndexError("pop from empty move history")
        return self._records.pop()

    @property
    def last(self) -> MoveRecord | None:
        return self._records[-1] if self._records else None

    def copy(self) -> MoveHistory:
        clone = MoveHistory()
        clone._records = self._records.copy()
        return clone

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> MoveRecord:
        return self._records[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoveHistory):
            return NotImplemented
        return self._records == other._records

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"MoveHistory({len(self._records)} moves)"
