"""Square value type and coordinate helpers.

Board layout (Little-Endian Rank-File mapping):
    a1=0, b1=1, ..., h1=7
    a2=8, b2=9, ..., h2=15
    ...
    a8=56, b8=57, ..., h8=63
"""

from __future__ import annotations

from dataclasses import dataclass

from boardkeeper.core.mapping import file_from_letter, letter_from_file


@dataclass(frozen=True, slots=True)
class Square:
    """Immutable board coordinate.

    ``file`` and ``rank`` are zero-based.  Off-board squares may be built
    (e.g. when probing neighbours) and are reported by :attr:`is_out_of_bounds`.
    """

    file: int
    rank: int

    @property
    def is_out_of_bounds(self) -> bool:
        return not (0 <= self.file < 8 and 0 <= self.rank < 8)

    @property
    def index(self) -> int:
        """Flat array index ``rank * 8 + file``."""
        if self.is_out_of_bounds:
            raise ValueError(f"Square off the board: {self!r}")
        return self.rank * 8 + self.file

    @property
    def name(self) -> str:
        """Algebraic name, e.g. Square(4, 3) → 'e4'."""
        if self.is_out_of_bounds:
            raise ValueError(f"Square off the board: {self!r}")
        return letter_from_file(self.file) + str(self.rank + 1)

    def offset(self, files: int, ranks: int) -> Square:
        return Square(self.file + files, self.rank + ranks)

    @classmethod
    def from_index(cls, index: int) -> Square:
        if not 0 <= index < 64:
            raise ValueError(f"Invalid square index: {index}")
        return cls(index & 7, index >> 3)

    @classmethod
    def parse(cls, name: str) -> Square:
        """Parse square name, e.g. 'e4' → Square(4, 3)."""
        if len(name) != 2 or name[1] not in "12345678":
            raise ValueError(f"Invalid square name: {name!r}")
        try:
            file = file_from_letter(name[0])
        except ValueError:
            raise ValueError(f"Invalid square name: {name!r}") from None
        return cls(file, int(name[1]) - 1)

    def __str__(self) -> str:
        return self.name


ALL_SQUARES: tuple[Square, ...] = tuple(Square.from_index(i) for i in range(64))


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = ALL_SQUARES[0:8]
A2, B2, C2, D2, E2, F2, G2, H2 = ALL_SQUARES[8:16]
A3, B3, C3, D3, E3, F3, G3, H3 = ALL_SQUARES[16:24]
A4, B4, C4, D4, E4, F4, G4, H4 = ALL_SQUARES[24:32]
A5, B5, C5, D5, E5, F5, G5, H5 = ALL_SQUARES[32:40]
A6, B6, C6, D6, E6, F6, G6, H6 = ALL_SQUARES[40:48]
A7, B7, C7, D7, E7, F7, G7, H7 = ALL_SQUARES[48:56]
A8, B8, C8, D8, E8, F8, G8, H8 = ALL_SQUARES[56:64]
