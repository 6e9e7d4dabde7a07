"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from boardkeeper.core.board import Board
from boardkeeper.core.enums import MoveStatus, PieceType
from boardkeeper.core.types import Square

CASTLING_FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"

PlayFn = Callable[..., None]


@pytest.fixture
def board() -> Board:
    """Fresh board in the standard starting position."""
    return Board()


@pytest.fixture
def castling_board() -> Board:
    """Both sides with rooks and king at home and all rights."""
    return Board.from_fen(CASTLING_FEN)


@pytest.fixture
def play() -> PlayFn:
    """Apply coordinate moves such as ``"e2e4"`` or ``"e7e8q"``; each must succeed."""

    def _play(board: Board, *moves: str) -> None:
        for text in moves:
            promotion = PieceType.NONE
            if len(text) == 5:
                promotion = {
                    "q": PieceType.QUEEN,
                    "r": PieceType.ROOK,
                    "b": PieceType.BISHOP,
                    "n": PieceType.KNIGHT,
                }[text[4]]
            status = board.apply_move(
                Square.parse(text[:2]), Square.parse(text[2:4]), promotion
            )
            assert status == MoveStatus.OK, f"{text}: {status.name}"

    return _play
