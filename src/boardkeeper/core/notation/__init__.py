"""Notation package: FEN / SAN / PGN parsing and serialization."""

from boardkeeper.core.notation.fen import STARTING_FEN, board_from_fen, board_to_fen
from boardkeeper.core.notation.models import NotatedMove, ParsedPgn, PgnMove, Transcript
from boardkeeper.core.notation.pgn import (
    build_pgn,
    game_result_from_pgn,
    movetext_from_history,
    parse_pgn_game,
    parse_transcript,
    pgn_result_token,
)
from boardkeeper.core.notation.san import parse_san_token, record_to_san

__all__ = [
    "STARTING_FEN",
    "NotatedMove",
    "PgnMove",
    "ParsedPgn",
    "Transcript",
    "board_from_fen",
    "board_to_fen",
    "parse_san_token",
    "record_to_san",
    "pgn_result_token",
    "game_result_from_pgn",
    "movetext_from_history",
    "build_pgn",
    "parse_pgn_game",
    "parse_transcript",
]
