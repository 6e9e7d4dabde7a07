"""Tests for Board.apply_move / Board.revert_last_move."""

from collections.abc import Callable

import pytest

from boardkeeper.core.board import Board
from boardkeeper.core.enums import CastlingRights, Color, MoveStatus, PieceType
from boardkeeper.core.errors import BoardInvariantError
from boardkeeper.core.piece import Piece
from boardkeeper.core.types import (
    A1, A2, A3, C1, D1, D5, E1, E2, E3, E4, E5, E6, E7, E8,
    F1, F3, G1, H1, H8,
    ALL_SQUARES,
    Square,
)

PlayFn = Callable[..., None]

CASTLING_FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"

KIWIPETE_FEN = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
EN_PASSANT_FEN = "4k3/4p3/8/3P4/8/8/8/4K3 b - - 0 1"
PROMOTION_FEN = "7k/4P3/8/8/8/8/8/4K3 w - - 0 1"


def _legal_moves(board: Board) -> list[tuple[Square, Square]]:
    validator = board.validator
    return [
        (piece.square, to_sq)
        for piece in board.all_pieces(board.side_to_move)
        for to_sq in ALL_SQUARES
        if validator.is_legal(board, piece.square, to_sq)  # type: ignore[attr-defined]
    ]


class TestApply:
    def test_side_switches(self, board: Board) -> None:
        assert board.apply_move(E2, E4) == MoveStatus.OK
        assert board.side_to_move == Color.BLACK
        assert board.halfmove == 1
        assert board.piece_at(E4) == Piece(PieceType.PAWN, Color.WHITE, E4)
        assert board.piece_at(E2) is None

    def test_history_record(self, board: Board) -> None:
        board.apply_move(E2, E4)
        record = board.history.last
        assert record is not None
        assert record.ply == 1
        assert record.color == Color.WHITE
        assert record.piece_type == PieceType.PAWN
        assert (record.from_sq, record.to_sq) == (E2, E4)
        assert record.captured == PieceType.NONE
        assert record.could_castle_kingside and record.could_castle_queenside

    def test_fullmove_number(self, board: Board, play: PlayFn) -> None:
        play(board, "e2e4")
        assert board.fullmove_number == 1
        play(board, "e7e5")
        assert board.fullmove_number == 2
        board.revert_last_move()
        assert board.fullmove_number == 1


class TestRejectedMoves:
    @pytest.mark.parametrize(
        ("from_sq", "to_sq", "status"),
        [
            (E2, E5, MoveStatus.ILLEGAL_PATTERN),
            (E7, E5, MoveStatus.WRONG_TURN),
            (E4, E5, MoveStatus.NO_PIECE),
            (A1, A2, MoveStatus.OWN_PIECE_CAPTURE),
            (A1, A3, MoveStatus.BLOCKED),
            (Square(8, 1), E4, MoveStatus.OUT_OF_BOUNDS),
        ],
    )
    def test_board_unchanged(
        self, board: Board, from_sq: Square, to_sq: Square, status: MoveStatus
    ) -> None:
        before = board.copy()
        assert board.apply_move(from_sq, to_sq) == status
        assert board == before
        assert len(board.history) == 0

    def test_would_be_check(self) -> None:
        # Bishop on e2 is pinned by the rook on e7.
        board = Board.from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        before = board.copy()
        assert board.apply_move(E2, Square.parse("d3")) == MoveStatus.WOULD_BE_CHECK
        assert board == before

    def test_skip_validation_trusts_caller(self, board: Board) -> None:
        # A three-square pawn step.
        assert board.apply_move(E2, E5, skip_validation=True) == MoveStatus.OK
        assert board.piece_at(E5) == Piece(PieceType.PAWN, Color.WHITE, E5)

    def test_missing_piece_is_invariant_violation(self, board: Board) -> None:
        with pytest.raises(BoardInvariantError, match="Expected a piece on e4"):
            board.apply_move(E4, E5, skip_validation=True)

    def test_off_board_destination_is_invariant_violation(self, board: Board) -> None:
        before = board.copy()
        with pytest.raises(BoardInvariantError, match="off the board"):
            board.apply_move(E2, Square(4, 8), skip_validation=True)
        assert board == before


class TestHalfMoveClock:
    def test_pawn_move_resets(self) -> None:
        board = Board.from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 9 30")
        assert board.apply_move(E2, E3) == MoveStatus.OK
        assert board.pawn_halfmove_clock == 0

    def test_capture_resets_and_revert_restores(self) -> None:
        board = Board.from_fen("4k3/8/8/3p4/8/4N3/8/4K3 w - - 7 30")
        assert board.apply_move(E3, D5) == MoveStatus.OK
        assert board.pawn_halfmove_clock == 0
        assert board.history.last is not None
        assert board.history.last.captured == PieceType.PAWN
        board.revert_last_move()
        assert board.pawn_halfmove_clock == 7
        assert board.piece_at(D5) == Piece(PieceType.PAWN, Color.BLACK, D5)

    def test_quiet_move_increments(self) -> None:
        board = Board.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 5 40")
        assert board.apply_move(E1, E2) == MoveStatus.OK
        assert board.pawn_halfmove_clock == 6
        board.revert_last_move()
        assert board.pawn_halfmove_clock == 5


class TestCastling:
    def test_kingside_moves_rook(self, castling_board: Board) -> None:
        assert castling_board.apply_move(E1, G1) == MoveStatus.OK
        assert castling_board.piece_at(G1) == Piece(PieceType.KING, Color.WHITE, G1)
        assert castling_board.piece_at(F1) == Piece(PieceType.ROOK, Color.WHITE, F1)
        assert castling_board.piece_at(H1) is None
        assert not castling_board.can_castle(Color.WHITE, kingside=True)
        assert not castling_board.can_castle(Color.WHITE, kingside=False)
        assert castling_board.castling == CastlingRights.BLACK_BOTH
        assert castling_board.history.last is not None
        assert castling_board.history.last.is_castle

    def test_queenside_moves_rook(self, castling_board: Board) -> None:
        assert castling_board.apply_move(E1, C1) == MoveStatus.OK
        assert castling_board.piece_at(C1) == Piece(PieceType.KING, Color.WHITE, C1)
        assert castling_board.piece_at(D1) == Piece(PieceType.ROOK, Color.WHITE, D1)
        assert castling_board.piece_at(A1) is None

    def test_black_kingside(self, castling_board: Board, play: PlayFn) -> None:
        play(castling_board, "a2a3", "e8g8")
        assert castling_board.piece_at(Square.parse("f8")) is not None
        assert castling_board.piece_at(H8) is None
        assert castling_board.castling == CastlingRights.WHITE_BOTH

    def test_revert_restores_rook_and_rights(self, castling_board: Board) -> None:
        before = castling_board.copy()
        castling_board.apply_move(E1, G1)
        castling_board.revert_last_move()
        assert castling_board == before
        assert castling_board.piece_at(H1) == Piece(PieceType.ROOK, Color.WHITE, H1)

    def test_king_move_revokes_both(self, castling_board: Board) -> None:
        castling_board.apply_move(E1, D1)
        assert not castling_board.castling & CastlingRights.WHITE_BOTH

    def test_rook_move_revokes_one(self, castling_board: Board) -> None:
        castling_board.apply_move(H1, G1)
        assert not castling_board.can_castle(Color.WHITE, kingside=True)
        assert castling_board.can_castle(Color.WHITE, kingside=False)
        castling_board.revert_last_move()
        assert castling_board.can_castle(Color.WHITE, kingside=True)

    def test_rights_never_come_back_going_forward(
        self, castling_board: Board, play: PlayFn
    ) -> None:
        play(castling_board, "h1g1", "a8b8", "g1h1", "b8a8")
        assert castling_board.castling == CastlingRights.WHITE_QUEENSIDE | (
            CastlingRights.BLACK_KINGSIDE
        )

    def test_castling_through_attack_rejected(self) -> None:
        board = Board.from_fen("4kr2/8/8/8/8/8/8/4K2R w K - 0 1")
        assert board.apply_move(E1, G1) == MoveStatus.CASTLING_NOT_ALLOWED

    def test_castling_without_right_rejected(self) -> None:
        board = Board.from_fen("4k3/8/8/8/8/8/8/4K2R w - - 0 1")
        assert board.apply_move(E1, G1) == MoveStatus.CASTLING_NOT_ALLOWED


class TestEnPassant:
    def test_double_push_without_neighbour_sets_no_target(self, board: Board) -> None:
        board.apply_move(E2, E4)
        assert board.en_passant is None
        assert board.history.last is not None
        assert not board.history.last.en_passant_pawn_move

    def test_capture_removes_passed_pawn(self) -> None:
        board = Board.from_fen(EN_PASSANT_FEN)
        assert board.apply_move(E7, E5) == MoveStatus.OK
        assert board.en_passant == E6
        assert board.history.last is not None
        assert board.history.last.en_passant_pawn_move

        assert board.apply_move(D5, E6) == MoveStatus.OK
        assert board.piece_at(E5) is None
        assert board.piece_at(E6) == Piece(PieceType.PAWN, Color.WHITE, E6)
        assert board.en_passant is None
        record = board.history.last
        assert record is not None
        assert record.en_passant_capture
        assert record.captured == PieceType.PAWN

    def test_revert_restores_pawn_and_target(self) -> None:
        board = Board.from_fen(EN_PASSANT_FEN)
        start = board.copy()
        board.apply_move(E7, E5)
        after_push = board.copy()
        board.apply_move(D5, E6)

        board.revert_last_move()
        assert board == after_push
        assert board.piece_at(E5) == Piece(PieceType.PAWN, Color.BLACK, E5)
        assert board.en_passant == E6

        board.revert_last_move()
        assert board == start

    def test_target_expires_after_one_move(self, play: PlayFn) -> None:
        board = Board.from_fen(EN_PASSANT_FEN)
        play(board, "e7e5", "e1f1")
        assert board.en_passant is None
        play(board, "e8d8")
        assert board.apply_move(D5, E6) == MoveStatus.ILLEGAL_PATTERN


class TestPromotion:
    def test_missing_promotion_rejected(self) -> None:
        board = Board.from_fen(PROMOTION_FEN)
        before = board.copy()
        assert board.apply_move(E7, E8) == MoveStatus.PROMOTION_REQUIRED
        assert board == before
        assert len(board.history) == 0

    def test_king_promotion_rejected(self) -> None:
        board = Board.from_fen(PROMOTION_FEN)
        assert board.apply_move(E7, E8, PieceType.KING) == MoveStatus.INVALID_PROMOTION

    def test_promote_to_queen(self) -> None:
        board = Board.from_fen(PROMOTION_FEN)
        assert board.apply_move(E7, E8, PieceType.QUEEN) == MoveStatus.OK
        assert board.piece_at(E8) == Piece(PieceType.QUEEN, Color.WHITE, E8)
        assert board.is_check
        assert not board.is_checkmate
        record = board.history.last
        assert record is not None
        assert record.piece_type == PieceType.PAWN
        assert record.promotion == PieceType.QUEEN

    def test_revert_restores_pawn(self) -> None:
        board = Board.from_fen(PROMOTION_FEN)
        before = board.copy()
        board.apply_move(E7, E8, PieceType.KNIGHT)
        board.revert_last_move()
        assert board == before
        assert board.piece_at(E7) == Piece(PieceType.PAWN, Color.WHITE, E7)

    def test_promotion_ignored_for_ordinary_move(self, board: Board) -> None:
        assert board.apply_move(E2, E4, PieceType.QUEEN) == MoveStatus.OK
        assert board.piece_at(E4) == Piece(PieceType.PAWN, Color.WHITE, E4)
        assert board.history.last is not None
        assert board.history.last.promotion == PieceType.NONE


class TestCheckmate:
    def test_scholars_mate(self, board: Board) -> None:
        moves = [
            (E2, E4), (E7, E5), (D1, Square.parse("h5")), (Square.parse("b8"), Square.parse("c6")),
            (Square.parse("f1"), Square.parse("c4")), (Square.parse("g8"), Square.parse("f6")),
        ]
        for from_sq, to_sq in moves:
            assert board.apply_move(from_sq, to_sq) == MoveStatus.OK
            assert not board.is_checkmate
        assert board.apply_move(Square.parse("h5"), Square.parse("f7")) == MoveStatus.OK
        assert board.is_check
        assert board.is_checkmate
        assert board.history.last is not None
        assert board.history.last.is_checkmate

    def test_revert_clears_checkmate(self, board: Board, play: PlayFn) -> None:
        play(board, "f2f3", "e7e5", "g2g4", "d8h4")
        assert board.is_checkmate
        board.revert_last_move()
        assert not board.is_checkmate
        assert not board.is_check


class TestRevert:
    def test_empty_history_is_noop(self, board: Board) -> None:
        before = board.copy()
        board.revert_last_move()
        assert board == before

    def test_lifo_order(self, board: Board, play: PlayFn) -> None:
        start = board.copy()
        play(board, "e2e4", "e7e5", "g1f3")
        board.revert_last_move()
        after_two = board.copy()
        assert len(board.history) == 2
        assert board.piece_at(G1) is not None
        assert board.piece_at(F3) is None
        board.revert_last_move()
        board.revert_last_move()
        assert board == start
        assert after_two != start

    @pytest.mark.parametrize(
        "fen",
        [
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            CASTLING_FEN,
            KIWIPETE_FEN,
            "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3",
            "7k/4P3/8/8/8/8/8/4K3 w - - 0 1",
            "r3k2r/1P6/8/8/8/8/6p1/R3K2R b KQkq - 3 20",
        ],
    )
    def test_apply_then_revert_is_exact(self, fen: str) -> None:
        board = Board.from_fen(fen)
        before = board.copy()
        fen_before = board.to_fen()
        moves = _legal_moves(board)
        assert moves
        for from_sq, to_sq in moves:
            assert board.apply_move(from_sq, to_sq, PieceType.QUEEN) == MoveStatus.OK
            board.revert_last_move()
            assert board == before, f"Failed for {from_sq}{to_sq}"
            assert board.to_fen() == fen_before
            assert len(board.history) == 0


class TestKingCount:
    def test_one_king_each_through_a_game(self, board: Board, play: PlayFn) -> None:
        for move in ("e2e4", "d7d5", "e4d5", "d8d5", "b1c3", "d5a5", "e1e2", "e8d8"):
            play(board, move)
            assert len(board.pieces(Color.WHITE, PieceType.KING)) == 1
            assert len(board.pieces(Color.BLACK, PieceType.KING)) == 1


def test_en_passant_rank_is_behind_landing_square(play: PlayFn) -> None:
    board = Board.from_fen("4k3/8/8/8/5p2/8/4P3/4K3 w - - 0 1")
    play(board, "e2e4")
    assert board.en_passant == E3
    play(board, "f4e3")
    assert board.piece_at(E4) is None
    assert board.piece_at(E3) == Piece(PieceType.PAWN, Color.BLACK, E3)
