"""cshogiの盤面からCSA棋譜の値オブジェクトを作るアダプタ（ドメイン層）．

指し手の合法性判定はcshogiに任せ，ここでは実装しない．
"""

from __future__ import annotations

import io
from enum import IntEnum
from typing import Literal

import cshogi
import numpy as np

from kifu.domain.record.csa_format import CSAWriter
from kifu.domain.record.value import (
    BulkLayout,
    Cell,
    Color,
    Move,
    PieceType,
    Position,
    SparseLayout,
    Square,
)

HCP_BYTES = 32

# cshogiの駒番号．後手は+16
# 角飛金の順番がCSA（金角飛）と異なる点に注意
CSHOGI_WHITE_OFFSET = 16
CSHOGI_PIECE_TYPES: dict[int, PieceType] = {
    1: PieceType.PAWN,
    2: PieceType.LANCE,
    3: PieceType.KNIGHT,
    4: PieceType.SILVER,
    5: PieceType.BISHOP,
    6: PieceType.ROOK,
    7: PieceType.GOLD,
    8: PieceType.KING,
    9: PieceType.PRO_PAWN,
    10: PieceType.PRO_LANCE,
    11: PieceType.PRO_KNIGHT,
    12: PieceType.PRO_SILVER,
    13: PieceType.HORSE,
    14: PieceType.DRAGON,
}

# pieces_in_handの並び: 歩，香車，桂馬，銀，金，角，飛車
HAND_PIECE_TYPES: tuple[PieceType, ...] = (
    PieceType.PAWN,
    PieceType.LANCE,
    PieceType.KNIGHT,
    PieceType.SILVER,
    PieceType.GOLD,
    PieceType.BISHOP,
    PieceType.ROOK,
)

LayoutMode = Literal["auto", "bulk"]


class Turn(IntEnum):
    BLACK = cshogi.BLACK  # type: ignore
    WHITE = cshogi.WHITE  # type: ignore

    def to_color(self) -> Color:
        if self is Turn.BLACK:
            return Color.BLACK
        return Color.WHITE


class IllegalMove(Exception):
    pass


def square_index(square: Square) -> int:
    """cshogiのマス番号（1一が0，1九が8，9一が72）．"""
    return (square.file - 1) * 9 + (square.rank - 1)


def cshogi_piece_to_cell(piece: int) -> Cell:
    if piece == 0:
        return None
    if piece > CSHOGI_WHITE_OFFSET:
        return (
            Color.WHITE,
            CSHOGI_PIECE_TYPES[piece - CSHOGI_WHITE_OFFSET],
        )
    return (Color.BLACK, CSHOGI_PIECE_TYPES[piece])


def move_to_action(color: Color, move: int) -> Move:
    """cshogiの指し手をMoveに変換する．

    cshogiのCSA表記（"7776FU"，駒打ちは"0055KA"）を分解して使う．
    """
    csa = cshogi.move_to_csa(move)  # type: ignore
    return Move(
        color=color,
        from_square=Square(int(csa[0]), int(csa[1])),
        to_square=Square(int(csa[2]), int(csa[3])),
        piece_type=PieceType(csa[4:6]),
    )


def _board_squares() -> list[Square]:
    # CSAの一括表現と同じく段ごとに9筋から1筋へ
    return [
        Square(file, rank)
        for rank in range(1, 10)
        for file in range(9, 0, -1)
    ]


class Board:
    def __init__(self) -> None:
        self.board = cshogi.Board()  # type: ignore

    def set_sfen(self, sfen: str) -> None:
        self.board.set_sfen(sfen)

    def get_sfen(self) -> str:
        return self.board.sfen()

    def set_hcp(self, hcp: bytes) -> None:
        if len(hcp) != HCP_BYTES:
            raise ValueError(
                f"HuffmanCodedPos must be {HCP_BYTES} bytes, got {len(hcp)}"
            )
        array = np.frombuffer(
            hcp,
            dtype=cshogi.HuffmanCodedPos,  # type: ignore
        ).copy()
        self.board.set_hcp(array)

    def to_hcp(self) -> bytes:
        array = np.empty(1, dtype=cshogi.HuffmanCodedPos)  # type: ignore
        self.board.to_hcp(array)
        return array.tobytes()

    def get_turn(self) -> Turn:
        return Turn(self.board.turn)

    def get_pieces_in_hand(self) -> tuple[list[int], list[int]]:
        """手番関係なく常に(先手, 後手)の順にtupleにはいっている．"""
        return self.board.pieces_in_hand

    def push_usi(self, usi: str) -> Move:
        """USI形式の指し手を指してMoveを返す．

        cshogiが解釈できない（合法手でない）場合はIllegalMoveを送出する．
        """
        move = self.board.move_from_usi(usi)
        if move == 0:
            raise IllegalMove(f"Can not apply move `{usi}`.")
        color = self.get_turn().to_color()
        self.board.push(move)
        return move_to_action(color, move)

    def to_position(self, layout: LayoutMode = "auto") -> Position:
        """現在の局面をPositionにする．

        "auto"では平手から駒を落としただけの局面（持ち駒なし）を
        PI形式で，それ以外を一括表現と持ち駒のP+00XX行で表す．
        "bulk"では常に一括表現を使う．
        """
        side_to_move = self.get_turn().to_color()
        if layout == "auto":
            drop_pieces = self._handicap_drop_pieces()
            if drop_pieces is not None:
                return Position(
                    layout=SparseLayout(drop_pieces),
                    side_to_move=side_to_move,
                )
        elif layout != "bulk":
            raise ValueError(f"Unknown layout `{layout}`.")

        pieces = self.board.pieces
        cells = [
            cshogi_piece_to_cell(pieces[square_index(square)])
            for square in _board_squares()
        ]
        grid = tuple(
            tuple(cells[row * 9 : row * 9 + 9]) for row in range(9)
        )

        add_pieces = []
        for color, hand in zip(
            (Color.BLACK, Color.WHITE), self.get_pieces_in_hand()
        ):
            for piece_type, count in zip(HAND_PIECE_TYPES, hand):
                add_pieces.extend(
                    [(color, Square.hand(), piece_type)] * count
                )

        return Position(
            layout=BulkLayout(grid),
            add_pieces=tuple(add_pieces),
            side_to_move=side_to_move,
        )

    def _handicap_drop_pieces(
        self,
    ) -> tuple[tuple[Square, PieceType], ...] | None:
        """平手から取り除いた駒の並びを返す．平手の部分集合でなければNone．"""
        if any(any(hand) for hand in self.get_pieces_in_hand()):
            return None

        initial = cshogi.Board().pieces  # type: ignore
        pieces = self.board.pieces
        drop_pieces: list[tuple[Square, PieceType]] = []
        for square in _board_squares():
            index = square_index(square)
            if pieces[index] == initial[index]:
                continue
            if pieces[index] != 0:
                return None
            cell = cshogi_piece_to_cell(initial[index])
            assert cell is not None
            drop_pieces.append((square, cell[1]))
        return tuple(drop_pieces)

    def to_pretty_board(self) -> str:
        """盤面をCSAの一括表現（P1～P9，持ち駒，手番）で返す．"""
        buffer = io.StringIO()
        CSAWriter(buffer).write_position(self.to_position("bulk"))
        return buffer.getvalue()
