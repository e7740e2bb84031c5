"""CSA棋譜の値オブジェクト（ドメイン層）．

GameRecordを頂点とする不変な値型を定義する．
文字列への変換はcsa_formatモジュールが担当し，ここでは持たない．
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union


@enum.unique
class Color(enum.Enum):
    """手番．値はCSA形式の記号．"""

    BLACK = "+"
    WHITE = "-"

    def flip(self) -> Color:
        if self is Color.BLACK:
            return Color.WHITE
        return Color.BLACK


@dataclass(frozen=True)
class Square:
    """盤上のマス．

    file（筋）とrank（段）はともに1-9を想定するが，ここでは検査しない．
    駒打ちの移動元と持ち駒はfile=0, rank=0（CSAの"00"）で表す．
    """

    file: int
    rank: int

    @classmethod
    def hand(cls) -> Square:
        return cls(0, 0)

    def is_hand(self) -> bool:
        return self.file == 0 and self.rank == 0


@enum.unique
class PieceType(enum.Enum):
    """駒種．値はCSA形式の2文字表記．"""

    # 歩
    PAWN = "FU"
    # 香車
    LANCE = "KY"
    # 桂馬
    KNIGHT = "KE"
    # 銀
    SILVER = "GI"
    # 金
    GOLD = "KI"
    # 角
    BISHOP = "KA"
    # 飛車
    ROOK = "HI"
    # 王
    KING = "OU"
    # と金
    PRO_PAWN = "TO"
    # 成香
    PRO_LANCE = "NY"
    # 成桂
    PRO_KNIGHT = "NK"
    # 成銀
    PRO_SILVER = "NG"
    # 馬
    HORSE = "UM"
    # 龍
    DRAGON = "RY"
    # 残りの駒すべて（P-00ALなど）
    ALL = "AL"


@enum.unique
class SpecialAction(enum.Enum):
    """指し手以外の終局・管理用の行動．値は%に続くキーワード．"""

    TORYO = "TORYO"
    CHUDAN = "CHUDAN"
    SENNICHITE = "SENNICHITE"
    TIME_UP = "TIME_UP"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    JISHOGI = "JISHOGI"
    KACHI = "KACHI"
    HIKIWAKE = "HIKIWAKE"
    MATTA = "MATTA"
    TSUMI = "TSUMI"
    FUZUMI = "FUZUMI"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Move:
    """通常の指し手．piece_typeは移動後の駒種（成った場合は成駒）．"""

    color: Color
    from_square: Square
    to_square: Square
    piece_type: PieceType


@dataclass(frozen=True)
class IllegalAction:
    """colorの側が反則行為をしたことを表す（%+ILLEGAL_ACTION）．"""

    color: Color


Action = Union[Move, IllegalAction, SpecialAction]


@dataclass(frozen=True)
class Time:
    """日付と任意の時刻．"""

    date: datetime.date
    time: Optional[datetime.time] = None

    @classmethod
    def now(cls) -> Time:
        return cls.from_datetime(
            datetime.datetime.now(datetime.timezone.utc)
        )

    @classmethod
    def from_datetime(cls, dt: datetime.datetime) -> Time:
        return cls(date=dt.date(), time=dt.time())


@dataclass(frozen=True)
class TimeLimit:
    """持ち時間と秒読み．"""

    main_time: datetime.timedelta
    byoyomi: datetime.timedelta = datetime.timedelta(0)


Cell = Optional[tuple[Color, PieceType]]
Grid = tuple[tuple[Cell, ...], ...]


@dataclass(frozen=True)
class BulkLayout:
    """一括表現（P1〜P9）の盤面．

    grid[rank - 1][9 - file]がそのマスの駒．
    各行はCSAの表記順どおり9筋から1筋に並ぶ．
    """

    grid: Grid

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "grid", tuple(tuple(row) for row in self.grid)
        )

    @classmethod
    def empty(cls) -> BulkLayout:
        return cls(tuple((None,) * 9 for _ in range(9)))

    def piece_at(self, square: Square) -> Cell:
        return self.grid[square.rank - 1][9 - square.file]


@dataclass(frozen=True)
class SparseLayout:
    """平手からの駒落とし表現（PI）．

    drop_piecesは平手初期配置から取り除く駒の並び．
    空なら平手そのもの．
    """

    drop_pieces: tuple[tuple[Square, PieceType], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "drop_pieces", tuple(self.drop_pieces)
        )


Layout = Union[BulkLayout, SparseLayout]


@dataclass(frozen=True)
class Position:
    """開始局面．

    layoutで一括表現と平手表現のどちらか一方だけを持つ．
    add_piecesはどちらの場合も後から追加する駒（P+00FUなど）．
    """

    layout: Layout = field(default_factory=SparseLayout)
    add_pieces: tuple[tuple[Color, Square, PieceType], ...] = ()
    side_to_move: Color = Color.BLACK

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "add_pieces", tuple(self.add_pieces)
        )

    @property
    def bulk(self) -> Optional[Grid]:
        if isinstance(self.layout, BulkLayout):
            return self.layout.grid
        return None

    @property
    def drop_pieces(self) -> tuple[tuple[Square, PieceType], ...]:
        if isinstance(self.layout, SparseLayout):
            return self.layout.drop_pieces
        return ()


@dataclass(frozen=True)
class MoveRecord:
    action: Action
    time: Optional[datetime.timedelta] = None


@dataclass(frozen=True)
class GameRecord:
    """1局分の棋譜．

    省略可能なメタデータはNoneのとき出力されない．
    movesは記録順に保持する．
    """

    black_player: Optional[str] = None
    white_player: Optional[str] = None
    event: Optional[str] = None
    site: Optional[str] = None
    start_time: Optional[Time] = None
    end_time: Optional[Time] = None
    time_limit: Optional[TimeLimit] = None
    opening: Optional[str] = None
    start_pos: Position = field(default_factory=Position)
    moves: tuple[MoveRecord, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "moves", tuple(self.moves))

    def metadata(
        self,
    ) -> list[tuple[str, Union[str, Time, TimeLimit, None]]]:
        """ヘッダ行のラベルと値を出力順に返す．値がNoneの項目も含む．"""
        return [
            ("N+", self.black_player),
            ("N-", self.white_player),
            ("$EVENT:", self.event),
            ("$SITE:", self.site),
            ("$START_TIME:", self.start_time),
            ("$END_TIME:", self.end_time),
            ("$TIME_LIMIT:", self.time_limit),
            ("$OPENING:", self.opening),
        ]

    def extend_moves(
        self, moves: Iterable[MoveRecord]
    ) -> GameRecord:
        return dataclasses.replace(
            self, moves=self.moves + tuple(moves)
        )
