"""CSA V2.2形式への変換（ドメイン層）．

各値型の描画規則を下から順に組み合わせてGameRecordを文字列にする．
どの関数も型が正しい入力に対しては失敗せず，値の妥当性は検査しない
（検査が必要な場合は描画前にvalidationモジュールを使う）．
"""

import datetime
import io
from typing import TextIO, Union

from kifu.domain.record.value import (
    Action,
    BulkLayout,
    Color,
    GameRecord,
    IllegalAction,
    Move,
    MoveRecord,
    PieceType,
    Position,
    SparseLayout,
    SpecialAction,
    Square,
    Time,
    TimeLimit,
)

VERSION = "V2.2"
NEWLINE = "\n"
EMPTY_CELL = " * "


def format_color(color: Color) -> str:
    match color:
        case Color.BLACK:
            return "+"
        case Color.WHITE:
            return "-"
        case _:
            raise TypeError(f"Unsupported color: {color!r}")


def format_square(square: Square) -> str:
    """筋と段をそのまま連結する（7筋7段なら"77"）．"""
    return f"{square.file}{square.rank}"


def format_piece_type(piece_type: PieceType) -> str:
    match piece_type:
        case PieceType():
            return piece_type.value
        case _:
            raise TypeError(
                f"Unsupported piece type: {piece_type!r}"
            )


def format_action(action: Action) -> str:
    """指し手は"+7776FU"，それ以外は"%TORYO"のような固定表記．"""
    match action:
        case Move(
            color=color,
            from_square=from_square,
            to_square=to_square,
            piece_type=piece_type,
        ):
            return (
                format_color(color)
                + format_square(from_square)
                + format_square(to_square)
                + format_piece_type(piece_type)
            )
        case IllegalAction(color=color):
            return f"%{format_color(color)}ILLEGAL_ACTION"
        case SpecialAction():
            return f"%{action.value}"
        case _:
            raise TypeError(f"Unsupported action: {action!r}")


def format_time(time: Time) -> str:
    """日時を2003/05/03 10:30:00の形式にする．

    月日・分秒は2桁に0埋めするが，時は0埋めしない（"9:05:00"）．
    既存の棋譜と同じ出力を保つためこの非対称はそのまま残す．
    """
    date = time.date
    s = f"{date.year}/{date.month:02}/{date.day:02}"
    if time.time is not None:
        t = time.time
        s += f" {t.hour}:{t.minute:02}:{t.second:02}"
    return s


def _whole_seconds(duration: datetime.timedelta) -> int:
    return duration // datetime.timedelta(seconds=1)


def format_time_limit(time_limit: TimeLimit) -> str:
    """HH:MM+SSの形式にする．持ち時間の1分未満の秒は出力されない．"""
    secs = _whole_seconds(time_limit.main_time)
    hours = secs // 3600
    minutes = (secs % 3600) // 60
    byoyomi = _whole_seconds(time_limit.byoyomi)
    return f"{hours:02}:{minutes:02}+{byoyomi:02}"


def format_elapsed(elapsed: datetime.timedelta) -> str:
    return f"T{_whole_seconds(elapsed)}"


def format_attribute(value: Union[str, Time, TimeLimit]) -> str:
    match value:
        case Time():
            return format_time(value)
        case TimeLimit():
            return format_time_limit(value)
        case str():
            return value
        case _:
            raise TypeError(f"Unsupported attribute: {value!r}")


class CSAWriter:
    """テキストストリームへ1行ずつCSA形式を書き出す．

    まとめて文字列が欲しい場合はdumps()を使う．
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def _write_line(self, line: str) -> None:
        self.stream.write(line + NEWLINE)

    def write_record(self, record: GameRecord) -> None:
        self._write_line(VERSION)
        self.write_metadata(record)
        self.write_position(record.start_pos)
        for move_record in record.moves:
            self.write_move_record(move_record)

    def write_metadata(self, record: GameRecord) -> None:
        for label, value in record.metadata():
            if value is None:
                continue
            self._write_line(label + format_attribute(value))

    def write_position(self, position: Position) -> None:
        match position.layout:
            case BulkLayout(grid=grid):
                for rank, row in enumerate(grid, start=1):
                    cells = "".join(
                        EMPTY_CELL
                        if cell is None
                        else format_color(cell[0])
                        + format_piece_type(cell[1])
                        for cell in row
                    )
                    self._write_line(f"P{rank}{cells}")
            case SparseLayout(drop_pieces=drop_pieces):
                # 駒落としがなくても"PI"の行は出力する
                pieces = "".join(
                    format_square(square)
                    + format_piece_type(piece_type)
                    for square, piece_type in drop_pieces
                )
                self._write_line(f"PI{pieces}")
            case _:
                raise TypeError(
                    f"Unsupported layout: {position.layout!r}"
                )

        for color, square, piece_type in position.add_pieces:
            self._write_line(
                "P"
                + format_color(color)
                + format_square(square)
                + format_piece_type(piece_type)
            )

        self._write_line(format_color(position.side_to_move))

    def write_move_record(self, move_record: MoveRecord) -> None:
        self._write_line(format_action(move_record.action))
        if move_record.time is not None:
            self._write_line(format_elapsed(move_record.time))


def dump(record: GameRecord, fp: TextIO) -> None:
    CSAWriter(fp).write_record(record)


def dumps(record: GameRecord) -> str:
    buffer = io.StringIO()
    dump(record, buffer)
    return buffer.getvalue()
