"""描画前の任意の検査（ドメイン層）．

csa_formatは入力をそのまま描画するため，範囲外のマスや負の時間があると
CSAとして不正なテキストができてしまう．ここではそうした構造上の問題を
まとめて報告する．将棋のルール（王手放置や二歩など）は扱わない．
"""

import datetime
from dataclasses import dataclass
from typing import Optional

from kifu.domain.record.value import (
    BulkLayout,
    GameRecord,
    IllegalAction,
    Move,
    PieceType,
    Position,
    SpecialAction,
    Square,
)


@dataclass(frozen=True)
class ValidationIssue:
    location: str
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class InvalidGameRecordError(Exception):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        details = "; ".join(str(issue) for issue in issues)
        super().__init__(f"Invalid game record: {details}")


def _is_on_board(square: Square) -> bool:
    return 1 <= square.file <= 9 and 1 <= square.rank <= 9


def _check_text(
    location: str, value: Optional[str]
) -> list[ValidationIssue]:
    if value is None:
        return []
    if value == "":
        return [ValidationIssue(location, "empty string")]
    if "\n" in value or "\r" in value:
        return [ValidationIssue(location, "contains a line break")]
    return []


def _check_duration(
    location: str, duration: Optional[datetime.timedelta]
) -> list[ValidationIssue]:
    if duration is not None and duration < datetime.timedelta(0):
        return [
            ValidationIssue(location, f"negative duration {duration}")
        ]
    return []


def _check_position(position: Position) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if isinstance(position.layout, BulkLayout):
        grid = position.layout.grid
        if len(grid) != 9 or any(len(row) != 9 for row in grid):
            issues.append(
                ValidationIssue("start_pos.bulk", "grid is not 9x9")
            )
        for rank, row in enumerate(grid, start=1):
            for cell in row:
                if cell is not None and cell[1] is PieceType.ALL:
                    issues.append(
                        ValidationIssue(
                            f"start_pos.bulk[{rank}]",
                            "AL cannot be placed on the board",
                        )
                    )
    else:
        for i, (square, piece_type) in enumerate(
            position.layout.drop_pieces
        ):
            location = f"start_pos.drop_pieces[{i}]"
            if not _is_on_board(square):
                issues.append(
                    ValidationIssue(
                        location, f"square {square} is off the board"
                    )
                )
            if piece_type is PieceType.ALL:
                issues.append(
                    ValidationIssue(location, "AL cannot be dropped")
                )

    for i, (_, square, piece_type) in enumerate(
        position.add_pieces
    ):
        location = f"start_pos.add_pieces[{i}]"
        if not (square.is_hand() or _is_on_board(square)):
            issues.append(
                ValidationIssue(
                    location, f"square {square} is off the board"
                )
            )
        if piece_type is PieceType.ALL and not square.is_hand():
            issues.append(
                ValidationIssue(
                    location, "AL is only allowed with square 00"
                )
            )

    return issues


def _check_move(location: str, move: Move) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not (
        move.from_square.is_hand() or _is_on_board(move.from_square)
    ):
        issues.append(
            ValidationIssue(
                location,
                f"from square {move.from_square} is off the board",
            )
        )
    if not _is_on_board(move.to_square):
        issues.append(
            ValidationIssue(
                location,
                f"to square {move.to_square} is off the board",
            )
        )
    if move.piece_type is PieceType.ALL:
        issues.append(ValidationIssue(location, "AL cannot be moved"))
    return issues


def validate_game_record(record: GameRecord) -> list[ValidationIssue]:
    """recordの構造上の問題をすべて集めて返す．問題がなければ空リスト．"""
    issues: list[ValidationIssue] = []

    for label, value in [
        ("black_player", record.black_player),
        ("white_player", record.white_player),
        ("event", record.event),
        ("site", record.site),
        ("opening", record.opening),
    ]:
        issues.extend(_check_text(label, value))

    if record.time_limit is not None:
        issues.extend(
            _check_duration(
                "time_limit.main_time", record.time_limit.main_time
            )
        )
        issues.extend(
            _check_duration(
                "time_limit.byoyomi", record.time_limit.byoyomi
            )
        )

    issues.extend(_check_position(record.start_pos))

    for i, move_record in enumerate(record.moves):
        location = f"moves[{i}]"
        action = move_record.action
        if isinstance(action, Move):
            issues.extend(_check_move(location, action))
        elif not isinstance(action, (IllegalAction, SpecialAction)):
            issues.append(
                ValidationIssue(location, f"unknown action {action!r}")
            )
        issues.extend(
            _check_duration(f"{location}.time", move_record.time)
        )

    return issues


def ensure_valid(record: GameRecord) -> GameRecord:
    """問題があればInvalidGameRecordErrorを送出し，なければrecordを返す．"""
    issues = validate_game_record(record)
    if issues:
        raise InvalidGameRecordError(issues)
    return record
