import abc
import datetime
import enum
import logging
from pathlib import Path
from typing import Optional

from kifu.app.recorder.game_recorder import GameRecorder
from kifu.domain.record.csa_format import dumps
from kifu.domain.record.value import Time, TimeLimit

logger: logging.Logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y/%m/%d"
DATETIME_FORMAT = "%Y/%m/%d %H:%M:%S"


# 特定の文字列しか入力されないようにする
@enum.unique
class Layout(enum.Enum):
    AUTO = "auto"
    BULK = "bulk"


class FileSystem(metaclass=abc.ABCMeta):
    """Abstract interface for writing exported game records."""

    @staticmethod
    @abc.abstractmethod
    def write_text(
        path: Path, content: str, encoding: str = "utf-8"
    ) -> None:
        pass


def layout_validation(layout: str) -> None:
    """Validate position layout string.

    Raises:
        ValueError: If layout is not 'auto' or 'bulk'
    """
    try:
        Layout(layout)
    except ValueError:
        raise ValueError('Input "auto" or "bulk".')


def parse_time(value: Optional[str]) -> Optional[Time]:
    """Parse `YYYY/MM/DD` or `YYYY/MM/DD HH:MM:SS` into a Time.

    The time of day is kept only when it is written.
    """
    if value is None:
        return None
    value = value.strip()
    try:
        return Time.from_datetime(
            datetime.datetime.strptime(value, DATETIME_FORMAT)
        )
    except ValueError:
        pass
    try:
        return Time(
            date=datetime.datetime.strptime(value, DATE_FORMAT).date()
        )
    except ValueError:
        raise ValueError(
            f"Invalid time `{value}`. "
            "Use YYYY/MM/DD or YYYY/MM/DD HH:MM:SS."
        )


def make_time_limit(
    main_time: Optional[int], byoyomi: Optional[int]
) -> Optional[TimeLimit]:
    if main_time is None and byoyomi is None:
        return None
    if (main_time is not None and main_time < 0) or (
        byoyomi is not None and byoyomi < 0
    ):
        raise ValueError("Time limit must not be negative.")
    return TimeLimit(
        main_time=datetime.timedelta(seconds=main_time or 0),
        byoyomi=datetime.timedelta(seconds=byoyomi or 0),
    )


def split_moves(moves: Optional[list[str]]) -> list[str]:
    """`7g7f 3c3d`のような空白区切りの指定も展開する．"""
    if not moves:
        return []
    return [usi for chunk in moves for usi in chunk.split()]


def export(
    *,
    file_system: Optional[FileSystem] = None,
    output_path: Optional[Path] = None,
    encoding: str = "utf-8",
    sfen: Optional[str] = None,
    hcp_hex: Optional[str] = None,
    moves: Optional[list[str]] = None,
    elapsed_seconds: Optional[list[int]] = None,
    endgame: Optional[str] = None,
    endgame_seconds: Optional[int] = None,
    black_player: Optional[str] = None,
    white_player: Optional[str] = None,
    event: Optional[str] = None,
    site: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    main_time: Optional[int] = None,
    byoyomi: Optional[int] = None,
    opening: Optional[str] = None,
    layout: str = "auto",
    validate: bool = True,
) -> str:
    """Build a game record and render it as CSA V2.2 text.

    Args:
        file_system: File system used when output_path is given
        output_path: Destination file, or None to only return the text
        encoding: Text encoding of the output file
        sfen: Start position in SFEN notation (default: standard setup)
        hcp_hex: Start position as hex encoded HuffmanCodedPos
        moves: USI moves in play order
        elapsed_seconds: Elapsed seconds for each move
        endgame: Terminal action such as 'TORYO'
        endgame_seconds: Elapsed seconds for the terminal action
        main_time: Main thinking time in seconds
        byoyomi: Byoyomi in seconds
        layout: 'auto' (PI when possible) or 'bulk'
        validate: Check the record before rendering

    Returns:
        CSA V2.2 text
    """
    layout_validation(layout)
    if output_path is not None and file_system is None:
        raise ValueError("file_system is required with output_path.")

    hcp: Optional[bytes] = None
    if hcp_hex is not None:
        try:
            hcp = bytes.fromhex(hcp_hex)
        except ValueError as e:
            raise ValueError(f"Invalid hcp hex `{hcp_hex}`.") from e

    option = GameRecorder.RecordOption(
        sfen=sfen,
        hcp=hcp,
        usi_moves=split_moves(moves),
        elapsed_seconds=elapsed_seconds,
        endgame=endgame,
        endgame_seconds=endgame_seconds,
        black_player=black_player,
        white_player=white_player,
        event=event,
        site=site,
        start_time=parse_time(start_time),
        end_time=parse_time(end_time),
        time_limit=make_time_limit(main_time, byoyomi),
        opening=opening,
        layout=Layout(layout).value,  # type: ignore[arg-type]
        validate=validate,
    )
    csa = dumps(GameRecorder().record(option))

    if output_path is not None and file_system is not None:
        file_system.write_text(output_path, csa, encoding=encoding)
        logger.info(f"Output: {output_path}")

    return csa
