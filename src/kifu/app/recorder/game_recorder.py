import datetime
import logging
from dataclasses import dataclass
from typing import Optional

from kifu.domain.board.shogi import Board, LayoutMode
from kifu.domain.record.validation import ensure_valid
from kifu.domain.record.value import (
    Action,
    GameRecord,
    IllegalAction,
    MoveRecord,
    SpecialAction,
    Time,
    TimeLimit,
)

ILLEGAL_ACTION = "ILLEGAL_ACTION"


class UnknownEndgame(Exception):
    pass


class ElapsedTimeMismatch(Exception):
    pass


def endgame_action(endgame: str, board: Board) -> Action:
    """終局の表記（"TORYO"や"%TORYO"）からActionを作る．

    ILLEGAL_ACTIONは手番側の反則として扱う．
    """
    keyword = endgame.strip().lstrip("%").upper()
    if keyword == ILLEGAL_ACTION:
        return IllegalAction(board.get_turn().to_color())
    try:
        return SpecialAction(keyword)
    except ValueError as e:
        raise UnknownEndgame(
            f"Unknown endgame `{endgame}`. Choose from "
            f"{[a.value for a in SpecialAction] + [ILLEGAL_ACTION]}"
        ) from e


class GameRecorder:
    """Builds a CSA game record from an SFEN start position and USI moves.

    Moves are replayed on a cshogi board so that every move can be written
    with the piece it leaves on the destination square.
    """

    logger: logging.Logger = logging.getLogger(__name__)

    @dataclass(kw_only=True, frozen=True)
    class RecordOption:
        sfen: Optional[str] = None
        hcp: Optional[bytes] = None
        usi_moves: list[str]
        elapsed_seconds: Optional[list[int]] = None
        endgame: Optional[str] = None
        endgame_seconds: Optional[int] = None
        black_player: Optional[str] = None
        white_player: Optional[str] = None
        event: Optional[str] = None
        site: Optional[str] = None
        start_time: Optional[Time] = None
        end_time: Optional[Time] = None
        time_limit: Optional[TimeLimit] = None
        opening: Optional[str] = None
        layout: LayoutMode = "auto"
        validate: bool = True

    def _start_board(self, option: RecordOption) -> Board:
        if option.sfen is not None and option.hcp is not None:
            raise ValueError("Specify either sfen or hcp, not both.")
        board = Board()
        if option.sfen is not None:
            board.set_sfen(option.sfen)
        elif option.hcp is not None:
            board.set_hcp(option.hcp)
        return board

    def record(self, option: RecordOption) -> GameRecord:
        elapsed = option.elapsed_seconds or []
        if len(elapsed) > len(option.usi_moves):
            raise ElapsedTimeMismatch(
                f"{len(elapsed)} elapsed times for "
                f"{len(option.usi_moves)} moves."
            )

        board = self._start_board(option)
        start_pos = board.to_position(option.layout)
        self.logger.debug(
            f"Start position: {board.get_sfen()} ({option.layout})"
        )
        self.logger.debug(f"Start board:\n{board.to_pretty_board()}")

        moves: list[MoveRecord] = []
        for i, usi in enumerate(option.usi_moves):
            action = board.push_usi(usi)
            seconds = elapsed[i] if i < len(elapsed) else None
            moves.append(
                MoveRecord(
                    action=action,
                    time=(
                        datetime.timedelta(seconds=seconds)
                        if seconds is not None
                        else None
                    ),
                )
            )

        if option.endgame is not None:
            moves.append(
                MoveRecord(
                    action=endgame_action(option.endgame, board),
                    time=(
                        datetime.timedelta(
                            seconds=option.endgame_seconds
                        )
                        if option.endgame_seconds is not None
                        else None
                    ),
                )
            )

        record = GameRecord(
            black_player=option.black_player,
            white_player=option.white_player,
            event=option.event,
            site=option.site,
            start_time=option.start_time,
            end_time=option.end_time,
            time_limit=option.time_limit,
            opening=option.opening,
            start_pos=start_pos,
        ).extend_moves(moves)
        self.logger.info(
            f"Recorded {len(record.moves)} actions "
            f"(final position: {board.get_sfen()})"
        )

        if option.validate:
            ensure_valid(record)
        return record
