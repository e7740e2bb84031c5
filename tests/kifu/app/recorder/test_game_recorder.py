import datetime

import pytest

from kifu.app.recorder import game_recorder
from kifu.domain.board.shogi import IllegalMove
from kifu.domain.record.csa_format import dumps
from kifu.domain.record.validation import InvalidGameRecordError
from kifu.domain.record.value import (
    BulkLayout,
    Color,
    IllegalAction,
    SpecialAction,
    Time,
    TimeLimit,
)


class TestGameRecorder:
    @pytest.fixture
    def default_fixture(self) -> None:
        self.test_class = game_recorder.GameRecorder()

    def test_record_with_metadata(self, default_fixture: None) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=["8g8f"],
            elapsed_seconds=[5],
            endgame="TORYO",
            black_player="NAKAHARA",
            white_player="YONENAGA",
            event="13th World Computer Shogi Championship",
            site="KAZUSA ARC",
            start_time=Time(
                date=datetime.date(2003, 5, 3),
                time=datetime.time(10, 30, 0),
            ),
            end_time=Time(
                date=datetime.date(2003, 5, 3),
                time=datetime.time(11, 11, 5),
            ),
            time_limit=TimeLimit(
                main_time=datetime.timedelta(seconds=1500)
            ),
            opening="YAGURA",
        )

        record = self.test_class.record(option)

        assert dumps(record) == (
            "V2.2\n"
            "N+NAKAHARA\n"
            "N-YONENAGA\n"
            "$EVENT:13th World Computer Shogi Championship\n"
            "$SITE:KAZUSA ARC\n"
            "$START_TIME:2003/05/03 10:30:00\n"
            "$END_TIME:2003/05/03 11:11:05\n"
            "$TIME_LIMIT:00:25+00\n"
            "$OPENING:YAGURA\n"
            "PI\n"
            "+\n"
            "+8786FU\n"
            "T5\n"
            "%TORYO\n"
        )

    def test_elapsed_times_may_be_shorter(
        self, default_fixture: None
    ) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=["7g7f", "3c3d"],
            elapsed_seconds=[1],
            endgame="%CHUDAN",
            endgame_seconds=7,
        )
        record = self.test_class.record(option)
        assert [m.time for m in record.moves] == [
            datetime.timedelta(seconds=1),
            None,
            datetime.timedelta(seconds=7),
        ]
        assert record.moves[-1].action is SpecialAction.CHUDAN

    def test_too_many_elapsed_times(
        self, default_fixture: None
    ) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=["7g7f"], elapsed_seconds=[1, 2]
        )
        with pytest.raises(game_recorder.ElapsedTimeMismatch):
            self.test_class.record(option)

    def test_illegal_action_belongs_to_side_to_move(
        self, default_fixture: None
    ) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=["7g7f"], endgame="illegal_action"
        )
        record = self.test_class.record(option)
        assert record.moves[-1].action == IllegalAction(Color.WHITE)
        assert dumps(record).endswith("+7776FU\n%-ILLEGAL_ACTION\n")

    def test_unknown_endgame(self, default_fixture: None) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=[], endgame="RESIGN"
        )
        with pytest.raises(game_recorder.UnknownEndgame):
            self.test_class.record(option)

    def test_illegal_usi_move(self, default_fixture: None) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=["7g7f", "7f7e", "7e7d"]
        )
        with pytest.raises(IllegalMove):
            self.test_class.record(option)

    def test_bulk_layout_from_sfen(
        self, default_fixture: None
    ) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            sfen="4k4/9/9/9/9/9/9/9/4K4 b 2P 1",
            usi_moves=["P*5e"],
        )
        record = self.test_class.record(option)
        assert isinstance(record.start_pos.layout, BulkLayout)
        assert dumps(record) == (
            "V2.2\n"
            "P1" + " * " * 4 + "-OU" + " * " * 4 + "\n"
            + "".join(f"P{r}" + " * " * 9 + "\n" for r in range(2, 9))
            + "P9" + " * " * 4 + "+OU" + " * " * 4 + "\n"
            "P+00FU\n"
            "P+00FU\n"
            "+\n"
            "+0055FU\n"
        )

    def test_sfen_and_hcp_are_exclusive(
        self, default_fixture: None
    ) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            sfen="4k4/9/9/9/9/9/9/9/4K4 b - 1",
            hcp=b"\x00" * 32,
            usi_moves=[],
        )
        with pytest.raises(ValueError):
            self.test_class.record(option)

    def test_validation_failure(self, default_fixture: None) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=[], black_player=""
        )
        with pytest.raises(InvalidGameRecordError):
            self.test_class.record(option)

    def test_validation_can_be_skipped(
        self, default_fixture: None
    ) -> None:
        option = game_recorder.GameRecorder.RecordOption(
            usi_moves=[], black_player="", validate=False
        )
        assert dumps(self.test_class.record(option)) == (
            "V2.2\nN+\nPI\n+\n"
        )
