import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional


class CustomLogFormatter(logging.Formatter):
    # 時刻はJSTを使用する
    def formatTime(
        self, record: logging.LogRecord, datefmt: Optional[str] = None
    ) -> str:
        tz_jst = timezone(timedelta(hours=+9), "JST")
        ct = datetime.fromtimestamp(record.created, tz=tz_jst)
        return ct.isoformat(timespec="microseconds")


LOG_LEVEL_ENV = "KIFU_LOG_LEVEL"


def get_log_level_from_env() -> int:
    """
    環境変数KIFU_LOG_LEVELからログレベルを取得する．
    環境変数が設定されていない場合，INFOレベルを返す．
    """
    log_level = os.getenv(LOG_LEVEL_ENV, "INFO").upper()

    level_mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    return level_mapping.get(log_level, logging.INFO)


# CSAの本文はstdoutに出すのでログはstderrに分ける
handler = logging.StreamHandler()
formatter = CustomLogFormatter(
    "%(asctime)s | "
    "%(levelname)-5s | "
    "%(filename)20s | "
    "%(funcName)20s | "
    "%(lineno)3d | "
    "%(message)s"
)
handler.setFormatter(formatter)

app_logger: logging.Logger = logging.getLogger("kifu")
app_logger.setLevel(get_log_level_from_env())
app_logger.addHandler(handler)
app_logger.propagate = False
