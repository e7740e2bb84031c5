import logging

import click

from kifu.infra.app_logging import (
    app_logger,
    get_log_level_from_env,
)
from kifu.infra.console.export_csa import export_csa


@click.group()
@click.option(
    "--debug-mode",
    "-d",
    is_flag=True,
    help="Enable debug logging.",
)
def main(debug_mode: bool) -> None:
    if debug_mode:
        app_logger.setLevel(logging.DEBUG)
    else:
        # 環境変数KIFU_LOG_LEVELからログレベルを取得
        # デバッグモードが指定されていない場合のみ環境変数を参照
        app_logger.setLevel(get_log_level_from_env())


main.add_command(export_csa)
