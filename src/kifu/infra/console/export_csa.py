from pathlib import Path
from typing import Optional

import click

from kifu.infra.console.common import (
    FileSystem,
    handle_exception,
)
from kifu.interface import exporter


@click.command("export-csa")
@click.option(
    "--sfen",
    help="Start position in SFEN notation (default: standard setup).",
    type=str,
    required=False,
)
@click.option(
    "--hcp-hex",
    help="Start position as hex encoded HuffmanCodedPos (32 bytes).",
    type=str,
    required=False,
)
@click.option(
    "--moves",
    "-m",
    help="USI moves in play order. Repeatable or space separated.",
    type=str,
    required=False,
    multiple=True,
)
@click.option(
    "--elapsed",
    "-t",
    help="Elapsed seconds for each move, in order. Repeatable.",
    type=int,
    required=False,
    multiple=True,
)
@click.option(
    "--endgame",
    help="Terminal action (e.g., 'TORYO', 'SENNICHITE', 'ILLEGAL_ACTION').",
    type=str,
    required=False,
)
@click.option(
    "--endgame-elapsed",
    help="Elapsed seconds for the terminal action.",
    type=int,
    required=False,
)
@click.option(
    "--black",
    help="Black (sente) player name.",
    type=str,
    required=False,
)
@click.option(
    "--white",
    help="White (gote) player name.",
    type=str,
    required=False,
)
@click.option(
    "--event",
    help="Event name.",
    type=str,
    required=False,
)
@click.option(
    "--site",
    help="Site name.",
    type=str,
    required=False,
)
@click.option(
    "--start-time",
    help="Start time: 'YYYY/MM/DD' or 'YYYY/MM/DD HH:MM:SS'.",
    type=str,
    required=False,
)
@click.option(
    "--end-time",
    help="End time: 'YYYY/MM/DD' or 'YYYY/MM/DD HH:MM:SS'.",
    type=str,
    required=False,
)
@click.option(
    "--main-time",
    help="Main thinking time in seconds.",
    type=int,
    required=False,
)
@click.option(
    "--byoyomi",
    help="Byoyomi in seconds.",
    type=int,
    required=False,
)
@click.option(
    "--opening",
    help="Opening name.",
    type=str,
    required=False,
)
@click.option(
    "--layout",
    help="Position layout: 'auto' (PI when possible) or 'bulk'.",
    type=str,
    default="auto",
    required=False,
)
@click.option(
    "--validate/--no-validate",
    type=bool,
    is_flag=True,
    help="Check the record before writing it.",
    default=True,
    required=False,
)
@click.option(
    "--output-path",
    help="Output file path. Prints to stdout when omitted.",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)
@click.option(
    "--encoding",
    help="Output file encoding (e.g., 'utf-8', 'shift_jis').",
    type=str,
    default="utf-8",
    required=False,
)
@handle_exception
def export_csa(
    sfen: Optional[str],
    hcp_hex: Optional[str],
    moves: tuple[str, ...],
    elapsed: tuple[int, ...],
    endgame: Optional[str],
    endgame_elapsed: Optional[int],
    black: Optional[str],
    white: Optional[str],
    event: Optional[str],
    site: Optional[str],
    start_time: Optional[str],
    end_time: Optional[str],
    main_time: Optional[int],
    byoyomi: Optional[int],
    opening: Optional[str],
    layout: str,
    validate: bool,
    output_path: Optional[Path],
    encoding: str,
) -> None:
    """Write a game record in CSA V2.2 format."""
    csa = exporter.export(
        file_system=FileSystem(),
        output_path=output_path,
        encoding=encoding,
        sfen=sfen,
        hcp_hex=hcp_hex,
        moves=list(moves),
        elapsed_seconds=list(elapsed),
        endgame=endgame,
        endgame_seconds=endgame_elapsed,
        black_player=black,
        white_player=white,
        event=event,
        site=site,
        start_time=start_time,
        end_time=end_time,
        main_time=main_time,
        byoyomi=byoyomi,
        opening=opening,
        layout=layout,
        validate=validate,
    )
    if output_path is None:
        click.echo(csa, nl=False)
