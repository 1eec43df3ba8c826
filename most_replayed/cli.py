"""YouTube Most Replayed 取得CLIツール"""

import json
import re
from dataclasses import replace
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from most_replayed.config import Settings
from most_replayed.models.heatmap import ExtractionResult
from most_replayed.services.heatmap import HeatmapError, get_most_replayed_parts
from most_replayed.utils.logger import configure_logging

app = typer.Typer(
    name="most-replayed",
    help="YouTube動画の「よく再生されている部分」をヘッドレスブラウザで取得するCLIツール",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main() -> None:
    """YouTube Most Replayed 取得ツール"""


@app.command()
def analyze(
    url: Annotated[str, typer.Argument(help="YouTube動画のURLまたは動画ID")],
    top: Annotated[
        int,
        typer.Option("--top", "-n", help="表示する上位件数", min=1),
    ] = 10,
    timeout: Annotated[
        float,
        typer.Option("--timeout", help="全体のタイムアウト（秒）"),
    ] = 120.0,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="JSONで出力"),
    ] = False,
    headful: Annotated[
        bool,
        typer.Option("--headful", help="ブラウザを表示して実行"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="詳細ログを出力"),
    ] = False,
) -> None:
    """
    動画のヒートマップから、よく再生された区間を順位付きで表示
    """
    configure_logging(verbose)

    video_id = _extract_video_id(url)
    if not video_id:
        console.print(f"[red]エラー: 無効なYouTube URL: {url}[/red]")
        raise typer.Exit(1)

    settings = Settings.from_env()
    if headful:
        settings = replace(settings, headless=False)

    try:
        if as_json:
            result = get_most_replayed_parts(video_id, top, timeout=timeout, settings=settings)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Heatmapを取得中...", total=None)
                result = get_most_replayed_parts(
                    video_id, top, timeout=timeout, settings=settings
                )
    except HeatmapError as e:
        console.print(f"[red]エラー: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False))
        return

    if not result.found:
        console.print("[yellow]警告: Heatmapデータが見つかりませんでした[/yellow]")
        return

    if result.video_length is not None:
        console.print(f"[bold]動画の長さ:[/bold] {result.video_length:.0f}秒")
    _print_parts(result)


def _print_parts(result: ExtractionResult) -> None:
    """区間をテーブル形式で表示"""
    table = Table(title="よく再生された区間")
    table.add_column("順位", justify="right", style="cyan")
    table.add_column("時間範囲", style="green")
    table.add_column("長さ", justify="right")

    for part in result.replayed_parts:
        table.add_row(
            str(part.position),
            part.format_time_range(),
            f"{part.duration}秒",
        )

    console.print(table)


def _extract_video_id(url: str) -> str | None:
    """URLまたは動画IDからvideo_idを抽出"""
    patterns = [
        r"(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})",
        r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})",
        r"^([a-zA-Z0-9_-]{11})$",
    ]
    for pattern in patterns:
        match = re.search(pattern, url.strip())
        if match:
            return match.group(1)
    return None


if __name__ == "__main__":
    app()
