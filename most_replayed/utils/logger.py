"""ログ設定"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """
    ルートロガーにRichHandlerを設定（CLIからのみ呼ぶ）

    Args:
        verbose: TrueならDEBUGレベルで出力
        console: 出力先のConsole（Noneの場合はstderr）
    """
    level = logging.DEBUG if verbose else logging.INFO
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # asyncioのデバッグログは抑制
    logging.getLogger("asyncio").setLevel(logging.WARNING)
