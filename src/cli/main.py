"""Main CLI entry point for notion-blog-sync command.

This module provides the Typer application that serves as the entry point
for the notion-blog-sync command-line tool. It uses options on the main
command rather than subcommands.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.config import ConfigLoader
from src.cli.errors import ConfigError, ConfigNotFoundError
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.sync_command import SyncCommand

__version__ = "0.1.0"

app = typer.Typer(
    name="notion-blog-sync",
    help="Sync blog posts, their content blocks and images from a Notion database.",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"notion-blog-sync_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML config file (default: .notion-sync/config.yaml if present)",
        metavar="PATH",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write posts and resolved blocks to this JSON file",
        metavar="PATH",
    ),
    skip_images: bool = typer.Option(
        False,
        "--skip-images",
        help="Do not download images",
    ),
    image_width: Optional[int] = typer.Option(
        None,
        "--image-width",
        help="Resize downloaded images to this width (re-encoded as JPEG)",
        min=1,
    ),
    snapshot_dir: Optional[str] = typer.Option(
        None,
        "--snapshot-dir",
        help="Read block listings from JSON snapshots in this directory when present",
        metavar="DIR",
    ),
    save_snapshots: bool = typer.Option(
        False,
        "--save-snapshots",
        help="With --snapshot-dir: write every block listing to the snapshot directory",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Sync blog posts, their content blocks and images from a Notion database.

    \b
    Required environment variables (or .env):
      NOTION_TOKEN    - Notion integration token
      DATABASE_ID     - Id of the blog database

    \b
    EXAMPLE:
      notion-blog-sync --output content.json --image-width 1200
    """
    if version:
        typer.echo(f"notion-blog-sync version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output_handler = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        settings = ConfigLoader.load(config)
    except (ConfigError, ConfigNotFoundError) as e:
        logger.error(f"Configuration error: {e}")
        output_handler.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if image_width is not None:
        settings.image_width = image_width
    if snapshot_dir is not None:
        settings.snapshot_dir = snapshot_dir
    if save_snapshots:
        if not settings.snapshot_dir:
            output_handler.error("--save-snapshots requires --snapshot-dir")
            raise typer.Exit(ExitCode.GENERAL_ERROR)
        settings.save_snapshots = True

    sync_cmd = SyncCommand(settings, output_handler=output_handler)
    exit_code = sync_cmd.run(skip_images=skip_images, output_path=output)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
