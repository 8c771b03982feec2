"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status messages, a spinner for long-running steps and the end of run
summary. Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Resolving blocks..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a step runs.

        Args:
            message: Message to display with spinner

        Example:
            >>> with handler.spinner("Loading posts..."):
            ...     catalog.all_posts()
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_sync_summary(
        self,
        posts: int,
        post_failures: int,
        subtree_failures: int,
        images_downloaded: int,
        images_skipped: int,
    ) -> None:
        """Display summary of one sync run.

        Args:
            posts: Number of published posts in the catalog
            post_failures: Posts whose content could not be listed
            subtree_failures: Block subtrees left empty after a failure
            images_downloaded: Images stored locally
            images_skipped: Images that could not be stored
        """
        self.console.print("\n[bold]Sync Summary:[/bold]")
        self.console.print(f"  [green]✓[/green] Posts: {posts - post_failures} of {posts} resolved")

        if post_failures > 0:
            self.console.print(f"  [red]✗[/red] Failed posts: {post_failures}")

        if subtree_failures > 0:
            self.console.print(f"  [yellow]⚠[/yellow] Unresolved subtrees: {subtree_failures}")

        if images_downloaded > 0:
            self.console.print(f"  [blue]↓[/blue] Images: {images_downloaded} downloaded")

        if images_skipped > 0:
            self.console.print(f"  [yellow]⚠[/yellow] Images skipped: {images_skipped}")

        if posts == 0:
            self.console.print("\n[yellow]No published posts found[/yellow]")
        elif post_failures or subtree_failures or images_skipped:
            self.console.print("\n[yellow]Sync completed with failures[/yellow]")
        else:
            self.console.print("\n[green]Sync completed successfully[/green]")
