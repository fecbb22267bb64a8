"""Console output helpers.

Consistent formatting for build progress, the final summary, and
errors with "Why" and "How to fix" sections.
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from freezeforge.core.platform import PlatformTag
from freezeforge.pipeline.pipeline import BuildReporter
from freezeforge.pipeline.result import PipelineResult

_console: Console | None = None
_err_console: Console | None = None

_verbose_mode: bool = False


def get_console() -> Console:
    """Get shared stdout console (lazy-loaded)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_err_console() -> Console:
    """Get shared stderr console (lazy-loaded)."""
    global _err_console
    if _err_console is None:
        _err_console = Console(stderr=True)
    return _err_console


def set_verbose_mode(enabled: bool) -> None:
    """Show full tracebacks in error output when enabled."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


def _plain(console: Console, message: str, style: Optional[str] = None) -> None:
    """Print without markup parsing or wrapping (paths must stay copy-pasteable)."""
    console.print(message, style=style, markup=False, highlight=False, soft_wrap=True)


def info(message: str) -> None:
    """Stage banner line, e.g. ">>> Installing dependencies"."""
    _plain(get_console(), f">>> {message}", "cyan")


def ok(message: str) -> None:
    _plain(get_console(), message, "green")


def err(message: str) -> None:
    _plain(get_err_console(), f"ERROR: {message}", "red")


def detail(message: str) -> None:
    _plain(get_console(), message)


class ConsoleReporter(BuildReporter):
    """Prints pipeline progress the way an operator expects to read it."""

    def banner(self, app_name: str, platform_tag: PlatformTag) -> None:
        detail("")
        info(f"=== {app_name} {platform_tag.os_tag} builder ===")
        detail("")

    def environment(
        self,
        python_version: Optional[str],
        platform_tag: PlatformTag,
        repo_root: Path,
    ) -> None:
        detail(f"Python:       {python_version or 'unknown'}")
        detail(f"Platform:     {platform_tag}")
        detail(f"Repo root:    {repo_root}")

    def stage(self, message: str) -> None:
        info(message)

    def detail(self, message: str) -> None:
        detail(message)


def print_build_result(result: PipelineResult) -> None:
    """Print the final success summary or error panel."""
    detail("")
    if result.success:
        ok("Build successful!")
        detail(f"  Output: {result.output_path}")
        detail(f"  Size:   {result.size_human}")
        detail("")
        detail("Quick verification:")
        detail(f"  {result.verify_command}")
        detail("")
        return

    if result.error is not None:
        ErrorRenderer.render(result.error)


class ErrorRenderer:
    """Renders errors as a panel with "Why" and "How to fix" sections.

    Example
    -------
        # +------ Error: FF-SPEC-001 ------+
        # | Spec file not found at ...     |
        # |                                |
        # | Why it happened:               |
        # |   PyInstaller needs a .spec... |
        # |                                |
        # | How to fix:                    |
        # |   - Ensure bridge/wizclaw.spec |
        # +--------------------------------+
    """

    @staticmethod
    def render(
        exc: BaseException,
        context: str = "",
        show_traceback: Optional[bool] = None,
    ) -> None:
        """Render an exception to stderr.

        Args:
            exc: Exception to render
            context: Optional context line (e.g., "While tagging the artifact")
            show_traceback: Override for verbose mode (None = use global setting)
        """
        console = get_err_console()
        error_code = getattr(exc, "error_code", "FF-ERR-999")
        why = getattr(exc, "why_it_happened", "An unexpected error occurred")
        how_to_fix = getattr(exc, "how_to_fix", ["Rerun with --verbose for details"])

        err(str(exc))
        content = ErrorRenderer._build_error_content(
            message=str(exc), context=context, why=why, how_to_fix=how_to_fix
        )
        console.print(
            Panel(
                content,
                title=f"[bold red]Error: {error_code}[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )

        should_show_traceback = (
            show_traceback if show_traceback is not None else is_verbose_mode()
        )
        if should_show_traceback and exc.__traceback__ is not None:
            ErrorRenderer._render_traceback(exc)

    @staticmethod
    def _build_error_content(
        message: str,
        context: str,
        why: str,
        how_to_fix: List[str],
    ) -> Text:
        text = Text()

        if context:
            text.append(f"{context}\n\n", style="dim")

        text.append(message, style="bold red")
        text.append("\n\n")

        text.append("Why it happened:\n", style="bold cyan")
        text.append(f"  {why}\n\n", style="cyan")

        text.append("How to fix:\n", style="bold green")
        for fix in how_to_fix:
            text.append(f"  - {fix}\n", style="green")

        return text

    @staticmethod
    def _render_traceback(exc: BaseException) -> None:
        console = get_err_console()
        console.print()
        console.print("[dim]--- Traceback (--verbose mode) ---[/dim]")
        tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
        tb_text = "".join(tb_lines)
        _plain(console, tb_text, "dim")
