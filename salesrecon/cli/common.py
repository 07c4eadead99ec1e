"""Shared helpers for CLI commands."""

import sys
from collections.abc import Sequence

from salesrecon.runtime import get_logger

logger = get_logger(__name__)


def print_error(error: str) -> None:
    for line in error.splitlines():
        print(line)


def ask_yes_no(prompt: str) -> bool:
    """Ask a [y/N] question; a non-interactive stdin always answers no."""
    if not sys.stdin.isatty():
        logger.warning("Cannot prompt without a terminal: %s", prompt)
        return False
    print(f"{prompt} [y/N] ", end="")
    response = input().strip().lower()
    return response == "y"


def confirm_warnings(warnings: Sequence[str]) -> bool:
    """Show advisory warnings and ask whether to continue with the write."""
    print("Warnings:")
    for message in warnings:
        print(f"  ! {message}")
    return ask_yes_no("Continue with the import?")


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render rows as a plain left-aligned text table."""
    widths = [len(header) for header in headers]
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    def render(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(widths[index]) for index, cell in enumerate(cells)).rstrip()

    lines = [render(headers), render(["-" * width for width in widths])]
    lines.extend(render(row) for row in rows)
    return "\n".join(lines)
