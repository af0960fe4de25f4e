"""
Output - Console output formatting.

Provides the run summary printed after a sync, with optional colors.
"""

import sys
from typing import Optional

from ..application.sync import SyncResult


class Colors:
    """ANSI color codes."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"

    BG_YELLOW = "\033[43m"


class Symbols:
    """Unicode symbols for output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO = "ℹ"
    GEAR = "⚙"

    BOX_H = "─"


class Console:
    """Console output helper with colors and formatting."""

    MAX_LISTED = 5

    def __init__(self, color: bool = True, verbose: bool = False):
        self.color = color and sys.stdout.isatty()
        self.verbose = verbose

    def _c(self, text: str, *codes: str) -> str:
        """Apply color codes to text."""
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "") -> None:
        print(text)

    def header(self, text: str) -> None:
        width = max(len(text) + 4, 50)
        border = self._c(Symbols.BOX_H * width, Colors.CYAN) if self.color else "-" * width

        self.print()
        self.print(border)
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(border)
        self.print()

    def section(self, text: str) -> None:
        self.print()
        self.print(self._c(f"{Symbols.ARROW} {text}", Colors.BOLD, Colors.BLUE))

    def success(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED))

    def warning(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def info(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.INFO} {text}", Colors.CYAN))

    def detail(self, text: str) -> None:
        """Print detail text (dimmed)."""
        self.print(self._c(f"    {text}", Colors.DIM))

    def item(self, text: str, status: Optional[str] = None) -> None:
        """Print a list item."""
        status_str = ""
        if status == "ok":
            status_str = self._c(f" [{Symbols.CHECK}]", Colors.GREEN)
        elif status == "skip":
            status_str = self._c(" [SKIP]", Colors.YELLOW)
        elif status == "fail":
            status_str = self._c(f" [{Symbols.CROSS}]", Colors.RED)
        elif status:
            status_str = self._c(f" [{status}]", Colors.DIM)

        self.print(f"    {Symbols.DOT} {text}{status_str}")

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Print a simple table."""
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        self.print("  " + "  ".join(
            self._c(h.ljust(widths[i]), Colors.BOLD) for i, h in enumerate(headers)
        ))
        self.print("  " + "  ".join("-" * w for w in widths))

        for row in rows:
            self.print("  " + "  ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            ))

    def dry_run_banner(self) -> None:
        self.print()
        banner = f"  {Symbols.GEAR} FAKE MODE - Nothing will be posted and the checkpoint stays put"
        if self.color:
            self.print(f"{Colors.BG_YELLOW}{Colors.BOLD}{banner}{Colors.RESET}")
        else:
            self.print(f"*** {banner} ***")
        self.print()

    def config_errors(self, errors: list[str]) -> None:
        """Print configuration problems."""
        self.error("Configuration errors:")
        for error in errors:
            self.detail(error)

    def _listing(self, messages: list[str]) -> None:
        for message in messages[: self.MAX_LISTED]:
            self.detail(message)
        if len(messages) > self.MAX_LISTED:
            self.detail(f"... and {len(messages) - self.MAX_LISTED} more")

    def run_report(self, result: SyncResult) -> None:
        """Print the summary of a sync run."""
        self.section("Sync Summary")
        self.print()

        if result.dry_run:
            self.info("Mode: FAKE (nothing posted)")
        elif result.explicit:
            self.info("Mode: EXPLICIT CHANGE LIST (checkpoint untouched)")
        else:
            self.info("Mode: LIVE EXECUTION")

        self.print()

        stats = [
            ["Changes Processed", str(len(result.changes_processed))],
            ["Changes Skipped", str(len(result.changes_skipped))],
            ["Comments Added", str(result.comments_added)],
            ["Attachments Added", str(result.attachments_added)],
        ]
        if not result.explicit:
            stats.append(["Checkpoint", "-" if result.checkpoint is None else str(result.checkpoint)])

        self.table(["Metric", "Value"], stats)

        if self.verbose and result.deliveries:
            self.print()
            for change_id, report in result.deliveries.items():
                for key, delivery in report.results.items():
                    self.item(f"{change_id} {Symbols.ARROW} {key}", "ok" if delivery.success else "fail")

        if result.warnings:
            self.print()
            self.warning(f"{len(result.warnings)} warning(s):")
            self._listing(result.warnings)

        if result.errors:
            self.print()
            self.error(f"{len(result.errors)} error(s):")
            self._listing(result.errors)

        self.print()
        if result.success:
            self.success("Sync completed successfully!")
        else:
            self.error("Sync completed with errors")
