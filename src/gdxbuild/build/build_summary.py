"""Rich-based end-of-run summary.

Renders one row per built cell:

    linux-debug-aarch64   bin/GameDriver/linux-aarch64/debug   GameDriver.so, SwiftGodot.so   libFoundation.so, ...

followed by a footer with the skipped cells, the manifest path and the total
build time.
"""

from pathlib import Path
from typing import Optional

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .orchestrator import BuildReport


def _relative(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return str(path)


def _format_libraries(names: list) -> Text:
    if not names:
        return Text("-", style="dim")
    return Text(", ".join(names))


def render_table(report: BuildReport, root: Optional[Path] = None) -> Table:
    """Build the Rich Table listing every built cell.

    Args:
        report: Result of BuildOrchestrator.build_all()
        root: Paths are shown relative to this directory when possible
    """
    table = Table(
        title="Build summary",
        show_header=True,
        show_edge=False,
        show_lines=False,
        box=None,
        padding=(0, 1),
        expand=False,
    )

    table.add_column("Target", style="bold", no_wrap=True)
    table.add_column("Destination", no_wrap=True)
    table.add_column("Libraries")
    table.add_column("Runtime libraries")

    for cell in report.cells:
        table.add_row(
            Text(str(cell.target)),
            Text(_relative(cell.destination, root), style="cyan"),
            _format_libraries(cell.libraries),
            _format_libraries(cell.runtime_libraries),
        )
    return table


def render_footer(report: BuildReport, manifest_path: Optional[Path] = None, root: Optional[Path] = None) -> Text:
    """Footer text: counts, skipped cells, manifest path and build time."""
    footer = Text()
    footer.append(f"{len(report.cells)} built", style="green")
    if report.skipped:
        footer.append(f", {len(report.skipped)} skipped ({', '.join(report.skipped)})", style="yellow")
    footer.append(f" in {report.build_time:.2f}s")
    if manifest_path is not None:
        footer.append("\nManifest: ")
        footer.append(_relative(manifest_path, root), style="bold")
    return footer


def print_build_summary(
    report: BuildReport,
    manifest_path: Optional[Path] = None,
    root: Optional[Path] = None,
    console: Optional[Console] = None,
) -> None:
    """Print the summary table and footer.

    Args:
        report: Result of the matrix build
        manifest_path: Path of the written manifest, if any
        root: Directory paths are shown relative to
        console: Rich Console to print to. If None, creates a new one.
    """
    console = console if console is not None else Console()
    console.print()
    console.print(Group(render_table(report, root), Text(""), render_footer(report, manifest_path, root)))
