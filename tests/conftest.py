from collections import defaultdict

import pytest
from rich.console import Console
from rich.table import Table

from sw_select.models import Option, OptionGroup

# Registered in pyproject.toml
KNOWN_MARKERS = {"unit_common", "unit_select", "unit_ui"}


@pytest.fixture
def grouped_options() -> list:
    """Top-level options at 0, 1, 3 and groups at 2, 4, 5."""
    return [
        Option(name="Option 1", value="option-1"),
        Option(name="Option 2", value="option-2"),
        OptionGroup(
            label="Group 1",
            options=[
                Option(name="Option 3", value="option-3"),
                Option(name="Option 4", value="option-4"),
                Option(name="Option 5", value="option-5"),
            ],
        ),
        Option(name="Option 6", value="option-6"),
        OptionGroup(
            label="Group 2",
            options=[
                Option(name="Option 7", value="option-7"),
                Option(name="Option 8", value="option-8"),
                Option(name="Option 9", value="option-9"),
            ],
        ),
        OptionGroup(label="Group 3", options=[Option(name="Option last", value="option-last")]),
    ]


@pytest.fixture
def flat_options() -> list:
    return [
        Option(name="Option 1", value="option-1"),
        Option(name="Option 2", value="option-2"),
        Option(name="Option 3", value="option-3"),
    ]


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """
    Print statistics by marker at the end of the test session.
    """
    _ = (exitstatus, config)
    marker_stats = defaultdict(lambda: {"passed": 0, "failed": 0, "skipped": 0, "total": 0, "duration": 0.0})

    for outcome in ["passed", "failed", "skipped"]:
        for report in terminalreporter.stats.get(outcome, []):
            # Only count the actual test call, or setup skips
            if report.when == "call" or (report.when == "setup" and report.outcome == "skipped"):
                duration = getattr(report, "duration", 0.0)
                for marker in KNOWN_MARKERS:
                    if marker in report.keywords:
                        stats = marker_stats[marker]
                        stats[outcome] += 1
                        stats["total"] += 1
                        stats["duration"] += duration

    if not marker_stats:
        return

    table = Table(title="Test Statistics by Marker", show_header=True, header_style="bold magenta")
    table.add_column("Marker", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Duration (s)", justify="right", style="blue")

    for marker in sorted(marker_stats):
        stats = marker_stats[marker]
        if stats["total"] > 0:
            table.add_row(
                marker,
                str(stats["total"]),
                str(stats["passed"]),
                str(stats["failed"]),
                str(stats["skipped"]),
                f"{stats['duration']:.2f}",
            )

    console = Console()
    console.print("\n")
    console.print(table)
