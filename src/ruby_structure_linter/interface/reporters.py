"""Terminal and JSON reporters for lint results."""

import json
from typing import Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ruby_structure_linter.domain.entities import FileReport, Severity

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CONVENTION: "#00EEFF",
    Severity.WARNING: "yellow",
    Severity.ERROR: "bold red",
}


class LintReporter(Protocol):
    """Renders the reports of one run."""

    def report(self, reports: list[FileReport]) -> None: ...


class TableReporter:
    """Rich table grouped in source order: location, rule, severity, message."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def report(self, reports: list[FileReport]) -> None:
        findings = [finding for report in reports for finding in report.findings]
        errors = [report for report in reports if report.error]
        if findings:
            table = Table(title="Ruby Structure Lint", header_style="bold #007BFF")
            table.add_column("Location", style="#00EEFF", no_wrap=True)
            table.add_column("Rule")
            table.add_column("Severity")
            table.add_column("Message")
            table.add_column("Fix", justify="center")
            for finding in findings:
                table.add_row(
                    escape(finding.location),
                    finding.code,
                    f"[{SEVERITY_STYLES[finding.severity]}]{finding.severity.value}[/]",
                    escape(finding.message),
                    "✓" if finding.fixable else "",
                )
            self.console.print(table)
        for report in errors:
            self.console.print(f"{report.path}: {report.error}", style="bold red", highlight=False)
        fixable = sum(1 for finding in findings if finding.fixable)
        summary = f"{len(reports)} file(s) inspected, {len(findings)} offense(s) detected"
        if fixable:
            summary += f", {fixable} auto-correctable"
        self.console.print(summary, style="bold" if findings else "green")


class JsonReporter:
    """One JSON document with every file report."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    @staticmethod
    def render(reports: list[FileReport]) -> str:
        return json.dumps(
            {
                "files": [report.to_dict() for report in reports],
                "summary": {
                    "inspected_file_count": len(reports),
                    "offense_count": sum(len(report.findings) for report in reports),
                },
            },
            indent=2,
        )

    def report(self, reports: list[FileReport]) -> None:
        self.console.print(self.render(reports), markup=False, highlight=False, soft_wrap=True)


class ReporterFactory:
    """Picks a reporter by output format. No top-level functions (W9018)."""

    FORMATS: tuple[str, ...] = ("table", "json")

    @staticmethod
    def create(output_format: str, console: Optional[Console] = None) -> LintReporter:
        if output_format == "json":
            return JsonReporter(console)
        if output_format == "table":
            return TableReporter(console)
        raise ValueError(
            f"Unknown format '{output_format}' (choose from {', '.join(ReporterFactory.FORMATS)})"
        )
