"""Use Case: Apply Fixes to Source Code."""

import logging
from typing import TYPE_CHECKING

from ruby_structure_linter.domain.entities import Edit, FileReport
from ruby_structure_linter.domain.protocols import FixerGatewayProtocol, TelemetryPort

if TYPE_CHECKING:
    from ruby_structure_linter.use_cases.lint_paths import LintPathsUseCase

logger = logging.getLogger(__name__)


class ApplyFixesUseCase:
    """
    Apply auto-fix edits until the files stop changing.

    A finding's edits are applied all-or-nothing. Within one pass a finding
    whose edits overlap an already accepted edit is deferred; the next pass
    re-lints the rewritten file and picks it up.
    """

    def __init__(
        self,
        lint_use_case: "LintPathsUseCase",
        fixer_gateway: FixerGatewayProtocol,
        telemetry: TelemetryPort,
        create_backups: bool = True,
        max_passes: int = 5,
    ) -> None:
        self.lint_use_case = lint_use_case
        self.fixer_gateway = fixer_gateway
        self.telemetry = telemetry
        self.create_backups = create_backups
        self.max_passes = max_passes

    @staticmethod
    def select_edits(report: FileReport) -> list[Edit]:
        """Edits of every fixable finding that does not overlap an earlier accepted one."""
        accepted: list[Edit] = []
        for finding in report.findings:
            if not finding.fixable:
                continue
            clashes = any(
                edit.span.overlaps(taken.span) for edit in finding.edits for taken in accepted
            )
            if clashes:
                logger.debug("deferring overlapping fix at %s", finding.location)
                continue
            accepted.extend(finding.edits)
        return accepted

    def execute(self, paths: list[str]) -> int:
        """Fix all files under `paths`. Returns the number of files modified."""
        self.telemetry.step(f"🔧 Starting Fix Logic on {', '.join(paths)}")
        modified: set[str] = set()
        for pass_number in range(1, self.max_passes + 1):
            changed_this_pass = 0
            for report in self.lint_use_case.execute(paths):
                if report.error:
                    continue
                edits = self.select_edits(report)
                if not edits:
                    continue
                backup = self.create_backups and report.path not in modified
                try:
                    changed = self.fixer_gateway.apply_edits(report.path, edits, backup)
                except (OSError, ValueError) as e:
                    self.telemetry.error(f"Could not fix {report.path}: {e}")
                    continue
                if changed:
                    changed_this_pass += 1
                    modified.add(report.path)
            logger.debug("fix pass %d changed %d file(s)", pass_number, changed_this_pass)
            if not changed_this_pass:
                break
        self.telemetry.step(f"🛠️ Fix Suite complete. Files repaired: {len(modified)}")
        return len(modified)
