"""Use Case: Lint files and directories."""

import logging
from typing import TYPE_CHECKING

from ruby_structure_linter.domain.entities import FileReport
from ruby_structure_linter.domain.errors import SourceParseError
from ruby_structure_linter.domain.path_patterns import PathPattern
from ruby_structure_linter.domain.protocols import (
    FileSystemProtocol,
    RubyParserProtocol,
    TelemetryPort,
)

if TYPE_CHECKING:
    from ruby_structure_linter.domain.config import ConfigurationLoader
    from ruby_structure_linter.use_cases.analyze_source import AnalyzeSourceUseCase

logger = logging.getLogger(__name__)


class LintPathsUseCase:
    """Expand targets to Ruby files, parse and analyse each one independently."""

    def __init__(
        self,
        parser: RubyParserProtocol,
        filesystem: FileSystemProtocol,
        analyzer: "AnalyzeSourceUseCase",
        config_loader: "ConfigurationLoader",
        telemetry: TelemetryPort,
    ) -> None:
        self.parser = parser
        self.filesystem = filesystem
        self.analyzer = analyzer
        self.config_loader = config_loader
        self.telemetry = telemetry

    def collect_files(self, paths: list[str]) -> list[str]:
        """Relative paths of every Ruby file under `paths`, deduplicated, excludes applied."""
        seen: set[str] = set()
        files: list[str] = []
        outside = 0
        for target in paths:
            if self.filesystem.is_directory(target):
                candidates = self.filesystem.glob_ruby_files(target)
            else:
                candidates = [target]
            for candidate in candidates:
                relative = self.filesystem.relative_path(candidate)
                if relative in seen:
                    continue
                seen.add(relative)
                if PathPattern.any_match(relative, self.config_loader.exclude):
                    logger.debug("excluded %s", relative)
                    continue
                if PathPattern.is_outside_root(relative):
                    outside += 1
                files.append(relative)
        if outside and (self.config_loader.restrictions or self.config_loader.exclude):
            self.telemetry.warning(
                f"{outside} file(s) lie outside the working directory; "
                "allowed_call_sites and exclude globs will not match them"
            )
        return files

    def lint_file(self, path: str) -> FileReport:
        """Analyse one file; read and parse failures become the report's error."""
        try:
            source = self.filesystem.read_bytes(path)
            tree = self.parser.parse(source, path)
        except (OSError, SourceParseError) as e:
            self.telemetry.error(f"Could not analyse {path}: {e}")
            return FileReport(path=path, error=str(e))
        findings = self.analyzer.analyze(tree, path)
        return FileReport(path=path, findings=tuple(findings), source=source)

    def execute(self, paths: list[str]) -> list[FileReport]:
        files = self.collect_files(paths)
        self.telemetry.step(f"Analysing {len(files)} Ruby file(s)")
        reports = [self.lint_file(path) for path in files]
        total = sum(len(report.findings) for report in reports)
        failed = sum(1 for report in reports if report.error)
        self.telemetry.step(f"Found {total} offense(s) in {len(reports)} file(s)")
        if failed:
            self.telemetry.warning(f"{failed} file(s) could not be analysed")
        return reports
