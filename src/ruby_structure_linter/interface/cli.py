"""CLI entry points for ruby-structure-lint - Thin Controller using Typer."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from ruby_structure_linter.domain.config import DEFAULT_EXPECTED_ORDER, ConfigurationLoader
from ruby_structure_linter.domain.constants import LINTER_BANNER, TOOL_NAME
from ruby_structure_linter.domain.entities import Category
from ruby_structure_linter.domain.errors import ConfigurationError
from ruby_structure_linter.domain.protocols import (
    ConfigurationProviderProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    RubyParserProtocol,
    TelemetryPort,
)
from ruby_structure_linter.interface.reporters import ReporterFactory
from ruby_structure_linter.use_cases.analyze_source import AnalyzeSourceUseCase
from ruby_structure_linter.use_cases.apply_fixes import ApplyFixesUseCase
from ruby_structure_linter.use_cases.lint_paths import LintPathsUseCase

EXIT_CLEAN = 0
EXIT_OFFENSES = 1
EXIT_CONFIG_ERROR = 2


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_provider: ConfigurationProviderProtocol
    telemetry: TelemetryPort
    parser: RubyParserProtocol
    filesystem: FileSystemProtocol
    fixer_gateway: FixerGatewayProtocol


class CLIAppFactory:
    """Creates the Typer app. No top-level functions (W9018)."""

    @staticmethod
    def resolve_targets(paths: Optional[list[Path]]) -> list[str]:
        """Explicit paths, else the current directory."""
        if not paths:
            return ["."]
        return [str(p) for p in paths]

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            force=True,
        )

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name=TOOL_NAME,
            help="Structural lint for Ruby: declaration order, restricted call sites, `unless`. "
            "Run 'ruby-structure-lint check' to audit; 'ruby-structure-lint fix' to apply rewrites.",
            add_completion=False,
        )

        def _session_start() -> None:
            """Print banner then handshake. Use at start of each command so banner renders correctly (not in --help)."""
            print(LINTER_BANNER, file=sys.stderr)
            deps.telemetry.handshake()

        def _load_config(config: Optional[Path], rules: Optional[list[str]] = None) -> ConfigurationLoader:
            try:
                loader = deps.config_provider.load(config)
                if rules:
                    loader = loader.with_only_rules(rules)
            except ConfigurationError as e:
                deps.telemetry.error(f"Configuration error: {e}")
                sys.exit(EXIT_CONFIG_ERROR)
            deps.telemetry.debug(f"configuration loaded from {loader.source}")
            return loader

        def _lint_use_case(config_loader: ConfigurationLoader) -> LintPathsUseCase:
            return LintPathsUseCase(
                parser=deps.parser,
                filesystem=deps.filesystem,
                analyzer=AnalyzeSourceUseCase(config_loader),
                config_loader=config_loader,
                telemetry=deps.telemetry,
            )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
        ) -> None:
            CLIAppFactory.configure_logging(verbose)

        @app.command()
        def check(
            paths: Optional[list[Path]] = typer.Argument(  # noqa: B008
                None,
                help="Files or directories to lint (default: .); "
                "configured globs match paths relative to the working directory",
            ),
            config: Optional[Path] = typer.Option(None, "--config", "-c", help="Explicit YAML/TOML configuration file"),  # noqa: B008
            output_format: str = typer.Option("table", "--format", "-f", help="Output format: table or json"),
            rule: Optional[list[str]] = typer.Option(None, "--rule", "-r", help="Only run this rule (repeatable)"),  # noqa: B008
        ) -> None:
            """Lint Ruby files and report offenses. Exits 1 when any offense is found."""
            _session_start()
            if output_format not in ReporterFactory.FORMATS:
                deps.telemetry.error(
                    f"Unknown format '{output_format}' (choose from {', '.join(ReporterFactory.FORMATS)})"
                )
                sys.exit(EXIT_CONFIG_ERROR)
            config_loader = _load_config(config, rule)
            reports = _lint_use_case(config_loader).execute(CLIAppFactory.resolve_targets(paths))
            ReporterFactory.create(output_format).report(reports)
            if any(report.findings or report.error for report in reports):
                sys.exit(EXIT_OFFENSES)
            sys.exit(EXIT_CLEAN)

        @app.command()
        def fix(
            paths: Optional[list[Path]] = typer.Argument(  # noqa: B008
                None,
                help="Files or directories to fix (default: .); "
                "configured globs match paths relative to the working directory",
            ),
            config: Optional[Path] = typer.Option(None, "--config", "-c", help="Explicit YAML/TOML configuration file"),  # noqa: B008
            no_backup: bool = typer.Option(False, "--no-backup", help="Skip creating .bak backup files"),
        ) -> None:
            """Apply the auto-fixes (`unless` rewrite, `Date.current`), then report what is left."""
            _session_start()
            config_loader = _load_config(config)
            lint_use_case = _lint_use_case(config_loader)
            targets = CLIAppFactory.resolve_targets(paths)
            use_case = ApplyFixesUseCase(
                lint_use_case=lint_use_case,
                fixer_gateway=deps.fixer_gateway,
                telemetry=deps.telemetry,
                create_backups=not no_backup,
            )
            use_case.execute(targets)
            remaining = lint_use_case.execute(targets)
            ReporterFactory.create("table").report(remaining)
            if any(report.findings or report.error for report in remaining):
                sys.exit(EXIT_OFFENSES)
            sys.exit(EXIT_CLEAN)

        @app.command()
        def categories(
            config: Optional[Path] = typer.Option(None, "--config", "-c", help="Explicit YAML/TOML configuration file"),  # noqa: B008
        ) -> None:
            """List the declaration categories and the effective expected order."""
            config_loader = _load_config(config)
            default = set(DEFAULT_EXPECTED_ORDER)
            print("Categories:")
            for category in Category:
                marker = "" if category in default else "  (not in the default order)"
                print(f"  {category.label}{marker}")
            print("Expected order:")
            for position, category in enumerate(config_loader.expected_order, start=1):
                print(f"  {position}. {category.label}")

        @app.command()
        def explain(code: str = typer.Argument(..., help="Rule code, e.g. no-unless")) -> None:
            """Describe one rule."""
            for rule in AnalyzeSourceUseCase.default_rules():
                if rule.code == code:
                    print(f"{rule.code}: {rule.description}")
                    print(f"Fix: {'automatic' if rule.fix_type == 'code' else 'manual'}")
                    return
            known = ", ".join(sorted(r.code for r in AnalyzeSourceUseCase.default_rules()))
            deps.telemetry.error(f"Unknown rule '{code}'. Known rules: {known}")
            sys.exit(EXIT_CONFIG_ERROR)

        return app
