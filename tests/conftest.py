"""Pytest configuration and shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts `src`
and the project root on sys.path so `tests.node_factory` imports cleanly.
"""

import textwrap
from typing import Callable, Optional
from unittest.mock import MagicMock

import pytest

from ruby_structure_linter.domain.config import ConfigurationLoader
from ruby_structure_linter.domain.entities import Finding, TextEdits
from ruby_structure_linter.infrastructure.gateways.ruby_parser_gateway import RubyParserGateway
from ruby_structure_linter.use_cases.analyze_source import AnalyzeSourceUseCase


def lint_paths_required_deps(**overrides: object) -> dict[str, object]:
    """Return required dependency mocks for LintPathsUseCase. Pass overrides to customize."""
    base = {
        "parser": MagicMock(),
        "filesystem": MagicMock(),
        "analyzer": MagicMock(),
        "config_loader": ConfigurationLoader(),
        "telemetry": MagicMock(),
    }
    base.update(overrides)
    return base


@pytest.fixture(scope="session")
def ruby_parser() -> RubyParserGateway:
    return RubyParserGateway()


@pytest.fixture
def analyze_ruby(ruby_parser: RubyParserGateway) -> Callable[..., list[Finding]]:
    """Parse dedented Ruby source and run every enabled rule over it."""

    def _analyze(
        source: str,
        path: str = "app/models/example.rb",
        config: Optional[dict[str, object]] = None,
        only: Optional[list[str]] = None,
    ) -> list[Finding]:
        loader = ConfigurationLoader(config or {})
        if only:
            loader = loader.with_only_rules(only)
        tree = ruby_parser.parse(textwrap.dedent(source).encode("utf-8"), path)
        return AnalyzeSourceUseCase(loader).analyze(tree, path)

    return _analyze


@pytest.fixture
def autocorrect(analyze_ruby: Callable[..., list[Finding]]) -> Callable[..., str]:
    """Apply the edits of every finding of the given rules to the dedented source."""

    def _autocorrect(source: str, only: list[str]) -> str:
        text = textwrap.dedent(source)
        findings = analyze_ruby(text, only=only)
        edits = [edit for finding in findings for edit in finding.edits]
        return TextEdits.apply(text, edits)

    return _autocorrect
