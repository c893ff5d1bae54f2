"""Use Case: Analyze one parsed source file."""

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Optional

from ruby_structure_linter.domain.entities import Finding
from ruby_structure_linter.domain.rules import BaseRule, RuleContext
from ruby_structure_linter.domain.rules.call_sites import AliasTable, CallSiteRule
from ruby_structure_linter.domain.rules.class_structure import ClassStructureRule
from ruby_structure_linter.domain.rules.negation import NoUnlessRule
from ruby_structure_linter.domain.rules.predicates import (
    ForbidInstanceVariableGetSetRule,
    PreferDateCurrentRule,
    SidekiqKeywordArgumentsRule,
)
from ruby_structure_linter.domain.syntax import NodeKind, SyntaxNode

if TYPE_CHECKING:
    from ruby_structure_linter.domain.config import ConfigurationLoader

logger = logging.getLogger(__name__)


class AnalyzeSourceUseCase:
    """
    Single traversal driver.

    Walks the tree once in source order and hands each node to the enabled
    rules registered for its kind. Per-file state (the alias table) is created
    fresh on every call, so one instance can analyse any number of files.
    """

    def __init__(
        self,
        config_loader: "ConfigurationLoader",
        rules: Optional[list[BaseRule]] = None,
    ) -> None:
        self.config_loader = config_loader
        self.rules = rules if rules is not None else AnalyzeSourceUseCase.default_rules()
        self._dispatch: dict[NodeKind, list[BaseRule]] = defaultdict(list)
        for rule in self.rules:
            if not config_loader.is_rule_enabled(rule.code):
                logger.debug("rule %s disabled by configuration", rule.code)
                continue
            for kind in rule.node_kinds:
                self._dispatch[kind].append(rule)

    @staticmethod
    def default_rules() -> list[BaseRule]:
        return [
            ClassStructureRule(),
            CallSiteRule(),
            NoUnlessRule(),
            ForbidInstanceVariableGetSetRule(),
            PreferDateCurrentRule(),
            SidekiqKeywordArgumentsRule(),
        ]

    def analyze(self, tree: SyntaxNode, path: str) -> list[Finding]:
        """Return findings for one file, ordered by position in the source."""
        context = RuleContext(path=path, config=self.config_loader, aliases=AliasTable())
        findings: list[Finding] = []
        for node in tree.walk():
            for rule in self._dispatch.get(node.kind, ()):
                findings.extend(rule.check(node, context))
        findings.sort(key=lambda finding: finding.node.span.start)
        logger.debug("%s: %d finding(s), %d alias(es)", path, len(findings), len(context.aliases))
        return findings
