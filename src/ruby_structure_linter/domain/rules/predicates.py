"""Single-predicate rules: one node shape, one message."""

from ruby_structure_linter.domain.constants import (
    FORBID_INSTANCE_VARIABLE_GET_SET,
    PREFER_DATE_CURRENT,
    SIDEKIQ_KEYWORD_ARGUMENTS,
)
from ruby_structure_linter.domain.entities import Edit, Finding, Severity
from ruby_structure_linter.domain.rules import RuleContext
from ruby_structure_linter.domain.syntax import NodeKind, SyntaxNode


class ForbidInstanceVariableGetSetRule:
    """Rule for forbid-instance-variable-get-set: reflection bypasses encapsulation."""

    code: str = FORBID_INSTANCE_VARIABLE_GET_SET
    message: str = (
        "Avoid using `instance_variable_get` or `instance_variable_set`. "
        "Prefer using public getters/setters."
    )
    description: str = (
        "Forbid instance_variable_get/set: use public getters and setters instead."
    )
    fix_type: str = "manual"
    node_kinds: frozenset[NodeKind] = frozenset({NodeKind.SEND})
    FORBIDDEN_METHODS: frozenset[str] = frozenset(
        {"instance_variable_get", "instance_variable_set"}
    )

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        if node.method_name not in self.FORBIDDEN_METHODS:
            return []
        return [Finding(self.code, self.message, node, Severity.CONVENTION, context.path)]


class PreferDateCurrentRule:
    """
    Rule for prefer-date-current: `Time.zone.today` is spelled `Date.current`.

    Auto-fix: replaces the whole call.
    """

    code: str = PREFER_DATE_CURRENT
    message: str = "Use `Date.current` instead of `Time.zone.today`."
    description: str = (
        "Prefer Date.current: shorter and more meaningful than Time.zone.today. "
        "Auto-fix: rewrites the call."
    )
    fix_type: str = "code"
    node_kinds: frozenset[NodeKind] = frozenset({NodeKind.SEND})
    REPLACEMENT: str = "Date.current"

    @staticmethod
    def is_time_zone_today(node: SyntaxNode) -> bool:
        """`Time.zone.today` or `::Time.zone.today`, with any arguments."""
        if node.method_name != "today":
            return False
        zone = node.receiver
        if zone is None or zone.kind is not NodeKind.SEND or zone.method_name != "zone":
            return False
        time = zone.receiver
        return (
            time is not None
            and time.kind is NodeKind.CONSTANT
            and time.name == "Time"
            and time.scope is None
        )

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        if not self.is_time_zone_today(node):
            return []
        return [
            Finding(
                self.code,
                self.message,
                node,
                Severity.CONVENTION,
                context.path,
                edits=(Edit(node.span, self.REPLACEMENT),),
            )
        ]


class SidekiqKeywordArgumentsRule:
    """
    Rule for sidekiq-keyword-arguments: worker `perform` must take positional arguments.

    Job arguments go through a JSON round trip; keyword arguments do not survive it.
    """

    code: str = SIDEKIQ_KEYWORD_ARGUMENTS
    message: str = "Don't use keyword arguments in workers"
    description: str = "Sidekiq workers: `def perform` must not declare keyword arguments."
    fix_type: str = "manual"
    node_kinds: frozenset[NodeKind] = frozenset({NodeKind.METHOD_DEFINITION})
    OBSERVED_METHOD: str = "perform"

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        if node.name != self.OBSERVED_METHOD:
            return []
        if not any(arg.kind is NodeKind.KEYWORD_PARAMETER for arg in node.arguments):
            return []
        return [Finding(self.code, self.message, node, Severity.ERROR, context.path)]
