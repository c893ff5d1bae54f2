"""No Unless Rule - rewrite `unless cond` into `if <inverted cond>`."""

from dataclasses import dataclass

from ruby_structure_linter.domain.constants import NO_UNLESS
from ruby_structure_linter.domain.entities import Edit, Finding, Severity
from ruby_structure_linter.domain.errors import RewriteNotApplicableError
from ruby_structure_linter.domain.rules import RuleContext
from ruby_structure_linter.domain.syntax import SEND_KINDS, NodeKind, Span, SyntaxNode

DUAL_OPERATORS: dict[str, str] = {"&&": "||", "||": "&&", "and": "or", "or": "and"}
INVERSE_COMPARISONS: dict[str, str] = {
    "==": "!=",
    "!=": "==",
    "<": ">=",
    ">=": "<",
    ">": "<=",
    "<=": ">",
}
_BOOLEAN_KINDS: frozenset[NodeKind] = frozenset({NodeKind.BOOLEAN_AND, NodeKind.BOOLEAN_OR})
# Operands a plain `!` prefix negates as a whole; anything else is wrapped.
_ATOMIC_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.LOCAL_VARIABLE,
        NodeKind.INSTANCE_VARIABLE,
        NodeKind.CONSTANT,
        NodeKind.SEND,
        NodeKind.SAFE_SEND,
        NodeKind.SYMBOL,
        NodeKind.STRING,
        NodeKind.GROUP,
        NodeKind.LITERAL_TRUE,
        NodeKind.LITERAL_FALSE,
    }
)
# `defined?(x)` binds tighter than `!`.
_PREFIX_SAFE_OPERATORS: frozenset[str] = frozenset({"defined?"})


@dataclass(frozen=True)
class RewritePlan:
    """Keyword swap plus condition edits; all spans are disjoint."""

    keyword_edit: Edit
    condition_edits: tuple[Edit, ...]

    @property
    def edits(self) -> tuple[Edit, ...]:
        return (self.keyword_edit,) + self.condition_edits


class NegationRewriter:
    """
    De Morgan rewrite of a negated conditional. No top-level functions (W9018).

    Operand order is preserved; only operators and polarity change, so the
    rewrite is sound for side-effect-free boolean conditions. Double negation
    is collapsed one level only: `!!x` inverts to `!x`.
    """

    @classmethod
    def rewrite(cls, conditional: SyntaxNode) -> RewritePlan:
        if (
            conditional.kind is not NodeKind.NEGATED_CONDITIONAL
            or conditional.keyword_span is None
            or conditional.condition is None
        ):
            raise RewriteNotApplicableError(
                f"expected an `unless` conditional, got {conditional.kind.value}"
            )
        return RewritePlan(
            keyword_edit=Edit(conditional.keyword_span, "if"),
            condition_edits=tuple(cls.invert(conditional.condition)),
        )

    @classmethod
    def invert(cls, node: SyntaxNode) -> list[Edit]:
        """Edits that turn `node` into its logical negation."""
        if node.kind is NodeKind.GROUP and len(node.children) == 1:
            return cls.invert(node.children[0])
        if node.kind in _BOOLEAN_KINDS and len(node.children) == 2:
            return cls._invert_boolean(node)
        if node.kind is NodeKind.LITERAL_TRUE:
            return [Edit(node.span, "false")]
        if node.kind is NodeKind.LITERAL_FALSE:
            return [Edit(node.span, "true")]
        if (
            node.kind is NodeKind.COMPARISON
            and node.operator in INVERSE_COMPARISONS
            and node.operator_span is not None
        ):
            return [Edit(node.operator_span, INVERSE_COMPARISONS[node.operator])]
        if node.kind is NodeKind.LOGICAL_NOT and node.children:
            return [Edit(node.span, node.children[0].source)]
        return [Edit(node.span, cls.negated_source(node))]

    @classmethod
    def _invert_boolean(cls, node: SyntaxNode) -> list[Edit]:
        edits: list[Edit] = []
        if node.operator in DUAL_OPERATORS and node.operator_span is not None:
            edits.append(Edit(node.operator_span, DUAL_OPERATORS[node.operator]))
        for operand in node.children:
            edits.extend(cls.invert(operand))
            if operand.kind in _BOOLEAN_KINDS and operand.kind is not node.kind:
                # The operand's own operator flips too, so it must keep binding tighter.
                edits.append(Edit(Span(operand.span.start, operand.span.start), "("))
                edits.append(Edit(Span(operand.span.end, operand.span.end), ")"))
        return edits

    @staticmethod
    def needs_parentheses(node: SyntaxNode) -> bool:
        """Decided by node shape: operators and compound expressions bind looser than `!`."""
        if node.kind in _ATOMIC_KINDS:
            # Attribute assignment (`a.b = c`) is a send of `b=`.
            name = node.method_name or ""
            return node.kind in SEND_KINDS and name.endswith("=") and name not in INVERSE_COMPARISONS
        if node.kind is NodeKind.OTHER:
            if node.operator is not None:
                return node.operator not in _PREFIX_SAFE_OPERATORS
            return bool(node.children)
        return True

    @classmethod
    def negated_source(cls, node: SyntaxNode) -> str:
        if cls.needs_parentheses(node):
            return f"!({node.source})"
        return f"!{node.source}"


class NoUnlessRule:
    """
    Rule for no-unless: `unless` (block or modifier form) must be written as `if`.

    Auto-fix: swaps the keyword and distributes the negation over the condition.
    """

    code: str = NO_UNLESS
    message: str = "Use `if !condition` instead of `unless condition`."
    description: str = (
        "No Unless: write `if !condition` instead of `unless condition`. "
        "Auto-fix: swaps the keyword and applies De Morgan's law to the condition."
    )
    fix_type: str = "code"
    node_kinds: frozenset[NodeKind] = frozenset({NodeKind.NEGATED_CONDITIONAL})

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        plan = NegationRewriter.rewrite(node)
        return [
            Finding(
                code=self.code,
                message=self.message,
                node=node,
                severity=Severity.CONVENTION,
                path=context.path,
                edits=plan.edits,
            )
        ]
