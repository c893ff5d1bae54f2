"""Class Structure Rule - declaration ordering inside class, module and `class << self` bodies."""

from typing import Callable, Optional, Sequence

from ruby_structure_linter.domain.constants import CLASS_STRUCTURE
from ruby_structure_linter.domain.entities import (
    CategorizedDeclaration,
    Category,
    Finding,
    Severity,
)
from ruby_structure_linter.domain.rules import RuleContext
from ruby_structure_linter.domain.syntax import NodeKind, SyntaxNode

MODULE_INCLUSION_METHODS: frozenset[str] = frozenset({"include", "extend", "prepend"})
GRAPHQL_OBJECT_TYPE_METHODS: frozenset[str] = frozenset({"object_type"})
GRAPHQL_FIELD_METHODS: frozenset[str] = frozenset({"field", "implements"})

# Precedences enforced whatever the configured order says.
BUILT_IN_PRECEDENCES: tuple[tuple[Category, Category], ...] = (
    (Category.NESTED_TYPE, Category.SINGLETON_METHODS),
    (Category.SINGLETON_METHODS, Category.INSTANCE_METHOD),
    (Category.GRAPHQL_OBJECT_TYPE, Category.CONSTANT),
    (Category.SINGLETON_METHODS, Category.GRAPHQL_FIELD),
)


class DeclarationCategorizer:
    """Maps one direct child of a type body to its Category. No top-level functions (W9018).

    Instance methods after a bare `private`/`protected` belong to that section, not to
    public_methods, so categorize_body leaves them out of the ordering check.
    """

    _SECTION_MARKERS: frozenset[Category] = frozenset(
        {Category.PROTECTED_MARKER, Category.PRIVATE_MARKER}
    )

    @staticmethod
    def _categorize_send(node: SyntaxNode) -> Optional[Category]:
        if node.receiver is not None:
            return None
        if node.method_name in MODULE_INCLUSION_METHODS:
            return Category.MODULE_INCLUSION
        if node.method_name in GRAPHQL_OBJECT_TYPE_METHODS:
            return Category.GRAPHQL_OBJECT_TYPE
        if node.method_name in GRAPHQL_FIELD_METHODS:
            return Category.GRAPHQL_FIELD
        return None

    @staticmethod
    def _categorize_visibility(node: SyntaxNode) -> Optional[Category]:
        if node.method_name == "private":
            return Category.PRIVATE_MARKER
        if node.method_name == "protected":
            return Category.PROTECTED_MARKER
        return None

    _DISPATCH: dict[NodeKind, Callable[[SyntaxNode], Optional[Category]]] = {
        NodeKind.CONSTANT_ASSIGNMENT: lambda node: Category.CONSTANT,
        NodeKind.TYPE_DECLARATION: lambda node: Category.NESTED_TYPE,
        NodeKind.SINGLETON_BLOCK: lambda node: Category.SINGLETON_METHODS,
        NodeKind.SINGLETON_METHOD_DEFINITION: lambda node: Category.SINGLETON_METHODS,
        NodeKind.METHOD_DEFINITION: lambda node: Category.INSTANCE_METHOD,
        NodeKind.SEND: _categorize_send,
        NodeKind.VISIBILITY_MARKER: _categorize_visibility,
    }

    # Kinds that never name a declaration category.
    UNCATEGORIZED_KINDS: frozenset[NodeKind] = frozenset(
        {
            NodeKind.PROGRAM,
            NodeKind.BODY,
            NodeKind.SAFE_SEND,
            NodeKind.BOOLEAN_AND,
            NodeKind.BOOLEAN_OR,
            NodeKind.COMPARISON,
            NodeKind.LOGICAL_NOT,
            NodeKind.LITERAL_TRUE,
            NodeKind.LITERAL_FALSE,
            NodeKind.LOCAL_BINDING,
            NodeKind.INSTANCE_BINDING,
            NodeKind.LOCAL_VARIABLE,
            NodeKind.INSTANCE_VARIABLE,
            NodeKind.CONSTANT,
            NodeKind.SYMBOL,
            NodeKind.STRING,
            NodeKind.GROUP,
            NodeKind.CONDITIONAL,
            NodeKind.NEGATED_CONDITIONAL,
            NodeKind.PARAMETER,
            NodeKind.KEYWORD_PARAMETER,
            NodeKind.OTHER,
        }
    )

    @classmethod
    def categorized_kinds(cls) -> frozenset[NodeKind]:
        return frozenset(cls._DISPATCH)

    @classmethod
    def categorize(cls, node: SyntaxNode) -> Optional[Category]:
        """Pure tag dispatch; None means the declaration is ignored for ordering."""
        handler = cls._DISPATCH.get(node.kind)
        if handler is None:
            return None
        return handler(node)

    @classmethod
    def categorize_body(cls, body: Sequence[SyntaxNode]) -> list[CategorizedDeclaration]:
        """
        Categorize the direct children of one type body, keeping every index.

        A bare `private`/`protected` opens a section: plain method definitions
        inside it belong to that section and are excluded from ordering. A bare
        `public` closes the section.
        """
        declarations: list[CategorizedDeclaration] = []
        section: Optional[Category] = None
        for index, node in enumerate(body):
            category = cls.categorize(node)
            if node.kind is NodeKind.VISIBILITY_MARKER and not node.arguments:
                if node.method_name == "public":
                    section = None
                elif category in cls._SECTION_MARKERS:
                    section = category
            elif category is Category.INSTANCE_METHOD and section is not None:
                category = None
            declarations.append(CategorizedDeclaration(node, category, index))
        return declarations


class OrderingRuleEngine:
    """
    Pairwise precedence scan over categorized declarations.

    Every category must precede all categories configured after it, plus the
    built-in precedences. A declaration is reported at most once: against the
    first category (configured ones first, then built-ins) that already has a
    member earlier in the body.
    """

    def __init__(self, code: str = CLASS_STRUCTURE) -> None:
        self._code = code

    @staticmethod
    def successors(order: Sequence[Category]) -> dict[Category, list[Category]]:
        """Categories each category must come before, in the order they are checked."""
        result: dict[Category, list[Category]] = {}
        for position, before in enumerate(order):
            result[before] = list(order[position + 1:])
        for before, after in BUILT_IN_PRECEDENCES:
            required = result.setdefault(before, [])
            if after not in required:
                required.append(after)
        return result

    def check(
        self,
        declarations: Sequence[CategorizedDeclaration],
        order: Sequence[Category],
        path: str = "",
    ) -> list[Finding]:
        categorized = sorted(
            (d for d in declarations if d.category is not None), key=lambda d: d.index
        )
        if len(categorized) < 2:
            return []

        first_index: dict[Category, int] = {}
        for declaration in categorized:
            if declaration.category is not None:
                first_index.setdefault(declaration.category, declaration.index)

        successors = OrderingRuleEngine.successors(order)
        findings: list[Finding] = []
        for declaration in categorized:
            before = declaration.category
            if before is None:
                continue
            for after in successors.get(before, ()):
                earliest = first_index.get(after)
                if earliest is not None and earliest < declaration.index:
                    findings.append(
                        Finding(
                            code=self._code,
                            message=f"{before.label} is supposed to appear before {after.label}.",
                            node=declaration.node,
                            severity=Severity.WARNING,
                            path=path,
                        )
                    )
                    break
        return findings


class ClassStructureRule:
    """
    Rule for class-structure: declarations must follow the configured order.

    Runs once per class, module and `class << self` body; nested bodies are
    reached separately by the driver, so each is checked on its own.
    """

    code: str = CLASS_STRUCTURE
    description: str = (
        "Class Structure: module inclusions, constants, nested classes, class "
        "methods, public, protected and private methods must appear in order."
    )
    fix_type: str = "manual"
    node_kinds: frozenset[NodeKind] = frozenset(
        {NodeKind.TYPE_DECLARATION, NodeKind.SINGLETON_BLOCK}
    )

    def __init__(self) -> None:
        self._engine = OrderingRuleEngine(self.code)

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        declarations = DeclarationCategorizer.categorize_body(node.body)
        return self._engine.check(declarations, context.config.expected_order, context.path)
