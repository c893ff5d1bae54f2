"""Immutable syntax-tree view shared by every rule.

The parser gateway converts the concrete tree into these nodes; nothing in the
domain layer ever sees the parser's own node objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


class NodeKind(Enum):
    """Closed set of node shapes the rules reason about."""

    PROGRAM = "program"
    BODY = "body"
    CONSTANT_ASSIGNMENT = "constant_assignment"
    TYPE_DECLARATION = "type_declaration"
    SINGLETON_BLOCK = "singleton_block"
    METHOD_DEFINITION = "method_definition"
    SINGLETON_METHOD_DEFINITION = "singleton_method_definition"
    SEND = "send"
    SAFE_SEND = "safe_send"
    BOOLEAN_AND = "boolean_and"
    BOOLEAN_OR = "boolean_or"
    COMPARISON = "comparison"
    LOGICAL_NOT = "logical_not"
    LITERAL_TRUE = "literal_true"
    LITERAL_FALSE = "literal_false"
    LOCAL_BINDING = "local_binding"
    INSTANCE_BINDING = "instance_binding"
    LOCAL_VARIABLE = "local_variable"
    INSTANCE_VARIABLE = "instance_variable"
    CONSTANT = "constant"
    SYMBOL = "symbol"
    STRING = "string"
    VISIBILITY_MARKER = "visibility_marker"
    GROUP = "group"
    CONDITIONAL = "conditional"
    NEGATED_CONDITIONAL = "negated_conditional"
    PARAMETER = "parameter"
    KEYWORD_PARAMETER = "keyword_parameter"
    OTHER = "other"


SEND_KINDS: frozenset[NodeKind] = frozenset({NodeKind.SEND, NodeKind.SAFE_SEND})
BINDING_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.LOCAL_BINDING, NodeKind.INSTANCE_BINDING}
)
VARIABLE_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.LOCAL_VARIABLE, NodeKind.INSTANCE_VARIABLE}
)
LITERAL_NAME_KINDS: frozenset[NodeKind] = frozenset({NodeKind.SYMBOL, NodeKind.STRING})


@dataclass(frozen=True)
class Span:
    """Byte range into the UTF-8 source plus the 1-based line and 0-based column of its start."""

    start: int
    end: int
    line: int = 1
    column: int = 0

    def overlaps(self, other: "Span") -> bool:
        """True when the two ranges share at least one byte (or both are the same empty point)."""
        if self.start == self.end == other.start == other.end:
            return True
        return self.start < other.end and other.start < self.end

    def shifted(self, delta: int, line_delta: int = 0) -> "Span":
        return Span(self.start + delta, self.end + delta, self.line + line_delta, self.column)


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """
    One node of the analysed file.

    `children` holds every sub-node in source order; the named fields below are
    references into that same tuple, so walking `children` reaches everything.
    Equality is identity: two nodes are the same finding target only if they are
    the same object.
    """

    kind: NodeKind
    source: str
    span: Span
    children: tuple["SyntaxNode", ...] = ()
    receiver: Optional["SyntaxNode"] = None
    method_name: Optional[str] = None
    arguments: tuple["SyntaxNode", ...] = ()
    body: tuple["SyntaxNode", ...] = ()
    name: Optional[str] = None
    value: Optional["SyntaxNode"] = None
    literal: Optional[str] = None
    scope: Optional["SyntaxNode"] = None
    rooted: bool = False
    operator: Optional[str] = None
    operator_span: Optional[Span] = None
    keyword_span: Optional[Span] = None
    condition: Optional["SyntaxNode"] = None

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def is_send(self) -> bool:
        return self.kind in SEND_KINDS

    @property
    def first_argument(self) -> Optional["SyntaxNode"]:
        return self.arguments[0] if self.arguments else None

    def walk(self) -> Iterator["SyntaxNode"]:
        """Yield this node and all descendants, pre-order, in source order."""
        stack: list[SyntaxNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class ConstantPath:
    """Helpers for `Foo::Bar` constant references. No top-level functions."""

    ROOT_QUALIFIER: str = "::"

    @staticmethod
    def qualified_name(node: Optional[SyntaxNode]) -> Optional[str]:
        """
        Join a constant path root-to-leaf with `::`.

        Returns None when `node` is not a constant reference. A leading `::`
        (top-level lookup) is dropped; segments under a non-constant scope
        (e.g. `foo::Bar`) stop the walk, leaving only the constant tail.
        """
        if node is None or node.kind is not NodeKind.CONSTANT:
            return None
        parts: list[str] = []
        current: Optional[SyntaxNode] = node
        while current is not None and current.kind is NodeKind.CONSTANT:
            parts.insert(0, current.name or current.source)
            current = current.scope
        return "::".join(parts)

    @classmethod
    def normalize(cls, module_name: str) -> str:
        """Strip a leading root qualifier so `::A::B` and `A::B` compare equal."""
        name = module_name.strip()
        while name.startswith(cls.ROOT_QUALIFIER):
            name = name[len(cls.ROOT_QUALIFIER):]
        return name
