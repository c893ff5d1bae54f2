"""Builders for hand-made SyntaxNode trees with consistent source text and spans.

Each builder returns a node whose span covers exactly its own source, starting
at offset 0; composite builders shift their operands into place so edits
produced by the rules can be applied to the root node's source.
"""

from dataclasses import replace
from typing import Optional

from ruby_structure_linter.domain.syntax import NodeKind, Span, SyntaxNode

COMPARISON_OPERATORS = ("==", "!=", "<", "<=", ">", ">=")


class NodeFactory:
    """Test tree builders. No top-level functions (W9018)."""

    @staticmethod
    def span_of(text: str, start: int = 0) -> Span:
        return Span(start, start + len(text.encode("utf-8")))

    @staticmethod
    def offset(text: str) -> int:
        return len(text.encode("utf-8"))

    @staticmethod
    def shift(node: SyntaxNode, delta: int) -> SyntaxNode:
        """Copy of `node` with every span moved by `delta` bytes; field references stay consistent."""
        memo: dict[int, SyntaxNode] = {}

        def rebuild(current: SyntaxNode) -> SyntaxNode:
            if id(current) in memo:
                return memo[id(current)]

            def ref(other: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
                return rebuild(other) if other is not None else None

            moved = replace(
                current,
                span=current.span.shifted(delta),
                children=tuple(rebuild(child) for child in current.children),
                receiver=ref(current.receiver),
                arguments=tuple(rebuild(arg) for arg in current.arguments),
                body=tuple(rebuild(stmt) for stmt in current.body),
                value=ref(current.value),
                scope=ref(current.scope),
                condition=ref(current.condition),
                operator_span=current.operator_span.shifted(delta) if current.operator_span else None,
                keyword_span=current.keyword_span.shifted(delta) if current.keyword_span else None,
            )
            memo[id(current)] = moved
            return moved

        return rebuild(node)

    # Leaves

    @staticmethod
    def leaf(kind: NodeKind, text: str, **fields: object) -> SyntaxNode:
        return SyntaxNode(kind=kind, source=text, span=NodeFactory.span_of(text), **fields)  # type: ignore[arg-type]

    @staticmethod
    def local(name: str) -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.LOCAL_VARIABLE, name, name=name)

    @staticmethod
    def ivar(name: str) -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.INSTANCE_VARIABLE, name, name=name)

    @staticmethod
    def true() -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.LITERAL_TRUE, "true")

    @staticmethod
    def false() -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.LITERAL_FALSE, "false")

    @staticmethod
    def sym(name: str) -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.SYMBOL, f":{name}", literal=name)

    @staticmethod
    def string(value: str) -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.STRING, f'"{value}"', literal=value)

    @staticmethod
    def other(text: str) -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.OTHER, text)

    @staticmethod
    def const(path: str) -> SyntaxNode:
        """`A::B::C` as nested CONSTANT nodes; a leading `::` marks a rooted path."""
        rooted = path.startswith("::")
        parts = path.lstrip(":").split("::")
        first_text = ("::" if rooted else "") + parts[0]
        node = NodeFactory.leaf(NodeKind.CONSTANT, first_text, name=parts[0], rooted=rooted)
        for part in parts[1:]:
            text = f"{node.source}::{part}"
            node = SyntaxNode(
                kind=NodeKind.CONSTANT,
                source=text,
                span=NodeFactory.span_of(text),
                children=(node,),
                name=part,
                scope=node,
            )
        return node

    # Calls and bindings

    @staticmethod
    def send(
        receiver: Optional[SyntaxNode],
        method: str,
        *args: SyntaxNode,
        safe: bool = False,
    ) -> SyntaxNode:
        prefix = ""
        shifted_receiver: Optional[SyntaxNode] = None
        if receiver is not None:
            shifted_receiver = receiver
            prefix = receiver.source + ("&." if safe else ".")
        text = prefix + method
        arguments: list[SyntaxNode] = []
        if args:
            text += "("
            for position, arg in enumerate(args):
                if position:
                    text += ", "
                arguments.append(NodeFactory.shift(arg, NodeFactory.offset(text)))
                text += arg.source
            text += ")"
        children = ((shifted_receiver,) if shifted_receiver is not None else ()) + tuple(arguments)
        return SyntaxNode(
            kind=NodeKind.SAFE_SEND if safe else NodeKind.SEND,
            source=text,
            span=NodeFactory.span_of(text),
            children=children,
            receiver=shifted_receiver,
            method_name=method,
            arguments=tuple(arguments),
            operator=("&." if safe else ".") if receiver is not None else None,
        )

    @staticmethod
    def bind(name: str, value: SyntaxNode) -> SyntaxNode:
        kind = NodeKind.INSTANCE_BINDING if name.startswith("@") else NodeKind.LOCAL_BINDING
        head = f"{name} = "
        moved = NodeFactory.shift(value, NodeFactory.offset(head))
        text = head + value.source
        return SyntaxNode(
            kind=kind,
            source=text,
            span=NodeFactory.span_of(text),
            children=(moved,),
            name=name,
            value=moved,
        )

    # Boolean expressions

    @staticmethod
    def binary(left: SyntaxNode, operator: str, right: SyntaxNode) -> SyntaxNode:
        if operator in ("&&", "and"):
            kind = NodeKind.BOOLEAN_AND
        elif operator in ("||", "or"):
            kind = NodeKind.BOOLEAN_OR
        elif operator in COMPARISON_OPERATORS:
            kind = NodeKind.COMPARISON
        else:
            kind = NodeKind.OTHER
        operator_start = NodeFactory.offset(left.source + " ")
        head = f"{left.source} {operator} "
        moved_right = NodeFactory.shift(right, NodeFactory.offset(head))
        text = head + right.source
        return SyntaxNode(
            kind=kind,
            source=text,
            span=NodeFactory.span_of(text),
            children=(left, moved_right),
            operator=operator,
            operator_span=Span(operator_start, operator_start + len(operator)),
        )

    @staticmethod
    def not_(operand: SyntaxNode) -> SyntaxNode:
        text = "!" + operand.source
        return SyntaxNode(
            kind=NodeKind.LOGICAL_NOT,
            source=text,
            span=NodeFactory.span_of(text),
            children=(NodeFactory.shift(operand, 1),),
            operator="!",
            operator_span=Span(0, 1),
        )

    @staticmethod
    def group(inner: SyntaxNode) -> SyntaxNode:
        text = f"({inner.source})"
        return SyntaxNode(
            kind=NodeKind.GROUP,
            source=text,
            span=NodeFactory.span_of(text),
            children=(NodeFactory.shift(inner, 1),),
        )

    @staticmethod
    def modifier(condition: SyntaxNode, keyword: str = "unless", statement: str = "return") -> SyntaxNode:
        """`<statement> unless <condition>` (or `if`)."""
        head = f"{statement} {keyword} "
        keyword_start = NodeFactory.offset(statement + " ")
        moved = NodeFactory.shift(condition, NodeFactory.offset(head))
        body = NodeFactory.leaf(NodeKind.SEND, statement, method_name=statement)
        text = head + condition.source
        return SyntaxNode(
            kind=NodeKind.NEGATED_CONDITIONAL if keyword == "unless" else NodeKind.CONDITIONAL,
            source=text,
            span=NodeFactory.span_of(text),
            children=(body, moved),
            condition=moved,
            keyword_span=Span(keyword_start, keyword_start + len(keyword)),
        )

    # Declarations

    @staticmethod
    def casgn(name: str, value: str = "1") -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.CONSTANT_ASSIGNMENT, f"{name} = {value}", name=name)

    @staticmethod
    def type_decl(name: str, *body: SyntaxNode, keyword: str = "class") -> SyntaxNode:
        return SyntaxNode(
            kind=NodeKind.TYPE_DECLARATION,
            source=f"{keyword} {name}; end",
            span=NodeFactory.span_of(f"{keyword} {name}; end"),
            children=tuple(body),
            body=tuple(body),
            name=name,
        )

    @staticmethod
    def singleton_block(*body: SyntaxNode) -> SyntaxNode:
        return SyntaxNode(
            kind=NodeKind.SINGLETON_BLOCK,
            source="class << self; end",
            span=NodeFactory.span_of("class << self; end"),
            children=tuple(body),
            body=tuple(body),
        )

    @staticmethod
    def defn(name: str, *params: SyntaxNode) -> SyntaxNode:
        return NodeFactory.leaf(
            NodeKind.METHOD_DEFINITION,
            f"def {name}; end",
            name=name,
            arguments=tuple(params),
            children=tuple(params),
        )

    @staticmethod
    def defs(name: str) -> SyntaxNode:
        return NodeFactory.leaf(NodeKind.SINGLETON_METHOD_DEFINITION, f"def self.{name}; end", name=name)

    @staticmethod
    def param(name: str, keyword: bool = False) -> SyntaxNode:
        kind = NodeKind.KEYWORD_PARAMETER if keyword else NodeKind.PARAMETER
        return NodeFactory.leaf(kind, f"{name}:" if keyword else name, name=name)

    @staticmethod
    def macro(method: str, *args: SyntaxNode) -> SyntaxNode:
        """Receiver-less class-body call such as `include Foo` or `field :id`."""
        return NodeFactory.send(None, method, *args)

    @staticmethod
    def visibility(method: str, *args: SyntaxNode) -> SyntaxNode:
        return replace(NodeFactory.send(None, method, *args), kind=NodeKind.VISIBILITY_MARKER)

    @staticmethod
    def program(*statements: SyntaxNode) -> SyntaxNode:
        return SyntaxNode(
            kind=NodeKind.PROGRAM,
            source="",
            span=Span(0, 0),
            children=tuple(statements),
            body=tuple(statements),
        )
