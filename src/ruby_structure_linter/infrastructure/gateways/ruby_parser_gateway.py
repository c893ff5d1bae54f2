"""tree-sitter Ruby Gateway - builds the immutable SyntaxNode view of a source file."""

import logging
from typing import Optional

import tree_sitter_ruby
from tree_sitter import Language, Node, Parser

from ruby_structure_linter.domain.errors import SourceParseError
from ruby_structure_linter.domain.protocols import RubyParserProtocol
from ruby_structure_linter.domain.syntax import NodeKind, Span, SyntaxNode

logger = logging.getLogger(__name__)

VISIBILITY_METHODS: frozenset[str] = frozenset({"private", "protected", "public"})
COMPARISON_OPERATORS: frozenset[str] = frozenset({"==", "!=", "<", "<=", ">", ">="})
AND_OPERATORS: frozenset[str] = frozenset({"&&", "and"})
OR_OPERATORS: frozenset[str] = frozenset({"||", "or"})
NOT_OPERATORS: frozenset[str] = frozenset({"!", "not"})

# Containers whose direct children are statements.
STATEMENT_CONTAINERS: frozenset[str] = frozenset(
    {
        "program",
        "body_statement",
        "then",
        "else",
        "do",
        "block_body",
        "begin",
        "ensure",
        "parenthesized_statements",
    }
)
MODIFIER_TYPES: frozenset[str] = frozenset(
    {"if_modifier", "unless_modifier", "while_modifier", "until_modifier", "rescue_modifier"}
)
BODY_TYPES: frozenset[str] = frozenset({"body_statement", "then", "else", "do", "block_body"})
SKIPPED_TYPES: frozenset[str] = frozenset({"comment"})


class _TreeConverter:
    """
    Converts one tree-sitter tree. A new converter is created per parse.

    Each `_convert_<type>` handler builds one SyntaxNode; unknown types fall
    back to OTHER with their named children converted generically.
    """

    @staticmethod
    def text(node: Node) -> str:
        raw = node.text
        return raw.decode("utf-8") if raw is not None else ""

    @staticmethod
    def span(node: Node) -> Span:
        return Span(node.start_byte, node.end_byte, node.start_point[0] + 1, node.start_point[1])

    def convert(self, node: Node) -> SyntaxNode:
        handler = getattr(self, f"_convert_{node.type}", None)
        if handler is None:
            return self._generic(node)
        return handler(node)

    def convert_many(self, nodes: list[Node]) -> tuple[SyntaxNode, ...]:
        return tuple(self.convert(n) for n in nodes if n.type not in SKIPPED_TYPES)

    def statements(self, body: Optional[Node]) -> tuple[SyntaxNode, ...]:
        """Direct statements of a declaration body (a body_statement or bare container)."""
        if body is None:
            return ()
        return self.convert_many(body.named_children)

    def _node(self, kind: NodeKind, node: Node, **fields: object) -> SyntaxNode:
        return SyntaxNode(kind=kind, source=self.text(node), span=self.span(node), **fields)  # type: ignore[arg-type]

    def _generic(self, node: Node) -> SyntaxNode:
        kind = NodeKind.BODY if node.type in BODY_TYPES else NodeKind.OTHER
        return self._node(kind, node, children=self.convert_many(node.named_children))

    # Declarations

    def _convert_program(self, node: Node) -> SyntaxNode:
        statements = self.convert_many(node.named_children)
        return self._node(NodeKind.PROGRAM, node, children=statements, body=statements)

    def _convert_class(self, node: Node) -> SyntaxNode:
        name = node.child_by_field_name("name")
        superclass = node.child_by_field_name("superclass")
        body = self.statements(node.child_by_field_name("body"))
        prefix: tuple[SyntaxNode, ...] = ()
        if superclass is not None:
            prefix = self.convert_many(superclass.named_children)
        return self._node(
            NodeKind.TYPE_DECLARATION,
            node,
            children=prefix + body,
            body=body,
            name=self.text(name) if name is not None else None,
        )

    _convert_module = _convert_class

    def _convert_singleton_class(self, node: Node) -> SyntaxNode:
        value = node.child_by_field_name("value")
        body = self.statements(node.child_by_field_name("body"))
        prefix = (self.convert(value),) if value is not None else ()
        return self._node(NodeKind.SINGLETON_BLOCK, node, children=prefix + body, body=body)

    def _parameters(self, node: Node) -> tuple[SyntaxNode, ...]:
        parameters = node.child_by_field_name("parameters")
        if parameters is None:
            return ()
        result: list[SyntaxNode] = []
        for param in parameters.named_children:
            if param.type in SKIPPED_TYPES:
                continue
            kind = (
                NodeKind.KEYWORD_PARAMETER
                if param.type == "keyword_parameter"
                else NodeKind.PARAMETER
            )
            param_name = param.child_by_field_name("name")
            result.append(
                self._node(
                    kind,
                    param,
                    name=self.text(param_name) if param_name is not None else self.text(param),
                )
            )
        return tuple(result)

    def _convert_method(self, node: Node) -> SyntaxNode:
        name = node.child_by_field_name("name")
        parameters = self._parameters(node)
        body = self.statements(node.child_by_field_name("body"))
        return self._node(
            NodeKind.METHOD_DEFINITION,
            node,
            children=parameters + body,
            arguments=parameters,
            body=body,
            name=self.text(name) if name is not None else None,
        )

    def _convert_singleton_method(self, node: Node) -> SyntaxNode:
        obj = node.child_by_field_name("object")
        name = node.child_by_field_name("name")
        parameters = self._parameters(node)
        body = self.statements(node.child_by_field_name("body"))
        receiver = self.convert(obj) if obj is not None else None
        prefix = (receiver,) if receiver is not None else ()
        return self._node(
            NodeKind.SINGLETON_METHOD_DEFINITION,
            node,
            children=prefix + parameters + body,
            receiver=receiver,
            arguments=parameters,
            body=body,
            name=self.text(name) if name is not None else None,
        )

    def _convert_assignment(self, node: Node) -> SyntaxNode:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        value = self.convert(right) if right is not None else None
        children = (value,) if value is not None else ()
        if left is None:
            return self._node(NodeKind.OTHER, node, children=children)
        if left.type in ("constant", "scope_resolution"):
            return self._node(
                NodeKind.CONSTANT_ASSIGNMENT, node, children=children, name=self.text(left), value=value
            )
        if left.type == "call":
            return self._convert_attribute_assignment(node, left, value)
        if left.type == "identifier":
            kind = NodeKind.LOCAL_BINDING
        elif left.type == "instance_variable":
            kind = NodeKind.INSTANCE_BINDING
        else:
            return self._node(NodeKind.OTHER, node, children=self.convert_many(node.named_children))
        return self._node(kind, node, children=children, name=self.text(left), value=value)

    def _convert_attribute_assignment(
        self, node: Node, left: Node, value: Optional[SyntaxNode]
    ) -> SyntaxNode:
        """`recv.attr = value` is a send of `attr=` with the value as its argument."""
        receiver_node = left.child_by_field_name("receiver")
        operator = left.child_by_field_name("operator")
        method = left.child_by_field_name("method")
        receiver = self.convert(receiver_node) if receiver_node is not None else None
        arguments = (value,) if value is not None else ()
        safe = operator is not None and operator.type == "&."
        return self._node(
            NodeKind.SAFE_SEND if safe else NodeKind.SEND,
            node,
            children=((receiver,) if receiver is not None else ()) + arguments,
            receiver=receiver,
            method_name=f"{self.text(method)}=" if method is not None else None,
            arguments=arguments,
            operator=operator.type if operator is not None else None,
        )

    # Calls

    def _convert_call(self, node: Node) -> SyntaxNode:
        receiver_node = node.child_by_field_name("receiver")
        operator = node.child_by_field_name("operator")
        method = node.child_by_field_name("method")
        argument_list = node.child_by_field_name("arguments")
        block = node.child_by_field_name("block")

        receiver = self.convert(receiver_node) if receiver_node is not None else None
        arguments = (
            self.convert_many(argument_list.named_children) if argument_list is not None else ()
        )
        block_node = (self.convert(block),) if block is not None else ()
        method_name = self.text(method) if method is not None else "call"
        children = ((receiver,) if receiver is not None else ()) + arguments + block_node

        if receiver is None and method_name in VISIBILITY_METHODS:
            kind = NodeKind.VISIBILITY_MARKER
        elif operator is not None and operator.type == "&.":
            kind = NodeKind.SAFE_SEND
        else:
            kind = NodeKind.SEND
        return self._node(
            kind,
            node,
            children=children,
            receiver=receiver,
            method_name=method_name,
            arguments=arguments,
            operator=operator.type if operator is not None else None,
        )

    def _in_statement_position(self, node: Node) -> bool:
        parent = node.parent
        if parent is None:
            return False
        if parent.type in STATEMENT_CONTAINERS:
            return True
        if parent.type in MODIFIER_TYPES:
            body = parent.child_by_field_name("body")
            return body is not None and body.id == node.id
        return False

    def _convert_identifier(self, node: Node) -> SyntaxNode:
        name = self.text(node)
        if self._in_statement_position(node):
            if name in VISIBILITY_METHODS:
                return self._node(NodeKind.VISIBILITY_MARKER, node, method_name=name)
            return self._node(NodeKind.SEND, node, method_name=name)
        if name.endswith(("?", "!")):
            return self._node(NodeKind.SEND, node, method_name=name)
        return self._node(NodeKind.LOCAL_VARIABLE, node, name=name)

    def _convert_instance_variable(self, node: Node) -> SyntaxNode:
        return self._node(NodeKind.INSTANCE_VARIABLE, node, name=self.text(node))

    def _convert_constant(self, node: Node) -> SyntaxNode:
        return self._node(NodeKind.CONSTANT, node, name=self.text(node))

    def _convert_scope_resolution(self, node: Node) -> SyntaxNode:
        scope_node = node.child_by_field_name("scope")
        name = node.child_by_field_name("name")
        scope = self.convert(scope_node) if scope_node is not None else None
        if name is None or name.type != "constant":
            return self._node(
                NodeKind.OTHER, node, children=(scope,) if scope is not None else ()
            )
        return self._node(
            NodeKind.CONSTANT,
            node,
            children=(scope,) if scope is not None else (),
            name=self.text(name),
            scope=scope,
            rooted=scope_node is None,
        )

    # Expressions

    def _convert_binary(self, node: Node) -> SyntaxNode:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        operator = node.child_by_field_name("operator")
        op = operator.type if operator is not None else None
        children = self.convert_many([n for n in (left, right) if n is not None])
        if op in AND_OPERATORS:
            kind = NodeKind.BOOLEAN_AND
        elif op in OR_OPERATORS:
            kind = NodeKind.BOOLEAN_OR
        elif op in COMPARISON_OPERATORS:
            kind = NodeKind.COMPARISON
        else:
            kind = NodeKind.OTHER
        return self._node(
            kind,
            node,
            children=children,
            operator=op,
            operator_span=self.span(operator) if operator is not None else None,
        )

    def _convert_unary(self, node: Node) -> SyntaxNode:
        operator = node.child_by_field_name("operator")
        operand = node.child_by_field_name("operand")
        op = operator.type if operator is not None else None
        children = (self.convert(operand),) if operand is not None else ()
        kind = NodeKind.LOGICAL_NOT if op in NOT_OPERATORS else NodeKind.OTHER
        return self._node(
            kind,
            node,
            children=children,
            operator=op,
            operator_span=self.span(operator) if operator is not None else None,
        )

    def _convert_parenthesized_statements(self, node: Node) -> SyntaxNode:
        return self._node(NodeKind.GROUP, node, children=self.convert_many(node.named_children))

    def _convert_true(self, node: Node) -> SyntaxNode:
        return self._node(NodeKind.LITERAL_TRUE, node)

    def _convert_false(self, node: Node) -> SyntaxNode:
        return self._node(NodeKind.LITERAL_FALSE, node)

    def _convert_simple_symbol(self, node: Node) -> SyntaxNode:
        return self._node(NodeKind.SYMBOL, node, literal=self.text(node)[1:])

    def _plain_content(self, node: Node) -> Optional[str]:
        """Literal text of a string-like node, or None when it interpolates or escapes."""
        parts: list[str] = []
        for child in node.named_children:
            if child.type != "string_content":
                return None
            parts.append(self.text(child))
        return "".join(parts)

    def _convert_delimited_symbol(self, node: Node) -> SyntaxNode:
        return self._node(
            NodeKind.SYMBOL,
            node,
            children=self.convert_many(node.named_children),
            literal=self._plain_content(node),
        )

    def _convert_string(self, node: Node) -> SyntaxNode:
        return self._node(
            NodeKind.STRING,
            node,
            children=self.convert_many(node.named_children),
            literal=self._plain_content(node),
        )

    # Conditionals

    def _conditional(self, node: Node, kind: NodeKind, keyword: str) -> SyntaxNode:
        condition_node = node.child_by_field_name("condition")
        condition = self.convert(condition_node) if condition_node is not None else None
        keyword_span: Optional[Span] = None
        for child in node.children:
            if child.type == keyword:
                keyword_span = self.span(child)
                break
        children: list[SyntaxNode] = []
        for child in node.named_children:
            if child.type in SKIPPED_TYPES:
                continue
            if condition_node is not None and child.id == condition_node.id and condition is not None:
                children.append(condition)
            else:
                children.append(self.convert(child))
        return self._node(
            kind,
            node,
            children=tuple(children),
            condition=condition,
            keyword_span=keyword_span,
        )

    def _convert_if(self, node: Node) -> SyntaxNode:
        return self._conditional(node, NodeKind.CONDITIONAL, "if")

    _convert_if_modifier = _convert_if

    def _convert_unless(self, node: Node) -> SyntaxNode:
        return self._conditional(node, NodeKind.NEGATED_CONDITIONAL, "unless")

    _convert_unless_modifier = _convert_unless


class RubyParserGateway(RubyParserProtocol):
    """Infrastructure implementation of RubyParserProtocol using tree-sitter-ruby."""

    def __init__(self) -> None:
        self._parser = Parser(Language(tree_sitter_ruby.language()))

    def parse(self, source: bytes, path: str = "<source>") -> SyntaxNode:
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceParseError(path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
        tree = self._parser.parse(source)
        if tree.root_node.has_error:
            logger.warning("%s: syntax errors found; analysing the recoverable parts", path)
        try:
            return _TreeConverter().convert(tree.root_node)
        except RecursionError as e:
            raise SourceParseError(path, "nesting too deep to analyse") from e
