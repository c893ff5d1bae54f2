"""Unit tests for the syntax view: spans, walking and constant paths."""

import unittest

from ruby_structure_linter.domain.syntax import ConstantPath, NodeKind, Span
from tests.node_factory import NodeFactory


class TestSpan(unittest.TestCase):
    def test_disjoint_spans_do_not_overlap(self) -> None:
        self.assertFalse(Span(0, 3).overlaps(Span(3, 5)))
        self.assertFalse(Span(3, 5).overlaps(Span(0, 3)))

    def test_shared_bytes_overlap(self) -> None:
        self.assertTrue(Span(0, 4).overlaps(Span(3, 5)))
        self.assertTrue(Span(2, 3).overlaps(Span(0, 10)))

    def test_identical_empty_points_overlap(self) -> None:
        """Two insertions at the same offset clash."""
        self.assertTrue(Span(4, 4).overlaps(Span(4, 4)))
        self.assertFalse(Span(4, 4).overlaps(Span(5, 5)))

    def test_shifted_keeps_length(self) -> None:
        moved = Span(2, 6, line=3, column=1).shifted(10)
        self.assertEqual((moved.start, moved.end, moved.line, moved.column), (12, 16, 3, 1))


class TestSyntaxNodeWalk(unittest.TestCase):
    def test_walk_is_preorder_in_source_order(self) -> None:
        call = NodeFactory.send(NodeFactory.const("A::B"), "run", NodeFactory.sym("x"))
        kinds = [node.kind for node in call.walk()]
        self.assertEqual(
            kinds,
            [NodeKind.SEND, NodeKind.CONSTANT, NodeKind.CONSTANT, NodeKind.SYMBOL],
        )

    def test_first_argument(self) -> None:
        call = NodeFactory.send(None, "send", NodeFactory.sym("go"), NodeFactory.local("x"))
        self.assertEqual(call.first_argument.literal, "go")  # type: ignore[union-attr]
        self.assertIsNone(NodeFactory.send(None, "tick").first_argument)

    def test_nodes_compare_by_identity(self) -> None:
        self.assertNotEqual(NodeFactory.local("x"), NodeFactory.local("x"))


class TestConstantPath(unittest.TestCase):
    def test_qualified_name_joins_segments(self) -> None:
        self.assertEqual(ConstantPath.qualified_name(NodeFactory.const("Payment::Service")), "Payment::Service")

    def test_rooted_path_drops_leading_qualifier(self) -> None:
        node = NodeFactory.const("::Payment::Service")
        self.assertEqual(ConstantPath.qualified_name(node), "Payment::Service")

    def test_non_constant_is_none(self) -> None:
        self.assertIsNone(ConstantPath.qualified_name(NodeFactory.local("service")))
        self.assertIsNone(ConstantPath.qualified_name(None))

    def test_normalize(self) -> None:
        self.assertEqual(ConstantPath.normalize("::A::B"), "A::B")
        self.assertEqual(ConstantPath.normalize(" A::B "), "A::B")
