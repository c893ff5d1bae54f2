"""Unit tests for the single-predicate rules."""

import unittest

from ruby_structure_linter.domain.config import ConfigurationLoader
from ruby_structure_linter.domain.entities import Severity
from ruby_structure_linter.domain.rules import RuleContext
from ruby_structure_linter.domain.rules.call_sites import AliasTable
from ruby_structure_linter.domain.rules.predicates import (
    ForbidInstanceVariableGetSetRule,
    PreferDateCurrentRule,
    SidekiqKeywordArgumentsRule,
)
from tests.node_factory import NodeFactory as F


def _context() -> RuleContext:
    return RuleContext("app/x.rb", ConfigurationLoader(), AliasTable())


class TestForbidInstanceVariableGetSetRule(unittest.TestCase):
    def setUp(self) -> None:
        self.rule = ForbidInstanceVariableGetSetRule()

    def test_get_and_set_are_reported(self) -> None:
        for call in (
            F.send(F.local("object"), "instance_variable_get", F.sym("@foo")),
            F.send(F.local("object"), "instance_variable_set", F.string("@foo"), F.local("value")),
            F.send(None, "instance_variable_get", F.sym("@foo")),
        ):
            with self.subTest(source=call.source):
                (finding,) = self.rule.check(call, _context())
                self.assertIn("Prefer using public getters/setters.", finding.message)
                self.assertFalse(finding.fixable)

    def test_regular_calls_pass(self) -> None:
        self.assertEqual(self.rule.check(F.send(F.local("object"), "foo"), _context()), [])


class TestPreferDateCurrentRule(unittest.TestCase):
    def setUp(self) -> None:
        self.rule = PreferDateCurrentRule()

    def test_time_zone_today(self) -> None:
        call = F.send(F.send(F.const("Time"), "zone"), "today")
        (finding,) = self.rule.check(call, _context())
        self.assertEqual(finding.message, "Use `Date.current` instead of `Time.zone.today`.")
        (edit,) = finding.edits
        self.assertEqual((edit.span, edit.replacement), (call.span, "Date.current"))

    def test_rooted_time(self) -> None:
        call = F.send(F.send(F.const("::Time"), "zone"), "today")
        self.assertEqual(len(self.rule.check(call, _context())), 1)

    def test_other_receivers_pass(self) -> None:
        for call in (
            F.send(F.const("Date"), "current"),
            F.send(F.send(F.const("Foo::Time"), "zone"), "today"),
            F.send(F.send(F.local("time"), "zone"), "today"),
            F.send(F.const("Time"), "today"),
            F.send(F.send(F.const("Time"), "zone"), "now"),
        ):
            with self.subTest(source=call.source):
                self.assertEqual(self.rule.check(call, _context()), [])


class TestSidekiqKeywordArgumentsRule(unittest.TestCase):
    def setUp(self) -> None:
        self.rule = SidekiqKeywordArgumentsRule()

    def test_keyword_arguments_in_perform(self) -> None:
        method = F.defn("perform", F.param("user_id"), F.param("force", keyword=True))
        (finding,) = self.rule.check(method, _context())
        self.assertEqual(finding.message, "Don't use keyword arguments in workers")
        self.assertIs(finding.severity, Severity.ERROR)

    def test_positional_arguments_pass(self) -> None:
        self.assertEqual(self.rule.check(F.defn("perform", F.param("user_id")), _context()), [])

    def test_other_methods_pass(self) -> None:
        method = F.defn("call", F.param("force", keyword=True))
        self.assertEqual(self.rule.check(method, _context()), [])
