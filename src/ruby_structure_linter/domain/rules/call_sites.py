"""Enforce Method Call Sites Rule - restricted methods callable only from allow-listed files."""

import logging
from typing import Optional

from ruby_structure_linter.domain.constants import ENFORCE_METHOD_CALL_SITES
from ruby_structure_linter.domain.entities import Finding, Restriction, Severity
from ruby_structure_linter.domain.path_patterns import PathPattern
from ruby_structure_linter.domain.rules import RuleContext
from ruby_structure_linter.domain.syntax import (
    BINDING_KINDS,
    LITERAL_NAME_KINDS,
    SEND_KINDS,
    VARIABLE_KINDS,
    ConstantPath,
    NodeKind,
    SyntaxNode,
)

logger = logging.getLogger(__name__)

DYNAMIC_DISPATCH_METHODS: frozenset[str] = frozenset({"send", "public_send", "__send__"})
METHOD_REFERENCE_METHOD: str = "method"


class AliasTable:
    """
    Binding name -> qualified constant name for one file.

    Owned by a single traversal; the last assignment to a binding wins, and
    assigning a non-constant value forgets the binding.
    """

    def __init__(self) -> None:
        self._mapping: dict[str, str] = {}

    def bind(self, name: str, qualified_name: str) -> None:
        self._mapping[name] = qualified_name

    def forget(self, name: str) -> None:
        self._mapping.pop(name, None)

    def lookup(self, name: str) -> Optional[str]:
        return self._mapping.get(name)

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, name: object) -> bool:
        return name in self._mapping


class ReceiverResolver:
    """Receiver -> display/qualified name. No top-level functions (W9018)."""

    @staticmethod
    def resolve(receiver: Optional[SyntaxNode], aliases: AliasTable) -> Optional[str]:
        """
        Constant paths resolve to their joined name; variables go through the
        alias table and fall back to their source text; anything else is its
        own source text. No receiver resolves to None and never matches.
        """
        if receiver is None:
            return None
        if receiver.kind is NodeKind.CONSTANT:
            return ConstantPath.qualified_name(receiver)
        if receiver.kind in VARIABLE_KINDS:
            aliased = aliases.lookup(receiver.name or receiver.source)
            return aliased if aliased is not None else receiver.source
        return receiver.source


class CallSiteRule:
    """
    Rule for enforce-method-call-sites.

    Tracks `x = Some::Constant` bindings in source order, then checks direct,
    safe-navigation, dynamic (`send`/`public_send`/`__send__`) and
    `method(:name)` calls against every configured restriction independently.
    """

    code: str = ENFORCE_METHOD_CALL_SITES
    description: str = (
        "Enforce Method Call Sites: restricted methods may only be called from "
        "the files listed in their allowed_call_sites."
    )
    fix_type: str = "manual"
    node_kinds: frozenset[NodeKind] = SEND_KINDS | BINDING_KINDS

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        if node.kind in BINDING_KINDS:
            self.record_binding(node, context.aliases)
            return []
        return self.check_call(node, context)

    @staticmethod
    def record_binding(node: SyntaxNode, aliases: AliasTable) -> None:
        if node.name is None:
            return
        qualified = ConstantPath.qualified_name(node.value)
        if qualified is None:
            aliases.forget(node.name)
            return
        logger.debug("alias %s -> %s", node.name, qualified)
        aliases.bind(node.name, qualified)

    def check_call(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        restrictions = context.config.restrictions
        if not restrictions or node.method_name is None:
            return []
        if node.method_name in DYNAMIC_DISPATCH_METHODS:
            return self._check_named_call(node, context, "Dynamic call to ")
        if node.method_name == METHOD_REFERENCE_METHOD:
            return self._check_named_call(node, context, "Method reference to ")
        return self._check_direct_call(node, context)

    def _check_direct_call(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        resolved = ReceiverResolver.resolve(node.receiver, context.aliases)
        if resolved is None or node.receiver is None or node.method_name is None:
            return []
        findings: list[Finding] = []
        for restriction in self._violated(resolved, node.method_name, context):
            findings.append(
                self._finding(
                    node,
                    context,
                    f"{node.receiver.source}.{node.method_name} can only be called from: "
                    f"{restriction.allowed_sites_text}",
                )
            )
        return findings

    def _check_named_call(
        self, node: SyntaxNode, context: RuleContext, prefix: str
    ) -> list[Finding]:
        argument = node.first_argument
        if argument is None or argument.kind not in LITERAL_NAME_KINDS or argument.literal is None:
            return []
        resolved = ReceiverResolver.resolve(node.receiver, context.aliases)
        if resolved is None:
            return []
        method_name = argument.literal
        return [
            self._finding(
                node,
                context,
                f"{prefix}{resolved}.{method_name} can only be made from: "
                f"{restriction.allowed_sites_text}",
            )
            for restriction in self._violated(resolved, method_name, context)
        ]

    @staticmethod
    def _violated(
        resolved: str, method_name: str, context: RuleContext
    ) -> list[Restriction]:
        module_name = ConstantPath.normalize(resolved)
        return [
            restriction
            for restriction in context.config.restrictions
            if restriction.module_name == module_name
            and restriction.covers(method_name)
            and not PathPattern.any_match(context.path, restriction.allowed_call_sites)
        ]

    def _finding(self, node: SyntaxNode, context: RuleContext, message: str) -> Finding:
        return Finding(
            code=self.code,
            message=message,
            node=node,
            severity=Severity.CONVENTION,
            path=context.path,
        )
