"""Domain models shared by every rule."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from ruby_structure_linter.domain.entities import Finding
from ruby_structure_linter.domain.syntax import NodeKind, SyntaxNode

if TYPE_CHECKING:
    from ruby_structure_linter.domain.config import ConfigurationLoader
    from ruby_structure_linter.domain.rules.call_sites import AliasTable


@dataclass(frozen=True)
class RuleContext:
    """
    Per-file state handed to every rule during one traversal.

    Built fresh by the driver for each file and discarded afterwards; the
    alias table is the only mutable part and only one traversal writes it.
    """

    path: str
    config: "ConfigurationLoader"
    aliases: "AliasTable"


class BaseRule(Protocol):
    """The fundamental unit of structural governance."""

    code: str
    description: str
    fix_type: str
    node_kinds: frozenset[NodeKind]

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Finding]:
        """Interrogate one node of a kind listed in `node_kinds`."""
        ...
