from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Union

from ruby_structure_linter.domain.syntax import Span, SyntaxNode


class Category(Enum):
    """Semantic category of one declaration inside a class or module body."""

    MODULE_INCLUSION = "module_inclusion"
    CONSTANT = "constants"
    NESTED_TYPE = "nested_classes"
    GRAPHQL_OBJECT_TYPE = "graphql_object_type"
    SINGLETON_METHODS = "public_class_methods"
    GRAPHQL_FIELD = "graphql_fields"
    INSTANCE_METHOD = "public_methods"
    PROTECTED_MARKER = "protected_methods"
    PRIVATE_MARKER = "private_methods"

    @property
    def label(self) -> str:
        """Configuration label, also used in messages."""
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Optional["Category"]:
        for category in cls:
            if category.value == label:
                return category
        return None


class Severity(Enum):
    """Finding severity, ordered from least to most serious."""

    CONVENTION = "convention"
    WARNING = "warning"
    ERROR = "error"


ALL_METHODS = "all"
MethodSelector = Union[frozenset[str], str]


@dataclass(frozen=True)
class Edit:
    """Replace the bytes covered by `span` with `replacement`."""

    span: Span
    replacement: str


@dataclass(frozen=True)
class Finding:
    """One reported violation, attached to a node of the analysed tree."""

    code: str
    message: str
    node: SyntaxNode
    severity: Severity = Severity.CONVENTION
    path: str = ""
    edits: tuple[Edit, ...] = ()

    @property
    def line(self) -> int:
        return self.node.span.line

    @property
    def column(self) -> int:
        return self.node.span.column

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    @property
    def fixable(self) -> bool:
        return bool(self.edits)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "fixable": self.fixable,
        }


@dataclass(frozen=True)
class CategorizedDeclaration:
    """A direct child of a type body with its category (None = ignored) and position."""

    node: SyntaxNode
    category: Optional[Category]
    index: int


@dataclass(frozen=True)
class Restriction:
    """Limits which files may call `methods` on `module_name`."""

    module_name: str
    methods: MethodSelector = ALL_METHODS
    allowed_call_sites: tuple[str, ...] = ()

    def covers(self, method_name: str) -> bool:
        if self.methods == ALL_METHODS:
            return True
        return method_name in self.methods

    @property
    def allowed_sites_text(self) -> str:
        return ", ".join(self.allowed_call_sites)


@dataclass(frozen=True)
class FileReport:
    """Findings for one analysed file, or the reason it could not be analysed."""

    path: str
    findings: tuple[Finding, ...] = ()
    error: Optional[str] = None
    source: Optional[bytes] = field(default=None, repr=False, compare=False)

    def has_findings(self) -> bool:
        return bool(self.findings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "path": self.path,
            "error": self.error,
            "findings": [finding.to_dict() for finding in self.findings],
        }


class TextEdits:
    """Apply non-overlapping byte-span edits to text. No top-level functions."""

    @staticmethod
    def apply(text: str, edits: Iterable[Edit], base: int = 0) -> str:
        """
        Apply `edits` to `text`, whose first byte sits at offset `base` of the file.

        Edits are applied right-to-left so earlier offsets stay valid. Raises
        ValueError when two edits overlap or an edit falls outside the text.
        """
        data = text.encode("utf-8")
        ordered = sorted(edits, key=lambda edit: (edit.span.start, edit.span.end))
        for previous, current in zip(ordered, ordered[1:]):
            if previous.span.end > current.span.start:
                raise ValueError(
                    f"Overlapping edits at bytes {previous.span.start}-{previous.span.end} "
                    f"and {current.span.start}-{current.span.end}"
                )
        for edit in reversed(ordered):
            start = edit.span.start - base
            end = edit.span.end - base
            if start < 0 or end > len(data) or start > end:
                raise ValueError(f"Edit {edit.span.start}-{edit.span.end} outside the text")
            data = data[:start] + edit.replacement.encode("utf-8") + data[end:]
        return data.decode("utf-8")
