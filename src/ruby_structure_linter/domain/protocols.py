from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ruby_structure_linter.domain.config import ConfigurationLoader
    from ruby_structure_linter.domain.entities import Edit
    from ruby_structure_linter.domain.syntax import SyntaxNode


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def debug(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class RubyParserProtocol(Protocol):
    """Turns Ruby source into the immutable syntax view."""

    def parse(self, source: bytes, path: str = "<source>") -> "SyntaxNode":
        """Parse UTF-8 source. Raises SourceParseError when it cannot be decoded."""
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def is_directory(self, path: str) -> bool: ...
    def glob_ruby_files(self, path: str) -> list[str]: ...
    def read_bytes(self, path: str) -> bytes: ...
    def relative_path(self, path: str) -> str: ...


class FixerGatewayProtocol(Protocol):
    """Applies text edits to files on disk."""

    def apply_edits(
        self, file_path: str, edits: "list[Edit]", create_backup: bool = True
    ) -> bool:
        """Apply edits to one file. Returns True when the file content changed."""
        ...


class ConfigurationProviderProtocol(Protocol):
    """Loads and validates configuration for one run."""

    def load(self, config_path: Optional[Path] = None) -> "ConfigurationLoader": ...
