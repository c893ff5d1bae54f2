"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from ruby_structure_linter.domain.constants import RUBY_FILE_NAMES, RUBY_FILE_SUFFIXES
from ruby_structure_linter.domain.protocols import FileSystemProtocol

SKIPPED_DIRECTORIES: frozenset[str] = frozenset({".git", "node_modules", "tmp", ".bundle"})


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        return Path(path).is_dir()

    @staticmethod
    def is_ruby_file(path: Path) -> bool:
        return path.suffix in RUBY_FILE_SUFFIXES or path.name in RUBY_FILE_NAMES

    def glob_ruby_files(self, path: str) -> list[str]:
        """Get all Ruby files in path (recursive if directory), sorted."""
        path_obj = Path(path)
        if not path_obj.is_dir():
            return [str(path_obj)] if self.is_ruby_file(path_obj) else []
        found: list[str] = []
        for candidate in path_obj.rglob("*"):
            if any(part in SKIPPED_DIRECTORIES for part in candidate.relative_to(path_obj).parts):
                continue
            if candidate.is_file() and self.is_ruby_file(candidate):
                found.append(str(candidate))
        return sorted(found)

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def relative_path(self, path: str) -> str:
        """Path relative to the working directory, with `/` separators when possible."""
        resolved = Path(path).resolve()
        try:
            relative = resolved.relative_to(Path.cwd().resolve())
        except ValueError:
            return Path(path).as_posix()
        return relative.as_posix()
