"""Separator-aware glob and suffix matching for repository-relative paths."""

import re
from functools import lru_cache
from typing import Iterable, Pattern


class PathPattern:
    """
    Allow-list matcher for call-site restrictions. No top-level functions (W9018).

    A pattern containing `*` is a glob: `*` stays inside one path segment,
    `**` crosses separators (`a/**/b` also matches `a/b`) and `?` matches one
    non-separator character. Any other pattern matches as a literal suffix.
    """

    SEPARATOR: str = "/"

    @staticmethod
    def normalize_path(path: str) -> str:
        normalized = path.replace("\\", "/")
        while normalized.startswith("./"):
            normalized = normalized[2:]
        return normalized

    @staticmethod
    def is_glob(pattern: str) -> bool:
        return "*" in pattern

    @classmethod
    def is_outside_root(cls, path: str) -> bool:
        """Absolute or `../` paths: globs anchored at the project root cannot match them."""
        normalized = cls.normalize_path(path)
        return normalized.startswith(("/", "../")) or normalized == ".." or normalized[1:3] == ":/"

    @staticmethod
    @lru_cache(maxsize=256)
    def compile(pattern: str) -> Pattern[str]:
        """Translate a glob into an anchored regular expression."""
        parts: list[str] = []
        i = 0
        length = len(pattern)
        while i < length:
            char = pattern[i]
            if char == "*":
                if pattern.startswith("**", i):
                    i += 2
                    if i < length and pattern[i] == "/":
                        i += 1
                        parts.append("(?:.*/)?")
                    else:
                        parts.append(".*")
                    continue
                parts.append("[^/]*")
            elif char == "?":
                parts.append("[^/]")
            elif char == "[":
                close = pattern.find("]", i + 1)
                if close == -1:
                    parts.append(re.escape(char))
                else:
                    body = pattern[i + 1:close]
                    if body.startswith("!"):
                        body = "^" + body[1:]
                    parts.append("[" + body.replace("\\", "\\\\") + "]")
                    i = close
            else:
                parts.append(re.escape(char))
            i += 1
        return re.compile("".join(parts) + r"\Z", re.DOTALL)

    @classmethod
    def matches(cls, path: str, pattern: str) -> bool:
        """True when `path` satisfies one allow-list entry."""
        normalized = cls.normalize_path(path)
        if cls.is_glob(pattern):
            return cls.compile(cls.normalize_path(pattern)).match(normalized) is not None
        return normalized.endswith(cls.normalize_path(pattern))

    @classmethod
    def any_match(cls, path: str, patterns: Iterable[str]) -> bool:
        return any(cls.matches(path, pattern) for pattern in patterns)
