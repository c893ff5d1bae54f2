"""Domain errors surfaced to callers."""


class ConfigurationError(ValueError):
    """Invalid linter configuration; raised at load time, before any file is analysed."""


class RewriteNotApplicableError(ValueError):
    """The negation rewrite was asked to operate on a conditional that is not `unless`."""


class SourceParseError(Exception):
    """A source file could not be decoded or turned into a syntax tree."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
