"""
Rule identifiers and visual telemetry constants.
"""

# ANSI Red (\033[31m)
_RED: str = "\033[31m"
_RESET: str = "\033[0m"
_LINTER_ART: str = r"""
    ____  __  ______  __  __   _____ ________  ______  __  ____________
   / __ \/ / / / __ )/ \/ /  / ___//_  __/ / / / __ \/ / / / ____/_  __/
  / /_/ / / / / __  |\  /    \__ \  / / / / / / /_/ / / / / /     / /
 / _, _/ /_/ / /_/ / / /    ___/ / / / / /_/ / _, _/ /_/ / /___  / /
/_/ |_|\____/_____/ /_/    /____/ /_/  \____/_/ |_|\____/\____/ /_/
"""
LINTER_BANNER = _RED + _LINTER_ART + _RESET

TOOL_NAME: str = "ruby-structure-lint"

CLASS_STRUCTURE: str = "class-structure"
ENFORCE_METHOD_CALL_SITES: str = "enforce-method-call-sites"
NO_UNLESS: str = "no-unless"
FORBID_INSTANCE_VARIABLE_GET_SET: str = "forbid-instance-variable-get-set"
PREFER_DATE_CURRENT: str = "prefer-date-current"
SIDEKIQ_KEYWORD_ARGUMENTS: str = "sidekiq-keyword-arguments"

RULE_CODES: frozenset[str] = frozenset(
    {
        CLASS_STRUCTURE,
        ENFORCE_METHOD_CALL_SITES,
        NO_UNLESS,
        FORBID_INSTANCE_VARIABLE_GET_SET,
        PREFER_DATE_CURRENT,
        SIDEKIQ_KEYWORD_ARGUMENTS,
    }
)

RUBY_FILE_SUFFIXES: frozenset[str] = frozenset({".rb", ".rake", ".gemspec"})
RUBY_FILE_NAMES: frozenset[str] = frozenset({"Rakefile", "Gemfile", "Guardfile"})
