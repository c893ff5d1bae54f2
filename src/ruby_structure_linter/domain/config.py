"""Configuration for linter settings. Immutable value object created by Infrastructure."""

import logging
import re
from typing import Optional

from ruby_structure_linter.domain.constants import RULE_CODES
from ruby_structure_linter.domain.entities import (
    ALL_METHODS,
    Category,
    MethodSelector,
    Restriction,
)
from ruby_structure_linter.domain.errors import ConfigurationError
from ruby_structure_linter.domain.path_patterns import PathPattern
from ruby_structure_linter.domain.syntax import ConstantPath

DEFAULT_EXPECTED_ORDER: tuple[Category, ...] = (
    Category.MODULE_INCLUSION,
    Category.CONSTANT,
    Category.NESTED_TYPE,
    Category.SINGLETON_METHODS,
    Category.INSTANCE_METHOD,
    Category.PROTECTED_MARKER,
    Category.PRIVATE_MARKER,
)

# RuboCop-style spellings accepted in YAML files.
_KEY_ALIASES: dict[str, str] = {
    "ExpectedOrder": "expected_order",
    "Restrictions": "restrictions",
    "DisabledRules": "disabled_rules",
    "Exclude": "exclude",
    "expected-order": "expected_order",
    "disabled-rules": "disabled_rules",
}
_RESTRICTION_KEY_ALIASES: dict[str, str] = {
    "Module": "module",
    "Methods": "methods",
    "AllowedCallSites": "allowed_call_sites",
    "allowed-call-sites": "allowed_call_sites",
}
_KNOWN_KEYS: frozenset[str] = frozenset(
    {"expected_order", "restrictions", "disabled_rules", "exclude"}
)
_KNOWN_RESTRICTION_KEYS: frozenset[str] = frozenset(
    {"module", "methods", "allowed_call_sites"}
)


class ConfigurationLoader:
    """
    Immutable, validated configuration.

    Created by Infrastructure from the raw `[tool.ruby-structure-lint]` table (or
    an explicit YAML/TOML file). Every problem is raised as ConfigurationError
    here, once, so nothing downstream consults loosely-typed dictionaries.
    """

    def __init__(
        self,
        config_dict: Optional[dict[str, object]] = None,
        source: str = "<defaults>",
    ) -> None:
        self._source = source
        self._config = ConfigurationLoader.canonical_keys(config_dict or {}, _KEY_ALIASES)
        self.validate_config(self._config)
        self._expected_order = self._parse_expected_order(self._config.get("expected_order"))
        self._restrictions = self._parse_restrictions(self._config.get("restrictions"))
        self._disabled_rules = self._parse_disabled_rules(self._config.get("disabled_rules"))
        self._exclude = self._parse_patterns(self._config.get("exclude"), "exclude")

    @staticmethod
    def canonical_keys(raw: dict[str, object], aliases: dict[str, str]) -> dict[str, object]:
        """Map alternate key spellings onto the canonical snake_case names."""
        result: dict[str, object] = {}
        for key, value in raw.items():
            result[aliases.get(str(key), str(key))] = value
        return result

    def validate_config(self, config: dict[str, object]) -> None:
        """Warn about unrecognised top-level keys."""
        for key in sorted(set(config) - _KNOWN_KEYS):
            logging.warning(
                "Configuration Warning: unknown key '%s' in %s is ignored.", key, self._source
            )

    def _error(self, message: str) -> ConfigurationError:
        return ConfigurationError(f"{self._source}: {message}")

    def _parse_expected_order(self, raw: object) -> tuple[Category, ...]:
        if raw is None:
            return DEFAULT_EXPECTED_ORDER
        labels = self._parse_string_list(raw, "expected_order")
        order: list[Category] = []
        for label in labels:
            category = Category.from_label(label)
            if category is None:
                valid = ", ".join(c.label for c in Category)
                raise self._error(
                    f"unknown category '{label}' in expected_order (valid: {valid})"
                )
            if category in order:
                raise self._error(f"category '{label}' appears twice in expected_order")
            order.append(category)
        return tuple(order)

    def _parse_restrictions(self, raw: object) -> tuple[Restriction, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise self._error("restrictions must be a list of tables")
        restrictions: list[Restriction] = []
        for position, entry in enumerate(raw, start=1):
            if not isinstance(entry, dict):
                raise self._error(f"restriction #{position} must be a table")
            fields = ConfigurationLoader.canonical_keys(entry, _RESTRICTION_KEY_ALIASES)
            for key in sorted(set(fields) - _KNOWN_RESTRICTION_KEYS):
                logging.warning(
                    "Configuration Warning: unknown key '%s' in restriction #%d is ignored.",
                    key,
                    position,
                )
            module_name = fields.get("module")
            if not isinstance(module_name, str) or not ConstantPath.normalize(module_name):
                raise self._error(f"restriction #{position} needs a 'module' name")
            restrictions.append(
                Restriction(
                    module_name=ConstantPath.normalize(module_name),
                    methods=self._parse_methods(fields.get("methods"), position),
                    allowed_call_sites=tuple(
                        self._parse_patterns(
                            fields.get("allowed_call_sites"),
                            f"allowed_call_sites of restriction #{position}",
                        )
                    ),
                )
            )
        return tuple(restrictions)

    def _parse_methods(self, raw: object, position: int) -> MethodSelector:
        if raw is None or raw == ALL_METHODS:
            return ALL_METHODS
        if isinstance(raw, str):
            return frozenset({raw})
        names = self._parse_string_list(raw, f"methods of restriction #{position}")
        return frozenset(name.lstrip(":") for name in names)

    def _parse_disabled_rules(self, raw: object) -> frozenset[str]:
        codes = self._parse_string_list(raw, "disabled_rules")
        unknown = sorted(set(codes) - RULE_CODES)
        if unknown:
            raise self._error(f"unknown rule code(s) in disabled_rules: {', '.join(unknown)}")
        return frozenset(codes)

    def _parse_string_list(self, raw: object, what: str) -> list[str]:
        if raw is None:
            return []
        if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
            raise self._error(f"{what} must be a list of strings")
        return list(raw)

    def _parse_patterns(self, raw: object, what: str) -> list[str]:
        """String list whose glob entries must compile."""
        patterns = self._parse_string_list(raw, what)
        for pattern in patterns:
            if not PathPattern.is_glob(pattern):
                continue
            try:
                PathPattern.compile(PathPattern.normalize_path(pattern))
            except re.error as e:
                raise self._error(f"invalid pattern '{pattern}' in {what}: {e}") from e
        return patterns

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def source(self) -> str:
        return self._source

    @property
    def expected_order(self) -> tuple[Category, ...]:
        return self._expected_order

    @property
    def restrictions(self) -> tuple[Restriction, ...]:
        return self._restrictions

    @property
    def disabled_rules(self) -> frozenset[str]:
        return self._disabled_rules

    @property
    def exclude(self) -> tuple[str, ...]:
        """Glob patterns (relative paths) that are never analysed."""
        return tuple(self._exclude)

    def is_rule_enabled(self, code: str) -> bool:
        return code not in self._disabled_rules

    def with_only_rules(self, codes: list[str]) -> "ConfigurationLoader":
        """Copy of this configuration with every rule outside `codes` disabled."""
        unknown = sorted(set(codes) - RULE_CODES)
        if unknown:
            raise ConfigurationError(f"unknown rule code(s): {', '.join(unknown)}")
        narrowed = dict(self._config)
        narrowed["disabled_rules"] = sorted(RULE_CODES - set(codes))
        return ConfigurationLoader(narrowed, self._source)
