"""Load [tool.ruby-structure-lint] from pyproject.toml, or an explicit config file. Infrastructure I/O only."""

import tomllib
from pathlib import Path
from typing import Optional

import yaml

from ruby_structure_linter.domain.config import ConfigurationLoader
from ruby_structure_linter.domain.constants import TOOL_NAME
from ruby_structure_linter.domain.errors import ConfigurationError
from ruby_structure_linter.domain.protocols import ConfigurationProviderProtocol

TOOL_SECTION_ALIASES: tuple[str, ...] = (TOOL_NAME, "ruby_structure_lint")


class ConfigFileLoader:
    """
    Loads raw configuration tables. No top-level functions (W9018).

    Returns (config_dict, source) where `source` names the file the table came
    from, for error messages.
    """

    @staticmethod
    def _tool_table(data: dict[str, object]) -> dict[str, object]:
        tool_section = data.get("tool", {}) or {}
        if not isinstance(tool_section, dict):
            return {}
        for name in TOOL_SECTION_ALIASES:
            table = tool_section.get(name)
            if isinstance(table, dict):
                return table
        return {}

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> tuple[dict[str, object], str]:
        """Walk up from `start` (default CWD) to the first pyproject.toml carrying our table."""
        current_path = (start or Path.cwd()).resolve()
        empty: dict[str, object] = {}
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if not config_file.exists():
                continue
            try:
                with config_file.open("rb") as f:
                    data = tomllib.load(f)
            except OSError:
                continue
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"{config_file}: {e}") from e
            table = ConfigFileLoader._tool_table(data)
            if table:
                return (table, str(config_file))
        return (empty, "<defaults>")

    @staticmethod
    def load_config_file(path: Path) -> tuple[dict[str, object], str]:
        """
        Load an explicit `--config` file.

        `.toml` files may hold the table at the top level or under
        `[tool.ruby-structure-lint]`; YAML files hold it at the top level or
        under a `ruby-structure-lint:` key.
        """
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"{path}: cannot read configuration ({e})") from e
        try:
            if path.suffix == ".toml":
                data: object = tomllib.loads(raw)
            else:
                data = yaml.safe_load(raw) or {}
        except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"{path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: configuration must be a mapping")
        table = ConfigFileLoader._tool_table(data)
        if not table:
            for name in TOOL_SECTION_ALIASES:
                nested = data.get(name)
                if isinstance(nested, dict):
                    table = nested
                    break
            else:
                table = data
        return (table, str(path))


class ConfigurationProvider(ConfigurationProviderProtocol):
    """Builds the validated ConfigurationLoader for a CLI run."""

    def load(self, config_path: Optional[Path] = None) -> ConfigurationLoader:
        """Explicit file when given, else the nearest pyproject.toml. Raises ConfigurationError."""
        if config_path is not None:
            config_dict, source = ConfigFileLoader.load_config_file(config_path)
        else:
            config_dict, source = ConfigFileLoader.load_config_from_fs()
        return ConfigurationLoader(config_dict, source)
