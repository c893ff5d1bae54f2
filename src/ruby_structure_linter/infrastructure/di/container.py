from typing import TYPE_CHECKING, Any, cast

from ruby_structure_linter.infrastructure.config_file_loader import ConfigurationProvider
from ruby_structure_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from ruby_structure_linter.infrastructure.gateways.ruby_parser_gateway import RubyParserGateway
from ruby_structure_linter.infrastructure.gateways.text_fixer_gateway import TextFixerGateway
from ruby_structure_linter.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from ruby_structure_linter.domain.protocols import (
        ConfigurationProviderProtocol,
        FileSystemProtocol,
        FixerGatewayProtocol,
        RubyParserProtocol,
        TelemetryPort,
    )


class LinterContainer:
    """Dependency Injection Container for the Ruby structure linter."""

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        self.register_singleton(
            "TelemetryPort", ProjectTelemetry("RUBY STRUCTURE", "red", "Linter Online")
        )
        self.register_singleton("ConfigurationProvider", ConfigurationProvider())
        self.register_singleton("RubyParserGateway", RubyParserGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("TextFixerGateway", TextFixerGateway())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_configuration_provider(self) -> "ConfigurationProviderProtocol":
        return cast("ConfigurationProviderProtocol", self.get("ConfigurationProvider"))

    def get_parser(self) -> "RubyParserProtocol":
        """Return the tree-sitter Ruby parser gateway."""
        return cast("RubyParserProtocol", self.get("RubyParserGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        """Return the text fixer gateway."""
        return cast("FixerGatewayProtocol", self.get("TextFixerGateway"))
