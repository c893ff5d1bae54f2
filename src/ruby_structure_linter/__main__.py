"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from ruby_structure_linter.infrastructure.di.container import LinterContainer
from ruby_structure_linter.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = LinterContainer()
    deps = CLIDependencies(
        config_provider=container.get_configuration_provider(),
        telemetry=container.get_telemetry_port(),
        parser=container.get_parser(),
        filesystem=container.get_filesystem_gateway(),
        fixer_gateway=container.get_fixer_gateway(),
    )
    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
