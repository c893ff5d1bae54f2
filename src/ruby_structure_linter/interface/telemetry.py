"""Project telemetry: user-facing progress on a rich console, mirrored to logging."""

import logging
from typing import Optional

from rich.console import Console

from ruby_structure_linter.domain.protocols import TelemetryPort

logger = logging.getLogger(__name__)


class ProjectTelemetry(TelemetryPort):
    """Console + logger telemetry for one CLI session."""

    def __init__(
        self,
        project_name: str,
        color: str = "red",
        welcome: str = "",
        console: Optional[Console] = None,
    ) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome = welcome
        self.console = console or Console(stderr=True)

    def handshake(self) -> None:
        self.console.print(f"[bold {self.color}]{self.project_name}[/] {self.welcome}".rstrip())
        logger.debug("%s session started", self.project_name)

    def step(self, message: str) -> None:
        self.console.print(message, style="dim", highlight=False)
        logger.info(message)

    def warning(self, message: str) -> None:
        self.console.print(f"⚠ {message}", style="yellow", highlight=False)
        logger.warning(message)

    def error(self, message: str) -> None:
        self.console.print(f"✗ {message}", style="bold red", highlight=False)
        logger.error(message)

    def debug(self, message: str) -> None:
        logger.debug(message)
