from __future__ import annotations

from yamlpack.core.config import Config
from yamlpack.core.project import Project
from yamlpack.output.console import ConsoleProtocol


class BaseService:
    """Common state shared by services that act on a project."""

    def __init__(
        self,
        *,
        project: Project,
        config: Config,
        console: ConsoleProtocol,
    ) -> None:
        self._project = project
        self._config = config
        self._console = console
