"""AppContext — process-level entry point for applications embedding schemapath.

Created once at startup. Loads :class:`PathSettings`, applies the
``[logging]`` section to structlog, and hands out services bound to those
settings. Telemetry is not switched on here: each service call enables it
for its own duration when ``[logging] verbose`` is set.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from schemapath.config.logging import configure_from_config
from schemapath.config.settings import PathSettings
from schemapath.services.path import PathService

if TYPE_CHECKING:
    from schemapath.domain.schema import DataModel


class AppContext:
    """Settings plus logging configuration, shared by every service."""

    def __init__(self, settings: PathSettings) -> None:
        self.settings = settings
        configure_from_config(settings.logging)

    @classmethod
    def from_config(
        cls,
        *,
        config_path: str | Path | None = None,
        root: Path | None = None,
        **overrides: Any,
    ) -> AppContext:
        """Discover ``schemapath.toml`` and build a context from it."""
        return cls(PathSettings.load(config_path=config_path, root=root, **overrides))

    def path_service(self, data_model: DataModel) -> PathService:
        return PathService(data_model, self.settings)
