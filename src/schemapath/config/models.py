"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, schemapath.toml only contains
overrides. An empty file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PathConfig(BaseModel):
    """[path] section."""

    model_config = {"frozen": True}

    strict_waypoints: bool = False


class LoggingConfig(BaseModel):
    """[logging] section."""

    model_config = {"frozen": True, "populate_by_name": True}

    verbose: bool = False
    json_output: bool = Field(default=False, alias="json")

