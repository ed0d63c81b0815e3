"""Backend status and user-facing notice models."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, computed_field


class BackendMode(StrEnum):
    """Which data source the dashboard is running against."""

    REMOTE = "remote"
    DEGRADED = "degraded"
    DEMO = "demo"


class BackendStatus(BaseModel):
    """Snapshot of the backend selection state."""

    remote_configured: bool
    remote_usable: bool

    @computed_field  # type: ignore[prop-decorator]
    @property
    def mode(self) -> BackendMode:
        if self.remote_usable:
            return BackendMode.REMOTE
        if self.remote_configured:
            return BackendMode.DEGRADED
        return BackendMode.DEMO


class Notice(BaseModel):
    """Non-blocking message for the view layer."""

    level: Literal["info", "success", "warning", "error"] = "info"
    title: str
    message: str
