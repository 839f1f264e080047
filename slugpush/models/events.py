"""Progress event models"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventType(Enum):
    """Stages reported while a push advances"""
    DIFF_START = "diff-start"  # payload: total file count
    UPLOADS_START = "uploads-start"  # payload: number of uploads
    UPLOADS_END = "uploads-end"  # payload: number of uploads
    BUILD_OUTPUT_LINE = "build-output-line"  # payload: one line of build output
    RELEASE_START = "release-start"  # payload: app name
    RELEASE_END = "release-end"  # payload: release version
    DEPLOY_ERROR = "deploy-error"  # payload: user-visible failure message


@dataclass(frozen=True)
class Event:
    """A single progress notification"""
    type: EventType
    payload: Any = None

    def __str__(self) -> str:
        return f"{self.type.value}: {self.payload}"
