"""Core data models for omo-dashboard."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class StorageRoots:
    """The three sub-trees of an OpenCode storage directory."""

    session_dir: Path  # session/<projectId>/<sessionId>.json
    message_dir: Path  # message/<sessionId>/<messageId>.json
    part_dir: Path  # part/<messageId>/<callId>.json


@dataclass
class SessionMeta:
    """Session metadata as stored on disk."""

    id: str
    directory: str  # project working directory at creation time
    project_id: str = ""
    title: Optional[str] = None
    created: Any = None  # raw time.created, normalized later
    updated: Any = None  # raw time.updated, normalized later
    parent_id: Optional[str] = None


@dataclass
class MessageMeta:
    """A single message within a session."""

    id: str
    session_id: str = ""
    role: str = ""
    created: Optional[float] = None


@dataclass
class SessionListItem:
    """Normalized session entry returned by the listing endpoint."""

    id: str
    title: Optional[str]
    created_at_ms: float = 0
    updated_at_ms: float = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "createdAtMs": self.created_at_ms,
            "updatedAtMs": self.updated_at_ms,
        }


@dataclass
class ToolCallResult:
    """Redacted tool calls for one session plus the cap flag."""

    tool_calls: list = field(default_factory=list)
    truncated: bool = False
