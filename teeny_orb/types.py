"""Core types shared by session managers and sessions."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import IO


class SessionError(Exception):
    """Raised when a session cannot be created or operated on."""


class SessionNotFoundError(SessionError, LookupError):
    """Raised when a session ID is not known to a manager."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"session {session_id} not found")
        self.session_id = session_id


@dataclass
class ResourceLimits:
    """Resource constraints for containers."""

    cpu_shares: int = 0
    memory: int = 0  # bytes


@dataclass
class SessionConfig:
    """Configuration for a session."""

    image: str = ""
    work_dir: str = ""
    project_path: str = ""
    environment: dict[str, str] = field(default_factory=dict)
    limits: ResourceLimits = field(default_factory=ResourceLimits)

    def validate(self) -> None:
        """Raise ValueError if the configuration is incomplete."""
        if not self.image:
            raise ValueError("image cannot be empty")
        if not self.work_dir:
            raise ValueError("working directory cannot be empty")


class SessionStatus(str, enum.Enum):
    """State of a session."""

    CREATING = "creating"
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class SyncDirection(str, enum.Enum):
    """Direction of file synchronisation."""

    TO_CONTAINER = "to_container"
    FROM_CONTAINER = "from_container"
    BIDIRECTIONAL = "bidirectional"

    def __str__(self) -> str:
        return self.value


@dataclass
class ExecResult:
    """Outcome of running a command in a session."""

    exit_code: int
    stdout: IO[bytes]
    stderr: IO[bytes]
    duration: float  # seconds


class Session(abc.ABC):
    """An active session in which commands can be run.

    Implementations expose ``id`` (a unique string) and ``status``
    (a :class:`SessionStatus`) as attributes.
    """

    id: str
    status: SessionStatus

    @abc.abstractmethod
    def execute(self, cmd: list[str]) -> ExecResult:
        """Run a command in the session."""

    @abc.abstractmethod
    def sync_files(self, direction: SyncDirection) -> None:
        """Synchronise files between host and session."""

    @abc.abstractmethod
    def close(self) -> None:
        """Terminate the session and release its resources."""

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Manager(abc.ABC):
    """Creates and keeps track of sessions."""

    @abc.abstractmethod
    def create_session(self, config: SessionConfig) -> Session:
        """Create and register a new session."""

    @abc.abstractmethod
    def get_session(self, session_id: str) -> Session:
        """Return a session by ID or raise SessionNotFoundError."""

    @abc.abstractmethod
    def list_sessions(self) -> list[Session]:
        """Return all registered sessions."""

    @abc.abstractmethod
    def cleanup(self) -> None:
        """Drop sessions that are stopped or failed."""