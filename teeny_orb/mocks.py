"""In-memory session and manager for use in tests."""

from __future__ import annotations

import io

from .types import (
    ExecResult,
    Manager,
    Session,
    SessionConfig,
    SessionError,
    SessionNotFoundError,
    SessionStatus,
    SyncDirection,
)


class MockSession(Session):
    """A session that records commands instead of running them."""

    def __init__(self, session_id: str, config: SessionConfig) -> None:
        self.id = session_id
        self.status = SessionStatus.RUNNING
        self.config = config
        self.commands: list[list[str]] = []
        self.closed = False

    def execute(self, cmd: list[str]) -> ExecResult:
        if self.closed:
            raise SessionError("session is closed")
        self.commands.append(list(cmd))
        return ExecResult(
            exit_code=0,
            stdout=io.BytesIO(f"Mock execution: {' '.join(cmd)}".encode()),
            stderr=io.BytesIO(b""),
            duration=0.1,
        )

    def sync_files(self, direction: SyncDirection) -> None:
        if self.closed:
            raise SessionError("session is closed")

    def close(self) -> None:
        self.status = SessionStatus.STOPPED
        self.closed = True


class MockManager(Manager):
    """A manager of mock sessions; set ``create_error`` to make creation fail."""

    def __init__(self) -> None:
        self.sessions: dict[str, Session] = {}
        self.create_error: Exception | None = None
        self.cleanup_called = False

    def create_session(self, config: SessionConfig) -> MockSession:
        if self.create_error is not None:
            raise self.create_error
        session = MockSession(f"mock-session-{len(self.sessions)}", config)
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Session:
        try:
            return self.sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list_sessions(self) -> list[Session]:
        return list(self.sessions.values())

    def cleanup(self) -> None:
        self.cleanup_called = True
        self.sessions = {
            sid: s
            for sid, s in self.sessions.items()
            if s.status not in (SessionStatus.STOPPED, SessionStatus.ERROR)
        }