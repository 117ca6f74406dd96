"""Sessions that run commands directly on the host."""

from __future__ import annotations

import io
import os
import subprocess
import time

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
from .utils import DefaultIDGenerator, IDGenerator


class HostSession(Session):
    """A session whose commands run as host processes in a working directory."""

    def __init__(
        self, session_id: str, work_dir: str, env: dict[str, str] | None = None
    ) -> None:
        self.id = session_id
        self.work_dir = work_dir
        self.env = dict(env or {})
        self.status = SessionStatus.RUNNING

    def execute(self, cmd: list[str], timeout: float | None = None) -> ExecResult:
        """Run ``cmd`` in the working directory with the session environment."""
        if not cmd:
            raise ValueError("no command provided")

        start = time.perf_counter()
        try:
            completed = subprocess.run(
                list(cmd),
                cwd=self.work_dir,
                env={**os.environ, **self.env},
                capture_output=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as err:
            raise SessionError(f"command execution failed: {err}") from err
        except OSError as err:
            raise SessionError(f"failed to start command: {err}") from err

        # Processes killed by a signal report -1, as a negative code carries no exit status.
        exit_code = completed.returncode if completed.returncode >= 0 else -1
        return ExecResult(
            exit_code=exit_code,
            stdout=io.BytesIO(completed.stdout),
            stderr=io.BytesIO(completed.stderr),
            duration=time.perf_counter() - start,
        )

    def sync_files(self, direction: SyncDirection) -> None:
        """Host sessions work on the host files directly, so nothing is copied."""

    def close(self) -> None:
        self.status = SessionStatus.STOPPED


def new_host_session(
    config: SessionConfig, id_gen: IDGenerator | None = None
) -> HostSession:
    """Create a host session, defaulting the working directory to the current one."""
    session_id = (id_gen or DefaultIDGenerator()).generate_id()

    work_dir = config.work_dir
    if not work_dir:
        try:
            work_dir = os.getcwd()
        except OSError as err:
            raise SessionError(
                f"failed to get current working directory: {err}"
            ) from err

    if not os.path.exists(work_dir):
        raise SessionError(f"working directory does not exist: {work_dir}")

    return HostSession(session_id, work_dir, config.environment)


class HostManager(Manager):
    """Keeps track of host sessions."""

    def __init__(self, id_gen: IDGenerator | None = None) -> None:
        self._id_gen = id_gen or DefaultIDGenerator()
        self._sessions: dict[str, Session] = {}

    def create_session(self, config: SessionConfig) -> HostSession:
        try:
            session = new_host_session(config, self._id_gen)
        except SessionError as err:
            raise SessionError(f"failed to create host session: {err}") from err
        self._sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def cleanup(self) -> None:
        self._sessions = {
            sid: s
            for sid, s in self._sessions.items()
            if s.status not in (SessionStatus.STOPPED, SessionStatus.ERROR)
        }