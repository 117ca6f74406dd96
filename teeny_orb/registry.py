"""Process-wide access to the host and Docker session managers."""

from __future__ import annotations

import threading
from collections.abc import Callable

from .docker import DockerManager
from .host import HostManager
from .types import Manager, Session, SessionNotFoundError


class ManagerRegistry:
    """Holds a host manager and, once asked for, a Docker manager."""

    def __init__(
        self,
        host_manager: Manager | None = None,
        docker_factory: Callable[[], Manager] | None = None,
    ) -> None:
        self._host_manager = host_manager or HostManager()
        self._docker_factory = docker_factory or DockerManager
        self._docker_manager: Manager | None = None
        self._lock = threading.RLock()

    def docker_manager(self) -> Manager:
        """Return the Docker manager, creating it on first use."""
        with self._lock:
            if self._docker_manager is None:
                self._docker_manager = self._docker_factory()
            return self._docker_manager

    def host_manager(self) -> Manager:
        with self._lock:
            return self._host_manager

    def all_sessions(self) -> list[Session]:
        """Return host sessions followed by Docker sessions, if any."""
        with self._lock:
            sessions = self._host_manager.list_sessions()
            if self._docker_manager is not None:
                sessions.extend(self._docker_manager.list_sessions())
            return sessions

    def get_session(self, session_id: str) -> Session:
        """Look a session up in the host manager, then the Docker manager."""
        with self._lock:
            managers = [self._host_manager]
            if self._docker_manager is not None:
                managers.append(self._docker_manager)
            for manager in managers:
                try:
                    return manager.get_session(session_id)
                except SessionNotFoundError:
                    continue
            raise SessionNotFoundError(session_id)


_registry: ManagerRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ManagerRegistry:
    """Return the process-wide registry, creating it on first call."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ManagerRegistry()
        return _registry