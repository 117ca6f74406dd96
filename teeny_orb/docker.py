"""Sessions that run inside Docker containers, talking to the Engine API."""

from __future__ import annotations

import io
import os
import threading
import time
from typing import IO, Any

import httpx

from .sync import FileSyncer
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
from .utils import DefaultIDGenerator, IDGenerator, map_to_env_list, separate_output

_DEFAULT_DOCKER_HOST = "unix:///var/run/docker.sock"


class DockerError(SessionError):
    """Raised when the Docker daemon cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DockerClient:
    """A small client for the parts of the Docker Engine API that sessions use."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    @classmethod
    def from_env(cls) -> DockerClient:
        """Build a client from ``DOCKER_HOST``, defaulting to the local socket."""
        host = os.environ.get("DOCKER_HOST") or _DEFAULT_DOCKER_HOST
        if host.startswith("unix://"):
            transport = httpx.HTTPTransport(uds=host[len("unix://"):])
            http = httpx.Client(
                transport=transport, base_url="http://docker", timeout=None
            )
        elif host.startswith("tcp://"):
            http = httpx.Client(base_url="http://" + host[len("tcp://"):], timeout=None)
        elif host.startswith(("http://", "https://")):
            http = httpx.Client(base_url=host, timeout=None)
        else:
            raise DockerError(f"unable to parse docker host `{host}`")
        return cls(http)

    @property
    def base_url(self) -> httpx.URL:
        return self._http.base_url

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = self._http.request(
                method, path, params=params, json=json, content=content, headers=headers
            )
        except httpx.HTTPError as err:
            raise DockerError(f"cannot connect to the Docker daemon: {err}") from err

        if response.status_code >= 400:
            try:
                message = response.json().get("message") or response.text
            except ValueError:
                message = response.text
            raise DockerError(
                message or f"HTTP {response.status_code}", response.status_code
            )
        return response

    def container_create(
        self, name: str, config: dict[str, Any], host_config: dict[str, Any]
    ) -> str:
        """Create a container and return its ID."""
        body = {**config, "HostConfig": host_config}
        response = self._request(
            "POST", "/containers/create", params={"name": name}, json=body
        )
        return response.json()["Id"]

    def container_start(self, container_id: str) -> None:
        self._request("POST", f"/containers/{container_id}/start")

    def container_stop(self, container_id: str) -> None:
        self._request("POST", f"/containers/{container_id}/stop")

    def container_remove(self, container_id: str, force: bool = False) -> None:
        self._request(
            "DELETE",
            f"/containers/{container_id}",
            params={"force": "true" if force else "false"},
        )

    def exec_create(self, container_id: str, cmd: list[str]) -> str:
        """Create an exec instance attached to stdout and stderr; return its ID."""
        body = {"Cmd": list(cmd), "AttachStdout": True, "AttachStderr": True}
        response = self._request("POST", f"/containers/{container_id}/exec", json=body)
        return response.json()["Id"]

    def exec_start(self, exec_id: str) -> bytes:
        """Start an exec instance and return its raw output once it finishes."""
        response = self._request(
            "POST", f"/exec/{exec_id}/start", json={"Detach": False, "Tty": False}
        )
        return response.content

    def exec_inspect(self, exec_id: str) -> dict[str, Any]:
        return self._request("GET", f"/exec/{exec_id}/json").json()

    def copy_to_container(self, container_id: str, path: str, archive: bytes) -> None:
        """Unpack a tar archive at ``path`` inside the container."""
        self._request(
            "PUT",
            f"/containers/{container_id}/archive",
            params={"path": path},
            content=archive,
            headers={"Content-Type": "application/x-tar"},
        )

    def copy_from_container(self, container_id: str, path: str) -> IO[bytes]:
        """Return a tar archive of ``path`` inside the container."""
        response = self._request(
            "GET", f"/containers/{container_id}/archive", params={"path": path}
        )
        return io.BytesIO(response.content)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> DockerClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class DockerSession(Session):
    """A session backed by a running Docker container."""

    def __init__(
        self,
        session_id: str,
        container_id: str,
        client: DockerClient,
        config: SessionConfig,
        id_gen: IDGenerator | None = None,
    ) -> None:
        self.id = session_id
        self.container_id = container_id
        self.client = client
        self.config = config
        self.status = SessionStatus.RUNNING
        self.id_gen = id_gen

    @classmethod
    def create(
        cls,
        client: DockerClient,
        config: SessionConfig,
        id_gen: IDGenerator | None = None,
    ) -> DockerSession:
        """Create and start a container for a new session."""
        id_gen = id_gen or DefaultIDGenerator()
        session_id = id_gen.generate_id()

        container_config = {
            "Image": config.image,
            "WorkingDir": config.work_dir,
            "Env": map_to_env_list(config.environment),
            "Tty": True,
            "OpenStdin": True,
        }
        host_config = {
            "CpuShares": config.limits.cpu_shares,
            "Memory": config.limits.memory,
        }

        try:
            container_id = client.container_create(
                session_id, container_config, host_config
            )
        except DockerError as err:
            raise DockerError(f"failed to create container: {err}", err.status_code) from err

        try:
            client.container_start(container_id)
        except DockerError as err:
            raise DockerError(f"failed to start container: {err}", err.status_code) from err

        return cls(session_id, container_id, client, config, id_gen)

    def execute(self, cmd: list[str]) -> ExecResult:
        start = time.perf_counter()

        try:
            exec_id = self.client.exec_create(self.container_id, cmd)
        except DockerError as err:
            raise DockerError(f"failed to create exec: {err}", err.status_code) from err

        try:
            output = self.client.exec_start(exec_id)
        except DockerError as err:
            raise DockerError(f"failed to start exec: {err}", err.status_code) from err

        stdout, stderr = separate_output(io.BytesIO(output))

        try:
            inspected = self.client.exec_inspect(exec_id)
        except DockerError as err:
            raise DockerError(f"failed to inspect exec: {err}", err.status_code) from err

        return ExecResult(
            exit_code=int(inspected.get("ExitCode") or 0),
            stdout=stdout,
            stderr=stderr,
            duration=time.perf_counter() - start,
        )

    def sync_files(self, direction: SyncDirection) -> None:
        """Report the requested synchronisation; see :meth:`sync_files_advanced`."""
        messages = {
            SyncDirection.TO_CONTAINER: "Syncing files to container",
            SyncDirection.FROM_CONTAINER: "Syncing files from container",
            SyncDirection.BIDIRECTIONAL: "Bidirectional sync for container",
        }
        message = messages.get(direction)
        if message is not None:
            print(f"{message} {self.container_id}")

    def sync_files_advanced(self, direction: SyncDirection) -> None:
        """Copy the project directory to or from the container's working directory."""
        if not self.config.project_path:
            raise SessionError("no project path configured for file sync")

        syncer = FileSyncer(
            self.client, self.container_id, self.config.project_path, self.config.work_dir
        )
        if direction in (SyncDirection.TO_CONTAINER, SyncDirection.BIDIRECTIONAL):
            syncer.sync_to_container()
        elif direction is SyncDirection.FROM_CONTAINER:
            syncer.sync_from_container()
        else:
            raise ValueError(f"unsupported sync direction: {direction}")

    def close(self) -> None:
        try:
            self.client.container_stop(self.container_id)
        except DockerError as err:
            print(f"Warning: failed to stop container {self.container_id}: {err}")

        try:
            self.client.container_remove(self.container_id, force=True)
        except DockerError as err:
            print(f"Warning: failed to remove container {self.container_id}: {err}")

        self.status = SessionStatus.STOPPED


class DockerManager(Manager):
    """Keeps track of Docker sessions; safe to share between threads."""

    def __init__(
        self, client: DockerClient | None = None, id_gen: IDGenerator | None = None
    ) -> None:
        if client is None:
            try:
                client = DockerClient.from_env()
            except DockerError as err:
                raise DockerError(f"failed to create Docker client: {err}") from err
        self.client = client
        self._id_gen = id_gen or DefaultIDGenerator()
        self._sessions: dict[str, Session] = {}
        self._lock = threading.RLock()

    def create_session(self, config: SessionConfig) -> DockerSession:
        with self._lock:
            try:
                session = DockerSession.create(self.client, config, self._id_gen)
            except DockerError as err:
                raise DockerError(
                    f"failed to create Docker session: {err}", err.status_code
                ) from err
            self._sessions[session.id] = session
            return session

    def get_session(self, session_id: str) -> Session:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise SessionNotFoundError(session_id) from None

    def list_sessions(self) -> list[Session]:
        with self._lock:
            return list(self._sessions.values())

    def cleanup(self) -> None:
        with self._lock:
            for session_id, session in list(self._sessions.items()):
                if session.status in (SessionStatus.STOPPED, SessionStatus.ERROR):
                    try:
                        session.close()
                    except SessionError as err:
                        print(f"Error cleaning up session {session_id}: {err}")
                    del self._sessions[session_id]