"""Copying a project directory between the host and a container as tar archives."""

from __future__ import annotations

import io
import os
import shutil
import tarfile
from collections.abc import Iterator
from pathlib import Path
from typing import IO, TYPE_CHECKING

from .types import SessionError

if TYPE_CHECKING:
    from .docker import DockerClient


class FileSyncer:
    """Moves files between a host directory and a directory inside a container."""

    def __init__(
        self,
        client: DockerClient,
        container_id: str,
        host_path: str,
        container_path: str,
    ) -> None:
        self.client = client
        self.container_id = container_id
        self.host_path = host_path
        self.container_path = container_path

    def sync_to_container(self) -> None:
        """Copy the host directory into the container."""
        try:
            archive = self.create_tar_from_host()
        except (OSError, tarfile.TarError) as err:
            raise SessionError(f"failed to create tar from host: {err}") from err

        try:
            self.client.copy_to_container(
                self.container_id, self.container_path, archive
            )
        except SessionError as err:
            raise SessionError(f"failed to copy to container: {err}") from err

    def sync_from_container(self) -> None:
        """Copy the container directory back onto the host."""
        try:
            stream = self.client.copy_from_container(
                self.container_id, self.container_path
            )
        except SessionError as err:
            raise SessionError(f"failed to copy from container: {err}") from err

        try:
            with stream:
                self.extract_tar_to_host(stream)
        except (OSError, tarfile.TarError) as err:
            raise SessionError(f"failed to extract tar to host: {err}") from err

    def _walk(self) -> Iterator[Path]:
        """Yield the root and every non-hidden entry below it, in lexical order."""
        root = Path(self.host_path)
        os.lstat(root)
        yield root

        def below(directory: Path) -> Iterator[Path]:
            with os.scandir(directory) as entries:
                ordered = sorted(entries, key=lambda entry: entry.name)
            for entry in ordered:
                if entry.name.startswith("."):
                    continue
                yield Path(entry.path)
                if entry.is_dir(follow_symlinks=False):
                    yield from below(Path(entry.path))

        if root.is_dir() and not root.is_symlink():
            yield from below(root)

    def create_tar_from_host(self) -> bytes:
        """Return a tar archive of the host directory, leaving out hidden entries."""
        root = Path(self.host_path)
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w") as tar:
            for path in self._walk():
                arcname = path.relative_to(root).as_posix()
                info = tar.gettarinfo(str(path), arcname=arcname)
                if info is None:
                    continue
                if info.isreg():
                    with open(path, "rb") as source:
                        tar.addfile(info, source)
                else:
                    tar.addfile(info)
        return buffer.getvalue()

    def extract_tar_to_host(self, stream: IO[bytes]) -> None:
        """Unpack directories and regular files from a tar stream into the host directory."""
        with tarfile.open(fileobj=stream, mode="r|") as tar:
            for member in tar:
                if member.name.startswith("."):
                    continue

                target = os.path.normpath(
                    os.path.join(self.host_path, member.name.lstrip("/"))
                )

                if member.isdir():
                    os.makedirs(target, mode=member.mode & 0o7777, exist_ok=True)
                elif member.isreg():
                    os.makedirs(os.path.dirname(target) or ".", 0o755, exist_ok=True)
                    source = tar.extractfile(member)
                    fd = os.open(
                        target,
                        os.O_CREAT | os.O_WRONLY | os.O_TRUNC,
                        member.mode & 0o7777,
                    )
                    with os.fdopen(fd, "wb") as dest:
                        if source is not None:
                            shutil.copyfileobj(source, dest)
                else:
                    kind = member.type.decode("latin-1")
                    print(f"Skipping unsupported file type: {kind} for {member.name}")