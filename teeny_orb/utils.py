"""ID generation and small helpers for sessions."""

from __future__ import annotations

import abc
import io
import threading
import time
from collections.abc import Mapping
from typing import IO


class IDGenerator(abc.ABC):
    """Produces unique session identifiers."""

    @abc.abstractmethod
    def generate_id(self) -> str:
        """Return a new identifier."""


class DefaultIDGenerator(IDGenerator):
    """Time-based identifiers of the form ``teeny-orb-<nanoseconds>``."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def generate_id(self) -> str:
        with self._lock:
            # Keep IDs strictly increasing even on coarse clocks.
            stamp = max(time.time_ns(), self._last + 1)
            self._last = stamp
        return f"teeny-orb-{stamp}"


class StaticIDGenerator(IDGenerator):
    """Predictable identifiers of the form ``<prefix>-<n>``, counting from 1."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self.counter = 0

    def generate_id(self) -> str:
        self.counter += 1
        return f"{self.prefix}-{self.counter}"


def map_to_env_list(env: Mapping[str, str]) -> list[str]:
    """Turn an environment mapping into ``KEY=value`` strings."""
    return [f"{key}={value}" for key, value in env.items()]


def separate_output(stream: IO[bytes]) -> tuple[IO[bytes], IO[bytes]]:
    """Split a combined output stream into stdout and stderr.

    The whole stream is treated as stdout; stderr is empty.
    """
    return stream, io.BytesIO(b"")