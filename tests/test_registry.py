import threading

import pytest

from teeny_orb.docker import DockerError, DockerManager
from teeny_orb.host import HostManager
from teeny_orb.mocks import MockManager
from teeny_orb.registry import ManagerRegistry, get_registry
from teeny_orb.types import SessionConfig, SessionNotFoundError


def test_get_registry_is_singleton():
    first = get_registry()
    second = get_registry()
    assert first is second
    assert isinstance(first, ManagerRegistry)


def test_host_manager_same_instance(tmp_path):
    registry = get_registry()
    manager = registry.host_manager()
    assert isinstance(manager, HostManager)
    assert registry.host_manager() is manager
    session = manager.create_session(SessionConfig(work_dir=str(tmp_path)))
    assert registry.host_manager().get_session(session.id) is session


def test_docker_manager_error_propagates(monkeypatch):
    monkeypatch.setenv("DOCKER_HOST", "bogus://nowhere")
    registry = ManagerRegistry()
    with pytest.raises(DockerError, match="failed to create Docker client"):
        registry.docker_manager()


def test_docker_manager_created_once(monkeypatch):
    monkeypatch.setenv("DOCKER_HOST", "tcp://127.0.0.1:2375")
    registry = ManagerRegistry()
    manager = registry.docker_manager()
    assert isinstance(manager, DockerManager)
    assert registry.docker_manager() is manager


def test_all_sessions(tmp_path):
    registry = ManagerRegistry()
    assert registry.all_sessions() == []
    session = registry.host_manager().create_session(SessionConfig(work_dir=str(tmp_path)))
    sessions = registry.all_sessions()
    assert len(sessions) == 1
    assert sessions[0].id == session.id


def test_get_session(tmp_path):
    registry = ManagerRegistry()
    session = registry.host_manager().create_session(SessionConfig(work_dir=str(tmp_path)))
    assert registry.get_session(session.id).id == session.id


def test_get_session_not_found():
    registry = ManagerRegistry()
    with pytest.raises(SessionNotFoundError) as info:
        registry.get_session("nonexistent")
    assert str(info.value) == "session nonexistent not found"


def test_concurrent_access():
    registry = get_registry()
    expected_count = len(registry.all_sessions())
    managers = []
    counts = []
    lock = threading.Lock()

    def worker():
        reg = get_registry()
        manager = reg.host_manager()
        count = len(reg.all_sessions())
        with lock:
            managers.append(manager)
            counts.append(count)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    host_manager = registry.host_manager()
    assert len(managers) == 10
    assert all(manager is host_manager for manager in managers)
    assert counts == [expected_count] * 10


def test_mixed_sessions(tmp_path):
    docker = MockManager()
    registry = ManagerRegistry(docker_factory=lambda: docker)
    host_session = registry.host_manager().create_session(
        SessionConfig(work_dir=str(tmp_path))
    )
    initial = len(registry.all_sessions())
    assert initial == 1

    registry.docker_manager()
    docker_session = docker.create_session(SessionConfig(image="alpine", work_dir="/w"))
    ids = [s.id for s in registry.all_sessions()]
    assert ids == [host_session.id, docker_session.id]
    assert registry.get_session(host_session.id) is host_session
    assert registry.get_session(docker_session.id) is docker_session


def test_shared_registry_counts_new_host_session(tmp_path):
    registry = get_registry()
    initial = len(registry.all_sessions())
    session = registry.host_manager().create_session(SessionConfig(work_dir=str(tmp_path)))
    assert len(registry.all_sessions()) == initial + 1
    assert registry.get_session(session.id).id == session.id