import os
import sys

import pytest

from teeny_orb.host import HostManager, HostSession, new_host_session
from teeny_orb.types import (
    SessionConfig,
    SessionError,
    SessionNotFoundError,
    SessionStatus,
    SyncDirection,
)
from teeny_orb.utils import StaticIDGenerator


def test_new_host_session(tmp_path):
    session = new_host_session(
        SessionConfig(work_dir=str(tmp_path), environment={"TEST": "value"})
    )
    assert session.id.startswith("teeny-orb-")
    assert session.status is SessionStatus.RUNNING


def test_new_host_session_with_id_gen(tmp_path):
    session = new_host_session(
        SessionConfig(work_dir=str(tmp_path)), StaticIDGenerator("host-test")
    )
    assert session.id == "host-test-1"


def test_new_host_session_default_workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    session = new_host_session(SessionConfig(), StaticIDGenerator("cwd"))
    assert session.id == "cwd-1"
    assert os.path.realpath(session.work_dir) == os.path.realpath(str(tmp_path))


def test_new_host_session_invalid_workdir():
    with pytest.raises(SessionError, match="working directory does not exist"):
        new_host_session(
            SessionConfig(work_dir="/nonexistent/directory/that/does/not/exist")
        )


def test_manager_create_and_get(tmp_path):
    manager = HostManager()
    session = manager.create_session(SessionConfig(work_dir=str(tmp_path)))
    assert manager.get_session(session.id) is session


def test_manager_create_wraps_error():
    manager = HostManager()
    with pytest.raises(SessionError, match="failed to create host session"):
        manager.create_session(SessionConfig(work_dir="/nonexistent/dir/xyz"))
    assert manager.list_sessions() == []


def test_manager_get_not_found():
    with pytest.raises(SessionNotFoundError, match="session nonexistent not found"):
        HostManager().get_session("nonexistent")


def test_manager_list_sessions(tmp_path):
    manager = HostManager()
    assert manager.list_sessions() == []
    config = SessionConfig(work_dir=str(tmp_path))
    s1 = manager.create_session(config)
    s2 = manager.create_session(config)
    ids = {s.id for s in manager.list_sessions()}
    assert ids == {s1.id, s2.id}


def test_manager_cleanup(tmp_path):
    manager = HostManager(StaticIDGenerator("h"))
    config = SessionConfig(work_dir=str(tmp_path))
    s1 = manager.create_session(config)
    s2 = manager.create_session(config)
    s1.status = SessionStatus.STOPPED
    manager.cleanup()
    sessions = manager.list_sessions()
    assert len(sessions) == 1
    assert sessions[0].id == s2.id


def test_manager_cleanup_removes_error_sessions(tmp_path):
    manager = HostManager()
    s1 = manager.create_session(SessionConfig(work_dir=str(tmp_path)))
    s1.status = SessionStatus.ERROR
    manager.cleanup()
    assert manager.list_sessions() == []


def test_execute(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    result = session.execute([sys.executable, "-c", "print('hello')"])
    assert result.exit_code == 0
    assert result.duration > 0
    assert result.stdout.read().strip() == b"hello"


def test_execute_no_command(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    with pytest.raises(ValueError, match="no command provided"):
        session.execute([])


def test_execute_with_timeout(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    result = session.execute([sys.executable, "-c", "print('test')"], timeout=30)
    assert result.exit_code == 0


def test_execute_timeout_expires(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    with pytest.raises(SessionError, match="command execution failed"):
        session.execute(
            [sys.executable, "-c", "import time; time.sleep(10)"], timeout=0.2
        )


def test_execute_nonzero_exit(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    result = session.execute(
        [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
    )
    assert result.exit_code == 3
    assert result.stderr.read() == b"bad"


def test_execute_missing_program(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    with pytest.raises(SessionError, match="failed to start command"):
        session.execute(["definitely-not-a-real-program-xyz"])


def test_execute_environment(tmp_path):
    session = new_host_session(
        SessionConfig(work_dir=str(tmp_path), environment={"TEST": "value"})
    )
    result = session.execute(
        [sys.executable, "-c", "import os; print(os.environ['TEST'])"]
    )
    assert result.stdout.read().strip() == b"value"


def test_sync_files_noop(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    for direction in SyncDirection:
        assert session.sync_files(direction) is None
    assert session.status is SessionStatus.RUNNING


def test_close(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    assert session.status is SessionStatus.RUNNING
    session.close()
    assert session.status is SessionStatus.STOPPED


def test_context_manager_closes(tmp_path):
    with HostSession("ctx", str(tmp_path)) as session:
        assert session.status is SessionStatus.RUNNING
    assert session.status is SessionStatus.STOPPED


def test_working_directory(tmp_path):
    session = new_host_session(SessionConfig(work_dir=str(tmp_path)))
    result = session.execute([sys.executable, "-c", "import os; print(os.getcwd())"])
    assert result.exit_code == 0
    printed = result.stdout.read().decode().strip()
    assert os.path.realpath(printed) == os.path.realpath(str(tmp_path))