# teeny-orb

teeny-orb is a command line and library for running work inside sessions. A
session runs commands either directly on the host, in a chosen working
directory, or inside a Docker container.

## Installation

```
pip install .
```

Docker sessions talk to the Docker Engine API. The client reads `DOCKER_HOST`
(`unix://`, `tcp://`, `http://` or `https://`) and falls back to
`unix:///var/run/docker.sock`.

## Command line

```
teeny-orb
teeny-orb generate "a function that reverses a string"
teeny-orb review path/to/file.py
teeny-orb session create                          # host session in the current directory
teeny-orb session create --workdir /tmp           # host session in another directory
teeny-orb session create --docker --image alpine:latest --workdir /workspace
teeny-orb session list
teeny-orb session stop <session-id>
```

Options accepted before any subcommand:

- `--config FILE`: YAML configuration file. The default is `~/.teeny-orb.yaml`.
  When a file is read, `Using config file: ...` is printed to standard error;
  a missing or unreadable file is ignored.
- `--project DIR`: the project directory. Falls back to the `PROJECT`
  environment variable, then to `project` in the configuration file.
- `--verbose`: verbose flag. Falls back to the `VERBOSE` environment variable
  (`1`, `t` or `true`), then to `verbose` in the configuration file.

`generate` and `review` each take exactly one argument; giving none, or more
than one, is an error. `session create --docker` gives the container 512 CPU
shares and 512 MB of memory and sets `TERM=xterm-256color` in every new
session. Errors are printed as `Error: ...` and the command exits with status 1.

## Library use

```python
from teeny_orb.host import HostManager
from teeny_orb.types import SessionConfig, SyncDirection

manager = HostManager()
session = manager.create_session(SessionConfig(work_dir="/tmp", environment={"TERM": "xterm"}))
result = session.execute(["echo", "hello"])
print(result.exit_code, result.stdout.read(), result.duration)  # 0 b'hello\n' ...
session.sync_files(SyncDirection.TO_CONTAINER)   # does nothing for host sessions
session.close()
manager.cleanup()                                 # drops stopped and failed sessions
```

Modules:

- `teeny_orb.types`: `SessionConfig`, `ResourceLimits`, `SessionStatus`,
  `SyncDirection`, `ExecResult`, the `Session` and `Manager` base classes, and
  the `SessionError` and `SessionNotFoundError` exceptions.
  `SessionConfig.validate()` raises `ValueError` when the image or the working
  directory is empty. Sessions can be used as context managers; leaving the
  block closes them.
- `teeny_orb.utils`: `DefaultIDGenerator` (`teeny-orb-<nanoseconds>`),
  `StaticIDGenerator` (`<prefix>-1`, `<prefix>-2`, ...), `map_to_env_list` and
  `separate_output`.
- `teeny_orb.host`: `HostSession`, `HostManager` and `new_host_session`.
  `HostSession.execute` takes an optional `timeout` in seconds and raises
  `ValueError` for an empty command.
- `teeny_orb.docker`: `DockerClient` (with `DockerClient.from_env()`),
  `DockerSession`, `DockerManager` and `DockerError`.
  `DockerSession.sync_files_advanced` copies `project_path` to or from the
  container's working directory.
- `teeny_orb.sync`: `FileSyncer`, which moves a directory to or from a
  container as a tar archive, leaving out names that begin with a dot.
- `teeny_orb.registry`: `get_registry()` returns the shared
  `ManagerRegistry`. It holds the host manager and, once `docker_manager()` has
  been called, the Docker manager; `all_sessions()` and `get_session()` look
  in both.
- `teeny_orb.mocks`: `MockManager` and `MockSession`, for tests that need
  sessions but should not run commands.

Looking up a session that does not exist raises `SessionNotFoundError`, a
kind of `SessionError`.

## What it does not do

- Running `teeny-orb` with no subcommand prints a greeting; there is no
  interactive session.
- `generate` and `review` only echo their argument and a note; no code is
  generated or reviewed.
- Sessions are kept in memory only. `session list` and `session stop` see just
  the sessions created in the same process, so a session created by one
  `teeny-orb` invocation is not known to the next.
- `DockerSession.sync_files` only prints what it would do; use
  `sync_files_advanced` to copy files. A bidirectional sync copies to the
  container only.
- Container output is returned whole as standard output; standard error is
  always empty.