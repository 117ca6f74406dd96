[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "teeny-orb"
version = "0.1.0"
description = "Coding assistant command line that runs work in host or Docker container sessions"
requires-python = ">=3.10"
keywords = ["coding-assistant", "containers", "docker", "sessions", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
]
dependencies = [
    "httpx",
    "click",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
teeny-orb = "teeny_orb.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["teeny_orb"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
