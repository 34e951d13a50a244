[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gostd"
version = "0.1.0"
description = "Go-style error chains, in-memory streams and pipes, cancellable contexts, JSON helpers and file-system error types"
requires-python = ">=3.10"
dependencies = []
keywords = ["errors", "context", "cancellation", "io", "pipe", "json", "streams"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gostd"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
