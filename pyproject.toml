[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "assistclient"
version = "0.1.0"
description = "Client for assistant-style HTTP APIs: threads, runs, vector stores, moderation, speech and event streams."
requires-python = ">=3.10"
dependencies = []
keywords = ["api", "client", "assistants", "threads", "runs", "vector-store", "moderation", "server-sent-events"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["assistclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
