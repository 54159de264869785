[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lws"
version = "0.1.0"
description = "LeaderWorkerSet API types, declarative apply configurations and llama.cpp helper tools for leader/worker pod groups"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "leaderworkerset",
    "kubernetes",
    "distributed-inference",
    "apply-configuration",
    "llama.cpp",
    "multi-host",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lws-blobserver = "lws.blobserver:main"
lws-llamacpp-leader = "lws.leader_launcher:main"
lws-clichat = "lws.clichat:main"

[tool.hatch.build.targets.wheel]
packages = ["lws"]

[tool.hatch.build.targets.sdist]
include = ["lws", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
