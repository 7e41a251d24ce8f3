[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roomchat"
version = "1.0.0"
description = "A small TCP chat server and client with a lobby and named chat rooms"
requires-python = ">=3.10"
keywords = ["chat", "asyncio", "tcp", "rooms", "server", "client"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
roomchat-server = "roomchat.server:main"
roomchat-client = "roomchat.client:main"

[tool.hatch.build.targets.wheel]
packages = ["roomchat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
