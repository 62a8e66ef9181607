[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tcpdemos"
version = "0.1.0"
description = "Small TCP client/server demos: a framed stock-quote service, an asyncio ping/echo pair and a threaded blocking ping/echo pair."
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "sockets", "asyncio", "echo", "ping", "framing", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
tcpdemos-stock-server = "tcpdemos.stock_server:main"
tcpdemos-stock-client = "tcpdemos.stock_client:main"
tcpdemos-async-server = "tcpdemos.async_server:main"
tcpdemos-async-client = "tcpdemos.async_client:main"
tcpdemos-sync-server = "tcpdemos.sync_server:main"
tcpdemos-sync-client = "tcpdemos.sync_client:main"

[tool.hatch.build.targets.wheel]
packages = ["tcpdemos"]

[tool.hatch.build.targets.sdist]
include = ["tcpdemos", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
warn_unused_ignores = true
