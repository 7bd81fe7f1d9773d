[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "johandler"
version = "0.1.0"
description = "Client, order, fee and payment bookkeeping on SQLite with schema migrations"
requires-python = ">=3.10"
dependencies = []
keywords = ["accounting", "orders", "fees", "payments", "sqlite", "migrations"]
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
    "Topic :: Database",
    "Topic :: Office/Business :: Financial :: Accounting",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["johandler"]

[tool.pytest.ini_options]
addopts = "-ra"
