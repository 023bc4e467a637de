[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chtypes"
version = "0.1.0"
description = "ClickHouse column types, values, decimals, column containers and connection options"
requires-python = ">=3.10"
dependencies = []
keywords = ["clickhouse", "database", "sql", "types", "columns", "decimal"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chtypes"]

[tool.pytest.ini_options]
addopts = "-ra"
