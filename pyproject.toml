[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rmdbstore"
version = "0.1.0"
description = "Storage layer of a small relational database: paged disk files, an LRU buffer pool, catalog metadata and transaction records"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "database",
    "storage",
    "buffer pool",
    "lru",
    "pages",
    "catalog",
    "transactions",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rmdbstore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
